"""Import index storage with save/load and module search."""

import fnmatch
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..parser.imports import ImportDeclaration


@dataclass
class ImportIndex:
    """Import declarations for every scanned file of a repository."""
    repo: str                           # "owner/repo"
    owner: str
    name: str
    indexed_at: str                     # ISO timestamp
    source_files: list[str]             # All scanned file paths
    imports: dict[str, list[dict]]      # File path -> serialized declarations

    def get_file_imports(self, file_path: str) -> Optional[list[dict]]:
        """Declarations of one file, or None if it was not scanned."""
        if file_path not in self.imports:
            return None
        return self.imports[file_path]

    def search(self, module: str, file_pattern: Optional[str] = None) -> list[dict]:
        """Find declarations importing a module or a dotted path under it.

        ``Foundation`` matches ``import Foundation`` and
        ``import struct Foundation.Date``; ``Foundation.Date`` matches only
        the latter.
        """
        wanted = module.split(".")
        results = []
        for file_path, declarations in self.imports.items():
            if file_pattern and not self._match_pattern(file_path, file_pattern):
                continue
            for decl in declarations:
                if decl.get("path", [])[:len(wanted)] == wanted:
                    results.append({"file": file_path, **decl})
        return results

    def module_counts(self) -> dict[str, int]:
        """Number of files importing each top-level module."""
        counts: dict[str, int] = {}
        for declarations in self.imports.values():
            modules = {ImportDeclaration.from_dict(d).module for d in declarations}
            modules.discard("")
            for module in modules:
                counts[module] = counts.get(module, 0) + 1
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

    def _match_pattern(self, file_path: str, pattern: str) -> bool:
        """Match file path against glob pattern."""
        return fnmatch.fnmatch(file_path, pattern) or fnmatch.fnmatch(file_path, f"*/{pattern}")


class IndexStore:
    """Storage for import indexes, one JSON file per repository."""

    def __init__(self, base_path: Optional[str] = None):
        """Initialize store.

        Args:
            base_path: Base directory for storage. Defaults to ~/.swift-imports-index/
        """
        if base_path:
            self.base_path = Path(base_path)
        else:
            self.base_path = Path.home() / ".swift-imports-index"

        self.base_path.mkdir(parents=True, exist_ok=True)

    def _index_path(self, owner: str, name: str) -> Path:
        """Path to index JSON file."""
        return self.base_path / f"{owner}-{name}.json"

    def save_index(
        self,
        owner: str,
        name: str,
        source_files: list[str],
        imports: dict[str, list[ImportDeclaration]],
    ) -> ImportIndex:
        """Save an index to storage.

        Args:
            owner: Repository owner
            name: Repository name
            source_files: List of scanned file paths
            imports: Dict mapping file path to its declarations

        Returns:
            ImportIndex object
        """
        index = ImportIndex(
            repo=f"{owner}/{name}",
            owner=owner,
            name=name,
            indexed_at=datetime.now().isoformat(),
            source_files=source_files,
            imports={
                path: [d.to_dict() for d in declarations]
                for path, declarations in imports.items()
            },
        )

        with open(self._index_path(owner, name), "w", encoding="utf-8") as f:
            json.dump(self._index_to_dict(index), f, indent=2)

        return index

    def load_index(self, owner: str, name: str) -> Optional[ImportIndex]:
        """Load index from storage."""
        index_path = self._index_path(owner, name)

        if not index_path.exists():
            return None

        with open(index_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return ImportIndex(
            repo=data["repo"],
            owner=data["owner"],
            name=data["name"],
            indexed_at=data["indexed_at"],
            source_files=data["source_files"],
            imports=data["imports"],
        )

    def resolve_repo(self, repo: str) -> Optional[tuple[str, str]]:
        """Turn "owner/name" or a bare repo name into (owner, name).

        Returns None for identifiers that would escape the storage directory.
        """
        if "/" in repo:
            owner, name = repo.split("/", 1)
            if not self._is_safe_part(owner) or not self._is_safe_part(name):
                return None
            return owner, name

        matching = [r for r in self.list_repos() if r["repo"].endswith(f"/{repo}")]
        if not matching:
            return None
        owner, name = matching[0]["repo"].split("/", 1)
        return owner, name

    @staticmethod
    def _is_safe_part(part: str) -> bool:
        return bool(part) and "/" not in part and "\\" not in part and ".." not in part

    def list_repos(self) -> list[dict]:
        """List all indexed repositories."""
        repos = []

        for index_file in sorted(self.base_path.glob("*.json")):
            try:
                with open(index_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                repos.append({
                    "repo": data["repo"],
                    "indexed_at": data["indexed_at"],
                    "file_count": len(data["source_files"]),
                    "import_count": sum(len(d) for d in data["imports"].values()),
                })
            except (OSError, ValueError, KeyError):
                continue

        return repos

    def delete_index(self, owner: str, name: str) -> bool:
        """Delete an index."""
        index_path = self._index_path(owner, name)

        if index_path.exists():
            index_path.unlink()
            return True

        return False

    def _index_to_dict(self, index: ImportIndex) -> dict:
        """Convert ImportIndex to dict."""
        return {
            "repo": index.repo,
            "owner": index.owner,
            "name": index.name,
            "indexed_at": index.indexed_at,
            "source_files": index.source_files,
            "imports": index.imports,
        }
