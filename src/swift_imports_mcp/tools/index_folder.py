"""Index local folder tool - walk, scan imports, save."""

import logging
from pathlib import Path
from typing import Optional

from ..parser import parse_file, LANGUAGE_EXTENSIONS
from ..storage import IndexStore
from .index_repo import prioritize_files, should_skip_file

logger = logging.getLogger(__name__)


def discover_local_files(
    folder_path: Path,
    max_files: int = 500,
    max_size: int = 500 * 1024,  # 500KB
) -> list[str]:
    """Discover Swift files in a local folder.

    Args:
        folder_path: Root folder to scan
        max_files: Maximum number of files to index
        max_size: Maximum file size in bytes

    Returns:
        List of POSIX paths relative to folder_path
    """
    files = []

    for file_path in folder_path.rglob("*"):
        if not file_path.is_file():
            continue

        rel_path = file_path.relative_to(folder_path).as_posix()

        if should_skip_file(rel_path):
            continue

        if file_path.suffix not in LANGUAGE_EXTENSIONS:
            continue

        try:
            if file_path.stat().st_size > max_size:
                continue
        except OSError:
            continue

        files.append(rel_path)

    return prioritize_files(sorted(files), max_files)


def index_folder(
    path: str,
    storage_path: Optional[str] = None
) -> dict:
    """Index the imports of a local folder containing Swift code.

    Args:
        path: Path to local folder (absolute or relative)
        storage_path: Custom storage path (default: ~/.swift-imports-index/)

    Returns:
        Dict with indexing results
    """
    folder_path = Path(path).expanduser().resolve()

    if not folder_path.exists():
        return {"success": False, "error": f"Folder not found: {path}"}

    if not folder_path.is_dir():
        return {"success": False, "error": f"Path is not a directory: {path}"}

    warnings = []

    try:
        source_files = discover_local_files(folder_path)

        if not source_files:
            return {"success": False, "error": "No Swift files found"}

        imports = {}
        for rel_path in source_files:
            file_path = folder_path / rel_path
            try:
                content = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to read %s: %s", file_path, e)
                warnings.append(f"Failed to read {rel_path}: {e}")
                continue

            try:
                imports[rel_path] = parse_file(content, LANGUAGE_EXTENSIONS[file_path.suffix])
            except Exception as e:
                logger.warning("Failed to parse %s: %s", rel_path, e)
                warnings.append(f"Failed to parse {rel_path}: {e}")

        if not imports:
            return {"success": False, "error": "No files could be scanned"}

        # Folder name as repo name, "local" as owner
        owner = "local"
        repo_name = folder_path.name
        parsed_files = list(imports)

        store = IndexStore(base_path=storage_path)
        index = store.save_index(
            owner=owner,
            name=repo_name,
            source_files=parsed_files,
            imports=imports,
        )
        logger.info("Indexed %s: %d files", index.repo, len(parsed_files))

        result = {
            "success": True,
            "repo": index.repo,
            "folder_path": str(folder_path),
            "indexed_at": index.indexed_at,
            "file_count": len(parsed_files),
            "import_count": sum(len(d) for d in imports.values()),
            "modules": index.module_counts(),
        }

        if warnings:
            result["warnings"] = warnings

        if len(source_files) >= 500:
            result["note"] = "Folder has many files; indexed first 500"

        return result

    except Exception as e:
        logger.exception("Indexing %s failed", folder_path)
        return {"success": False, "error": f"Indexing failed: {str(e)}"}
