"""List indexed repositories."""

from typing import Optional

from ..storage import IndexStore


def list_repos(storage_path: Optional[str] = None) -> dict:
    """List all indexed repositories with their file and import totals."""
    store = IndexStore(base_path=storage_path)
    repos = store.list_repos()

    return {
        "count": len(repos),
        "total_files": sum(r["file_count"] for r in repos),
        "total_imports": sum(r["import_count"] for r in repos),
        "repos": repos,
    }
