"""Search import declarations across a repository."""

from typing import Optional

from ..storage import IndexStore


def search_imports(
    repo: str,
    module: str,
    file_pattern: Optional[str] = None,
    max_results: int = 50,
    storage_path: Optional[str] = None
) -> dict:
    """Find the files that import a module or a symbol under it.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        module: Module name or dotted path (e.g. "Foundation.Date")
        file_pattern: Optional glob pattern to filter files
        max_results: Maximum results to return
        storage_path: Custom storage path

    Returns:
        Dict with matching declarations
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    results = index.search(module, file_pattern=file_pattern)
    max_results = max(0, max_results)

    return {
        "repo": index.repo,
        "module": module,
        "total_matches": len(results),
        "result_count": len(results[:max_results]),
        "results": results[:max_results],
    }
