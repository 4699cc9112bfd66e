"""Get the import declarations of one indexed file."""

from typing import Optional

from ..storage import IndexStore


def get_file_imports(
    repo: str,
    file_path: str,
    storage_path: Optional[str] = None
) -> dict:
    """Get the imports of a file in an indexed repository.

    Args:
        repo: Repository identifier (owner/repo or just repo name)
        file_path: Path to file within repository
        storage_path: Custom storage path

    Returns:
        Dict with the file's declarations in source order
    """
    store = IndexStore(base_path=storage_path)
    resolved = store.resolve_repo(repo)
    if not resolved:
        return {"error": f"Repository not found: {repo}"}
    owner, name = resolved

    index = store.load_index(owner, name)
    if not index:
        return {"error": f"Repository not indexed: {owner}/{name}"}

    declarations = index.get_file_imports(file_path)
    if declarations is None:
        return {"error": f"File not indexed: {file_path}"}

    return {
        "repo": index.repo,
        "file": file_path,
        "import_count": len(declarations),
        "imports": declarations,
    }
