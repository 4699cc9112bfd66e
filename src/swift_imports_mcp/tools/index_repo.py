"""Index repository tool - fetch, scan imports, save."""

import asyncio
import logging
import os
from typing import Optional
from urllib.parse import quote, urlparse

import httpx
import pathspec

from ..parser import parse_file, LANGUAGE_EXTENSIONS
from ..storage import IndexStore

logger = logging.getLogger(__name__)


# File patterns to skip
SKIP_PATTERNS = [
    ".build/", "Pods/", "Carthage/", "DerivedData/", ".swiftpm/",
    "xcuserdata/", ".git/", "build/", "vendor/",
    "fixtures/", "snapshots/", "__Snapshots__/",
    "generated/", "Generated/",
]


def parse_github_url(url: str) -> tuple[str, str]:
    """Extract owner/repo from GitHub URL or owner/repo string.

    Supports:
    - https://github.com/owner/repo
    - https://github.com/owner/repo.git
    - owner/repo
    """
    url = url.removesuffix(".git")

    # If it contains a / but not ://, treat as owner/repo
    if "/" in url and "://" not in url:
        parts = url.split("/")
        return parts[0], parts[1]

    parsed = urlparse(url)
    parts = parsed.path.strip("/").split("/")
    if len(parts) >= 2 and all(parts[:2]):
        return parts[0], parts[1]

    raise ValueError(f"Could not parse GitHub URL: {url}")


def should_skip_file(path: str) -> bool:
    """Check if file should be skipped based on path patterns."""
    normalized = path.replace("\\", "/")
    return any(pattern in normalized for pattern in SKIP_PATTERNS)


def prioritize_files(paths: list[str], max_files: int) -> list[str]:
    """Keep at most max_files paths, preferring Sources/ and shallow paths."""
    if len(paths) <= max_files:
        return paths

    priority_dirs = ["Sources/", "src/", "Source/", "lib/"]

    def priority_key(path: str) -> tuple:
        for i, prefix in enumerate(priority_dirs):
            if path.startswith(prefix):
                return (i, path.count("/"), path)
        return (len(priority_dirs), path.count("/"), path)

    return sorted(paths, key=priority_key)[:max_files]


def discover_source_files(
    tree_entries: list[dict],
    gitignore_content: Optional[str] = None,
    max_files: int = 500,
    max_size: int = 500 * 1024  # 500KB
) -> list[str]:
    """Discover Swift files from git tree entries.

    Applies filtering pipeline:
    1. Type filter (blobs only)
    2. Extension filter
    3. Skip list patterns
    4. Size limit
    5. .gitignore matching
    6. File count limit
    """
    gitignore_spec = None
    if gitignore_content:
        gitignore_spec = pathspec.PathSpec.from_lines(
            "gitwildmatch",
            gitignore_content.splitlines()
        )

    files = []

    for entry in tree_entries:
        if entry.get("type") != "blob":
            continue

        path = entry.get("path", "")
        _, ext = os.path.splitext(path)
        if ext not in LANGUAGE_EXTENSIONS:
            continue

        if should_skip_file(path):
            continue

        if entry.get("size", 0) > max_size:
            continue

        if gitignore_spec and gitignore_spec.match_file(path):
            continue

        files.append(path)

    return prioritize_files(files, max_files)


async def fetch_repo_tree(owner: str, repo: str, token: Optional[str] = None) -> list[dict]:
    """Fetch full repository tree via git/trees API.

    Uses recursive=1 to get all paths in a single API call.
    """
    url = f"https://api.github.com/repos/{owner}/{repo}/git/trees/HEAD"
    params = {"recursive": "1"}
    headers = {"Accept": "application/vnd.github.v3+json"}

    if token:
        headers["Authorization"] = f"token {token}"

    async with httpx.AsyncClient() as client:
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        data = response.json()

    return data.get("tree", [])


async def fetch_file_content(
    owner: str,
    repo: str,
    path: str,
    token: Optional[str] = None
) -> str:
    """Fetch raw file content from GitHub."""
    url = f"https://api.github.com/repos/{owner}/{repo}/contents/{quote(path)}"
    headers = {"Accept": "application/vnd.github.v3.raw"}

    if token:
        headers["Authorization"] = f"token {token}"

    async with httpx.AsyncClient() as client:
        response = await client.get(url, headers=headers)
        response.raise_for_status()
        return response.text


async def fetch_gitignore(
    owner: str,
    repo: str,
    token: Optional[str] = None
) -> Optional[str]:
    """Fetch .gitignore file if it exists."""
    try:
        return await fetch_file_content(owner, repo, ".gitignore", token)
    except httpx.HTTPError:
        return None


async def index_repo(
    url: str,
    github_token: Optional[str] = None,
    storage_path: Optional[str] = None
) -> dict:
    """Index the imports of a GitHub repository's Swift files.

    Args:
        url: GitHub repository URL or owner/repo string
        github_token: GitHub API token (optional, for private repos/higher rate limits)
        storage_path: Custom storage path (default: ~/.swift-imports-index/)

    Returns:
        Dict with indexing results
    """
    try:
        owner, repo = parse_github_url(url)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    if not github_token:
        github_token = os.environ.get("GITHUB_TOKEN")

    warnings = []

    try:
        try:
            tree_entries = await fetch_repo_tree(owner, repo, github_token)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return {"success": False, "error": f"Repository not found: {owner}/{repo}"}
            elif e.response.status_code == 403:
                return {"success": False, "error": "GitHub API rate limit exceeded. Set GITHUB_TOKEN."}
            raise

        gitignore_content = await fetch_gitignore(owner, repo, github_token)
        source_files = discover_source_files(tree_entries, gitignore_content)

        if not source_files:
            return {"success": False, "error": "No Swift files found"}

        semaphore = asyncio.Semaphore(10)  # Limit concurrent requests

        async def fetch_with_limit(path: str) -> tuple[str, Optional[str]]:
            async with semaphore:
                try:
                    return path, await fetch_file_content(owner, repo, path, github_token)
                except httpx.HTTPError as e:
                    logger.warning("Failed to fetch %s/%s:%s: %s", owner, repo, path, e)
                    warnings.append(f"Failed to fetch {path}")
                    return path, None

        file_contents = await asyncio.gather(*(fetch_with_limit(p) for p in source_files))

        imports = {}
        for path, content in file_contents:
            if content is None:
                continue

            _, ext = os.path.splitext(path)
            try:
                imports[path] = parse_file(content, LANGUAGE_EXTENSIONS[ext])
            except Exception as e:
                logger.warning("Failed to parse %s: %s", path, e)
                warnings.append(f"Failed to parse {path}")

        if not imports:
            return {"success": False, "error": "No files could be scanned"}

        parsed_files = list(imports)
        store = IndexStore(base_path=storage_path)
        index = store.save_index(
            owner=owner,
            name=repo,
            source_files=parsed_files,
            imports=imports,
        )
        logger.info("Indexed %s: %d files", index.repo, len(parsed_files))

        result = {
            "success": True,
            "repo": index.repo,
            "indexed_at": index.indexed_at,
            "file_count": len(parsed_files),
            "import_count": sum(len(d) for d in imports.values()),
            "modules": index.module_counts(),
        }

        if len(source_files) >= 500:
            warnings.append("Repository has many files; indexed first 500")
        if warnings:
            result["warnings"] = warnings

        return result

    except Exception as e:
        logger.exception("Indexing %s/%s failed", owner, repo)
        return {"success": False, "error": f"Indexing failed: {str(e)}"}
