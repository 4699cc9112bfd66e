"""Tests for tools module."""

import asyncio

import httpx
import pytest

from swift_imports_mcp.tools import index_repo as index_repo_module
from swift_imports_mcp.tools.index_repo import (
    parse_github_url,
    discover_source_files,
    should_skip_file,
    fetch_file_content,
    index_repo,
)
from swift_imports_mcp.tools.index_folder import discover_local_files, index_folder
from swift_imports_mcp.tools.get_file_imports import get_file_imports
from swift_imports_mcp.tools.search_imports import search_imports
from swift_imports_mcp.tools.list_repos import list_repos
from swift_imports_mcp.tools.parse_imports import parse_imports


def test_parse_github_url_full():
    """Test parsing full GitHub URL."""
    assert parse_github_url("https://github.com/owner/repo") == ("owner", "repo")


def test_parse_github_url_with_git():
    """Test parsing URL with .git suffix."""
    assert parse_github_url("https://github.com/owner/repo.git") == ("owner", "repo")


def test_parse_github_url_short():
    """Test parsing owner/repo shorthand."""
    assert parse_github_url("owner/repo") == ("owner", "repo")


def test_parse_github_url_invalid():
    with pytest.raises(ValueError):
        parse_github_url("https://github.com/")


def test_should_skip_file():
    """Test skip patterns."""
    assert should_skip_file("Pods/Alamofire/Source/Session.swift") is True
    assert should_skip_file(".build/checkouts/foo/Package.swift") is True
    assert should_skip_file("Sources/App/main.swift") is False


def test_discover_source_files():
    """Test file discovery from tree entries."""
    tree_entries = [
        {"path": "Sources/App/main.swift", "type": "blob", "size": 1000},
        {"path": "Pods/Foo/Foo.swift", "type": "blob", "size": 500},
        {"path": "README.md", "type": "blob", "size": 200},
        {"path": "Sources/App", "type": "tree"},
        {"path": "Scratch/Playground.swift", "type": "blob", "size": 100},
        {"path": "Sources/App/Huge.swift", "type": "blob", "size": 10 * 1024 * 1024},
    ]

    files = discover_source_files(tree_entries, gitignore_content="Scratch/\n")

    assert files == ["Sources/App/main.swift"]


def test_discover_source_files_prioritizes_sources():
    """Test that Sources/ files are kept first when over the limit."""
    tree_entries = [
        {"path": f"Other/File{i}.swift", "type": "blob", "size": 100}
        for i in range(300)
    ] + [
        {"path": f"Sources/File{i}.swift", "type": "blob", "size": 100}
        for i in range(300)
    ]

    files = discover_source_files(tree_entries, max_files=100)

    assert len(files) == 100
    assert all(f.startswith("Sources/") for f in files)


def _write_project(root):
    app = root / "Sources" / "App"
    app.mkdir(parents=True)
    (app / "main.swift").write_text("import Foundation\nimport struct CoreGraphics.CGPoint\n")
    tests = root / "Tests" / "AppTests"
    tests.mkdir(parents=True)
    (tests / "AppTests.swift").write_text("import XCTest\n@testable import App\n")
    (root / "Pods").mkdir()
    (root / "Pods" / "Vendored.swift").write_text("import Vendored\n")
    (root / "README.md").write_text("# App\n")


def test_discover_local_files(tmp_path):
    _write_project(tmp_path)

    files = discover_local_files(tmp_path)

    assert files == ["Sources/App/main.swift", "Tests/AppTests/AppTests.swift"]


def test_index_folder_then_query(tmp_path):
    project = tmp_path / "App"
    project.mkdir()
    _write_project(project)
    storage = str(tmp_path / "index")

    result = index_folder(str(project), storage_path=storage)

    assert result["success"] is True
    assert result["repo"] == "local/App"
    assert result["file_count"] == 2
    assert result["import_count"] == 4

    outline = get_file_imports("App", "Tests/AppTests/AppTests.swift", storage_path=storage)
    assert [d["description"] for d in outline["imports"]] == [
        "import XCTest",
        "@testable import App",
    ]

    found = search_imports("local/App", "CoreGraphics.CGPoint", storage_path=storage)
    assert found["result_count"] == 1
    assert found["results"][0]["kind"] == "struct"

    repos = list_repos(storage_path=storage)
    assert repos["count"] == 1


def test_index_folder_missing(tmp_path):
    result = index_folder(str(tmp_path / "nope"), storage_path=str(tmp_path))
    assert result["success"] is False


def test_index_folder_without_swift_files(tmp_path):
    (tmp_path / "notes.txt").write_text("import Foundation")
    result = index_folder(str(tmp_path), storage_path=str(tmp_path / "index"))
    assert result == {"success": False, "error": "No Swift files found"}


def test_queries_on_unknown_repo(tmp_path):
    assert "error" in get_file_imports("ghost", "a.swift", storage_path=str(tmp_path))
    assert "error" in search_imports("ghost", "Foundation", storage_path=str(tmp_path))


def test_parse_imports_with_tokens():
    result = parse_imports(
        "@testable import func Foundation.Func.Sort",
        tokens=[
            {"type": "keyword", "offset": 0, "length": 9},
            {"type": "keyword", "offset": 10, "length": 6},
            {"type": "keyword", "offset": 17, "length": 4},
            {"type": "identifier", "offset": 22, "length": 10},
            {"type": "identifier", "offset": 33, "length": 4},
            {"type": "identifier", "offset": 38, "length": 4},
        ],
    )

    assert result["descriptions"] == ["@testable import func Foundation.Func.Sort"]
    assert result["imports"][0]["path"] == ["Foundation", "Func", "Sort"]


def test_parse_imports_invalid_tokens():
    result = parse_imports("import", tokens=[{"type": "keyword", "offset": 0, "length": 99}])
    assert "error" in result


def test_parse_imports_tokenizes_when_no_tokens():
    result = parse_imports("import Foundation\n")
    assert result["descriptions"] == ["import Foundation"]


def test_search_imports_negative_max_results(tmp_path):
    project = tmp_path / "App"
    project.mkdir()
    _write_project(project)
    storage = str(tmp_path / "index")
    index_folder(str(project), storage_path=storage)

    found = search_imports("App", "Foundation", max_results=-1, storage_path=storage)

    assert found["total_matches"] == 1
    assert found["result_count"] == 0
    assert found["results"] == []


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.github.com/repos/o/r")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


TREE = [
    {"path": "Sources/A.swift", "type": "blob", "size": 100},
    {"path": "Sources/B.swift", "type": "blob", "size": 100},
]


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code, error", [
    (404, "Repository not found: o/r"),
    (403, "GitHub API rate limit exceeded. Set GITHUB_TOKEN."),
])
async def test_index_repo_maps_tree_errors(tmp_path, monkeypatch, status_code, error):
    async def fake_tree(owner, repo, token=None):
        raise _status_error(status_code)

    monkeypatch.setattr(index_repo_module, "fetch_repo_tree", fake_tree)

    result = await index_repo("o/r", storage_path=str(tmp_path))

    assert result == {"success": False, "error": error}


@pytest.mark.asyncio
async def test_index_repo_reports_failed_fetches(tmp_path, monkeypatch):
    async def fake_tree(owner, repo, token=None):
        return TREE

    async def fake_content(owner, repo, path, token=None):
        if path == "Sources/A.swift":
            return "import Foundation\n"
        raise _status_error(404)

    monkeypatch.setattr(index_repo_module, "fetch_repo_tree", fake_tree)
    monkeypatch.setattr(index_repo_module, "fetch_file_content", fake_content)

    result = await index_repo("o/r", storage_path=str(tmp_path))

    assert result["success"] is True
    assert result["file_count"] == 1
    assert result["warnings"] == ["Failed to fetch Sources/B.swift"]

    saved = get_file_imports("o/r", "Sources/A.swift", storage_path=str(tmp_path))
    assert [d["description"] for d in saved["imports"]] == ["import Foundation"]


@pytest.mark.asyncio
async def test_index_repo_limits_concurrent_fetches(tmp_path, monkeypatch):
    tree = [
        {"path": f"Sources/File{i}.swift", "type": "blob", "size": 100}
        for i in range(25)
    ]
    active = 0
    peak = 0

    async def fake_tree(owner, repo, token=None):
        return tree

    async def fake_content(owner, repo, path, token=None):
        nonlocal active, peak
        if path == ".gitignore":
            raise _status_error(404)
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0)
        active -= 1
        return "import UIKit\n"

    monkeypatch.setattr(index_repo_module, "fetch_repo_tree", fake_tree)
    monkeypatch.setattr(index_repo_module, "fetch_file_content", fake_content)

    result = await index_repo("o/r", storage_path=str(tmp_path))

    assert result["success"] is True
    assert result["file_count"] == 25
    assert 1 < peak <= 10


@pytest.mark.asyncio
async def test_fetch_file_content_quotes_path(monkeypatch):
    seen = []
    real_client = httpx.AsyncClient

    def handler(request):
        seen.append(request.url.raw_path)
        return httpx.Response(200, text="import Foundation\n")

    monkeypatch.setattr(
        httpx, "AsyncClient",
        lambda: real_client(transport=httpx.MockTransport(handler)),
    )

    content = await fetch_file_content("o", "r", "Sources/My App/A#B?.swift")

    assert content == "import Foundation\n"
    assert seen == [b"/repos/o/r/contents/Sources/My%20App/A%23B%3F.swift"]
