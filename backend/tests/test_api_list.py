"""Tests for the JSON listing endpoint."""

import pytest
from httpx import AsyncClient


def _names(data):
    return [f["name"] for f in data["files"]]


@pytest.mark.asyncio
async def test_root_listing(client: AsyncClient):
    resp = await client.get("/api/list", params={"path": ".", "sort": "+name"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["path"] == ""
    assert data["sort"] == "name"
    assert data["dir"] == "asc"
    assert _names(data) == ["dir1", "file1.txt"]


@pytest.mark.asyncio
async def test_record_fields(client: AsyncClient):
    data = (await client.get("/api/list")).json()
    record = next(f for f in data["files"] if f["name"] == "file1.txt")
    assert record["path"] == "file1.txt"
    assert record["is_dir"] is False
    assert record["size"] == len("file one\n")
    assert record["size_human"] == "9 B"
    assert record["time_str"]
    assert record["last_modified"]
    assert record["is_viewable"] is True

    directory = next(f for f in data["files"] if f["name"] == "dir1")
    assert directory["size_human"] == "-"
    assert directory["is_viewable"] is False


@pytest.mark.asyncio
async def test_excluded_absent(client: AsyncClient):
    data = (await client.get("/api/list")).json()
    assert ".git" not in _names(data)


@pytest.mark.asyncio
@pytest.mark.parametrize("sort, expected_sort, expected_dir", [
    ("-size", "size", "desc"),
    ("+mtime", "date", "asc"),
    ("-mtime", "date", "desc"),
    ("name", "name", "asc"),
    ("bogus", "name", "asc"),
    ("", "name", "asc"),
])
async def test_sort_parameter(client: AsyncClient, sort, expected_sort, expected_dir):
    data = (await client.get("/api/list", params={"sort": sort})).json()
    assert data["sort"] == expected_sort
    assert data["dir"] == expected_dir


@pytest.mark.asyncio
async def test_date_descending_order(client: AsyncClient, root):
    (root / "dir1" / "newest.txt").write_text("n")
    data = (await client.get("/api/list", params={"path": "dir1", "sort": "-mtime"})).json()
    assert _names(data) == ["..", "subdir", "newest.txt", "file3.txt"]


@pytest.mark.asyncio
async def test_subdirectory(client: AsyncClient):
    data = (await client.get("/api/list", params={"path": "dir1/subdir"})).json()
    assert data["path"] == "dir1/subdir"
    assert data["files"][0]["name"] == ".."
    assert data["files"][0]["path"] == "dir1"


@pytest.mark.asyncio
async def test_missing_directory(client: AsyncClient):
    resp = await client.get("/api/list", params={"path": "missing"})
    assert resp.status_code == 404
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_file_is_bad_request(client: AsyncClient):
    resp = await client.get("/api/list", params={"path": "file1.txt"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "not a directory"}


@pytest.mark.asyncio
async def test_excluded_directory_forbidden(client: AsyncClient):
    resp = await client.get("/api/list", params={"path": ".git"})
    assert resp.status_code == 403
    assert "error" in resp.json()


@pytest.mark.asyncio
async def test_traversal_stays_in_root(client: AsyncClient):
    data = (await client.get("/api/list", params={"path": "../../.."})).json()
    assert data["path"] == ""
    assert _names(data) == ["dir1", "file1.txt"]


@pytest.mark.asyncio
async def test_nul_byte_path_is_not_found(client: AsyncClient):
    resp = await client.get("/api/list", params={"path": "dir1\x00x"})
    assert resp.status_code == 404
    assert "error" in resp.json()
