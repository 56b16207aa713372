"""Tests for the HTML listing page, HTMX partials and the file viewer."""

import pytest
from httpx import AsyncClient

HTMX = {"HX-Request": "true"}


class TestIndex:
    @pytest.mark.asyncio
    async def test_root_page(self, client: AsyncClient):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "file1.txt" in resp.text
        assert "dir1" in resp.text
        assert ".git" not in resp.text

    @pytest.mark.asyncio
    async def test_breadcrumbs(self, client: AsyncClient):
        resp = await client.get("/", params={"path": "dir1/subdir"})
        assert resp.status_code == 200
        assert "file4.txt" in resp.text
        assert "path=dir1/subdir" in resp.text

    @pytest.mark.asyncio
    async def test_file_redirects_to_download(self, client: AsyncClient):
        resp = await client.get("/", params={"path": "dir1/file3.txt"})
        assert resp.status_code == 303
        assert resp.headers["location"] == "/dir1/file3.txt"

    @pytest.mark.asyncio
    async def test_missing_path(self, client: AsyncClient):
        resp = await client.get("/", params={"path": "missing"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_excluded_path(self, client: AsyncClient):
        resp = await client.get("/", params={"path": ".git"})
        assert resp.status_code == 403
        assert resp.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_sort_query_persisted_to_cookies(self, client: AsyncClient):
        resp = await client.get("/", params={"sort": "size", "dir": "desc"})
        assert resp.status_code == 200
        assert resp.cookies["sortBy"] == "size"
        assert resp.cookies["sortDir"] == "desc"
        set_cookie = resp.headers.get_list("set-cookie")
        assert any("Max-Age=31536000" in c and "HttpOnly" in c for c in set_cookie)

    @pytest.mark.asyncio
    async def test_sort_without_query_sets_no_cookie(self, client: AsyncClient):
        resp = await client.get("/")
        assert "sortBy" not in resp.cookies


class TestDirContents:
    @pytest.mark.asyncio
    async def test_non_htmx_redirects(self, client: AsyncClient):
        resp = await client.get("/partials/dir-contents", params={"path": "dir1"})
        assert resp.status_code == 302
        assert resp.headers["location"] == "/?path=dir1"

    @pytest.mark.asyncio
    async def test_fragment(self, client: AsyncClient):
        resp = await client.get("/partials/dir-contents", params={"path": "dir1"}, headers=HTMX)
        assert resp.status_code == 200
        assert "file3.txt" in resp.text
        assert "<html" not in resp.text

    @pytest.mark.asyncio
    async def test_file_is_bad_request(self, client: AsyncClient):
        resp = await client.get("/partials/dir-contents", params={"path": "file1.txt"}, headers=HTMX)
        assert resp.status_code == 400
        assert resp.text == "not a directory"

    @pytest.mark.asyncio
    async def test_missing(self, client: AsyncClient):
        resp = await client.get("/partials/dir-contents", params={"path": "nope"}, headers=HTMX)
        assert resp.status_code == 404


class TestFileModal:
    @pytest.mark.asyncio
    async def test_requires_path(self, client: AsyncClient):
        resp = await client.get("/partials/file-modal")
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_renders(self, client: AsyncClient):
        resp = await client.get("/partials/file-modal", params={"path": "dir1/file3.txt"})
        assert resp.status_code == 200
        assert "file3.txt" in resp.text
        assert "text/plain" in resp.text

    @pytest.mark.asyncio
    async def test_directory(self, client: AsyncClient):
        resp = await client.get("/partials/file-modal", params={"path": "dir1"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_excluded(self, client: AsyncClient):
        resp = await client.get("/partials/file-modal", params={"path": ".git/config"})
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_missing(self, client: AsyncClient):
        resp = await client.get("/partials/file-modal", params={"path": "nope.txt"})
        assert resp.status_code == 404


class TestSelectionStatus:
    @pytest.mark.asyncio
    async def test_counts_selection(self, client: AsyncClient):
        resp = await client.post(
            "/partials/selection-status",
            data={"selected-files": ["file1.txt", "dir1"]},
        )
        assert resp.status_code == 200
        assert "2 selected" in resp.text
        assert "HX-Trigger" not in resp.headers

    @pytest.mark.asyncio
    async def test_select_all_when_partial(self, client: AsyncClient):
        resp = await client.post(
            "/partials/selection-status",
            data={
                "select-all": "true",
                "total-files": "2",
                "selected-files": ["file1.txt"],
                "path-values": ["file1.txt", "dir1"],
            },
        )
        assert "2 selected" in resp.text
        assert resp.headers["HX-Trigger"] == "updateCheckboxes"

    @pytest.mark.asyncio
    async def test_select_all_when_complete_clears(self, client: AsyncClient):
        resp = await client.post(
            "/partials/selection-status",
            data={
                "select-all": "true",
                "total-files": "2",
                "selected-files": ["file1.txt", "dir1"],
                "path-values": ["file1.txt", "dir1"],
            },
        )
        assert "nothing selected" in resp.text

    @pytest.mark.asyncio
    async def test_invalid_total(self, client: AsyncClient):
        resp = await client.post(
            "/partials/selection-status",
            data={"select-all": "true", "total-files": "many"},
        )
        assert resp.status_code == 400


class TestView:
    @pytest.mark.asyncio
    async def test_text_file(self, client: AsyncClient):
        resp = await client.get("/view/file1.txt")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "file one" in resp.text

    @pytest.mark.asyncio
    async def test_content_is_escaped(self, client: AsyncClient, root):
        (root / "page.html").write_text("<script>alert(1)</script>")
        resp = await client.get("/view/page.html")
        assert "&lt;script&gt;" in resp.text
        assert "<script>alert(1)</script>" not in resp.text

    @pytest.mark.asyncio
    async def test_image_served_inline(self, client: AsyncClient, root):
        (root / "pic.png").write_bytes(b"\x89PNG\r\n\x1a\nimage")
        resp = await client.get("/view/pic.png")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert "attachment" not in resp.headers.get("content-disposition", "")
        assert resp.content.startswith(b"\x89PNG")

    @pytest.mark.asyncio
    async def test_directory(self, client: AsyncClient):
        resp = await client.get("/view/dir1")
        assert resp.status_code == 400
        assert resp.text == "cannot view directories"

    @pytest.mark.asyncio
    async def test_excluded(self, client: AsyncClient):
        resp = await client.get("/view/.git/config")
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_missing(self, client: AsyncClient):
        resp = await client.get("/view/missing.txt")
        assert resp.status_code == 404
