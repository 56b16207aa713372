"""Test fixtures: temporary served tree, settings and FastAPI test clients."""

import os
import time
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from weblist.config import Settings
from weblist.main import create_app
from weblist.services.path_resolver import PathResolver

PASSWORD = "s3cret"


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Served tree: file1.txt, dir1/file3.txt, dir1/subdir/file4.txt and an excluded .git."""
    base = tmp_path / "root"
    (base / "dir1" / "subdir").mkdir(parents=True)
    (base / ".git").mkdir()

    (base / "file1.txt").write_text("file one\n")
    (base / "dir1" / "file3.txt").write_text("file three\n")
    (base / "dir1" / "subdir" / "file4.txt").write_text("file four\n")
    (base / ".git" / "config").write_text("[core]\n")

    # fixed, distinct mtimes so date ordering is deterministic
    now = time.time()
    for offset, rel in enumerate(["file1.txt", "dir1/file3.txt", "dir1/subdir/file4.txt"]):
        ts = now - 3600 * (offset + 1)
        os.utime(base / rel, (ts, ts))
    return base


@pytest.fixture
def resolver(root: Path) -> PathResolver:
    return PathResolver(root, [".git"])


@pytest.fixture
def make_settings(root: Path):
    """Build Settings for the temp tree; keyword overrides win."""

    def _make(**overrides) -> Settings:
        values = {
            "root_dir": str(root),
            "exclude": [".git"],
            "enable_multi_select": True,
            "enable_upload": True,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def client(settings: Settings):
    """Async test client against an app without authentication."""
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def auth_client(make_settings):
    """Async test client against an app protected by a password."""
    app = create_app(make_settings(auth=PASSWORD, session_secret="test-secret"))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
