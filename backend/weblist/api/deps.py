"""FastAPI dependency injection, request facts, cookies and sorting."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request, Response
from fastapi.concurrency import run_in_threadpool

from weblist.config import Settings
from weblist.models.file_info import FileInfo
from weblist.services import ServiceRegistry
from weblist.services.directory_lister import SortDirection, SortField
from weblist.services.path_resolver import ROOT

AUTH_COOKIE = "auth"
SORT_BY_COOKIE = "sortBy"
SORT_DIR_COOKIE = "sortDir"
SORT_COOKIE_MAX_AGE = 60 * 60 * 24 * 365  # 1 year


def get_services(request: Request) -> ServiceRegistry:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized")
    return services


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


def is_request_secure(request: Request, settings: Settings) -> bool:
    """HTTPS directly, or as reported by a proxy via X-Forwarded-Proto / Forwarded."""
    if settings.insecure_cookies:
        return False
    if request.url.scheme == "https":
        return True
    if request.headers.get("X-Forwarded-Proto") == "https":
        return True

    forwarded = request.headers.get("Forwarded", "")
    for entry in forwarded.split(","):
        for part in entry.split(";"):
            part = part.strip()
            if part.startswith("proto=") and part[len("proto="):].lower() == "https":
                return True
    return False


def set_cookie(
    response: Response,
    request: Request,
    settings: Settings,
    key: str,
    value: str,
    max_age: int,
    samesite: str | None = "lax",
) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=is_request_secure(request, settings),
        samesite=samesite,
    )


def clear_cookie(response: Response, request: Request, settings: Settings, key: str) -> None:
    response.delete_cookie(
        key,
        path="/",
        httponly=True,
        secure=is_request_secure(request, settings),
    )


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


@dataclass
class SortPreference:
    sort_by: SortField
    sort_dir: SortDirection
    from_query: bool = False

    def persist(self, response: Response, request: Request, settings: Settings) -> None:
        """Remember a query-supplied preference in cookies; cookie-derived ones are left alone."""
        if not self.from_query:
            return
        set_cookie(response, request, settings, SORT_BY_COOKIE, self.sort_by.value, SORT_COOKIE_MAX_AGE)
        set_cookie(response, request, settings, SORT_DIR_COOKIE, self.sort_dir.value, SORT_COOKIE_MAX_AGE)


def sort_preference(request: Request) -> SortPreference:
    """``sort``/``dir`` query parameters win over the ``sortBy``/``sortDir`` cookies."""
    sort_by = request.query_params.get("sort", "")
    sort_dir = request.query_params.get("dir", "")
    if sort_by or sort_dir:
        return SortPreference(SortField.parse(sort_by), SortDirection.parse(sort_dir), from_query=True)

    return SortPreference(
        SortField.parse(request.cookies.get(SORT_BY_COOKIE)),
        SortDirection.parse(request.cookies.get(SORT_DIR_COOKIE)),
    )


_API_SORT_FIELDS = {
    "name": SortField.NAME,
    "size": SortField.SIZE,
    "mtime": SortField.DATE,
}


def parse_sort_param(value: str | None) -> tuple[SortField, SortDirection]:
    """Parse the /api/list ``sort`` value: optional ``+``/``-`` prefix, then name, size or mtime."""
    if not value:
        return SortField.NAME, SortDirection.ASC

    direction = SortDirection.ASC
    if value.startswith("+"):
        value = value[1:]
    elif value.startswith("-"):
        direction = SortDirection.DESC
        value = value[1:]

    return _API_SORT_FIELDS.get(value, SortField.NAME), direction


# ---------------------------------------------------------------------------
# Listing helpers
# ---------------------------------------------------------------------------


def _list_and_probe(services: ServiceRegistry, path: str, sort_by: SortField, sort_dir: SortDirection) -> list[FileInfo]:
    files = services.lister.list(path, sort_by, sort_dir)
    # binary verdicts are settled off the event loop
    for f in files:
        _ = f.is_binary
    return files


async def load_listing(
    services: ServiceRegistry,
    path: str,
    sort_by: SortField,
    sort_dir: SortDirection,
) -> list[FileInfo]:
    return await run_in_threadpool(_list_and_probe, services, path, sort_by, sort_dir)


def display_path(path: str) -> str:
    return "" if path == ROOT else path


def path_parts(path: str, sort_by: str, sort_dir: str) -> list[dict[str, str]]:
    """Breadcrumb segments: each carries its name, cumulative path and the current sort."""
    if path == ROOT:
        return []

    parts: list[dict[str, str]] = []
    current = ""
    for part in path.replace("\\", "/").split("/"):
        if not part:
            continue
        current = f"{current}/{part}" if current else part
        parts.append({"name": part, "path": current, "sort": sort_by, "dir": sort_dir})
    return parts
