"""JSON directory listing."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from weblist.api.deps import display_path, get_services, load_listing, parse_sort_param
from weblist.schemas.files import FileRecord, ListingResponse
from weblist.services import ServiceRegistry

router = APIRouter()


def _response_sort(raw: str) -> str:
    """Sort name echoed back, derived from the raw parameter rather than the parsed one."""
    if "size" in raw:
        return "size"
    if "mtime" in raw:
        return "date"
    return "name"


@router.get("/list", response_model=ListingResponse)
async def list_directory(
    path: str = "",
    sort: str = "",
    services: ServiceRegistry = Depends(get_services),
):
    """List a directory.

    ``sort`` takes an optional ``+``/``-`` prefix and one of ``name``,
    ``size`` or ``mtime``. A missing directory is 404, a file is 400.
    """
    resolved = services.resolver.resolve_allowed(path)
    sort_by, sort_dir = parse_sort_param(sort)

    files = await load_listing(services, resolved, sort_by, sort_dir)
    return ListingResponse(
        path=display_path(resolved),
        files=[FileRecord.from_file_info(f) for f in files],
        sort=_response_sort(sort),
        dir=sort_dir.value,
    )
