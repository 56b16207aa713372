"""Single-file download. This is the catch-all route, registered last."""

import stat
from urllib.parse import quote

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, RedirectResponse

from weblist.api.deps import get_services
from weblist.exceptions import PathNotFoundError
from weblist.services import ServiceRegistry

router = APIRouter()


@router.get("/{path:path}", include_in_schema=False)
async def download(path: str, services: ServiceRegistry = Depends(get_services)):
    """Send a file as an attachment; a directory redirects to its listing."""
    resolved = services.resolver.resolve_allowed(path.rstrip("/"))
    try:
        st = services.resolver.stat(resolved)
    except PathNotFoundError:
        raise PathNotFoundError("file not found")

    if stat.S_ISDIR(st.st_mode):
        return RedirectResponse(f"/?path={quote(resolved)}", status_code=status.HTTP_303_SEE_OTHER)

    full = services.resolver.full_path(resolved)
    return FileResponse(
        full,
        media_type="application/octet-stream",
        filename=full.name,
        stat_result=st,
    )
