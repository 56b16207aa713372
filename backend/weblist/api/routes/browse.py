"""HTML browsing: full page, HTMX partials and file preview."""

from __future__ import annotations

import logging
import posixpath
import stat
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, RedirectResponse

from weblist.api.deps import (
    AUTH_COOKIE,
    display_path,
    get_services,
    is_htmx,
    load_listing,
    path_parts,
    sort_preference,
)
from weblist.api.templating import render
from weblist.exceptions import BadRequestError, PathNotFoundError
from weblist.services import ServiceRegistry
from weblist.utils.content_types import determine_content_type

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_authenticated(request: Request, services: ServiceRegistry) -> bool:
    if services.authenticator is None:
        return False
    return services.authenticator.validate(request.cookies.get(AUTH_COOKIE))


async def _listing_context(request: Request, services: ServiceRegistry, path: str):
    pref = sort_preference(request)
    files = await load_listing(services, path, pref.sort_by, pref.sort_dir)
    settings = services.settings
    context = {
        "files": files,
        "path": path,
        "display_path": display_path(path),
        "sort_by": pref.sort_by.value,
        "sort_dir": pref.sort_dir.value,
        "path_parts": path_parts(path, pref.sort_by.value, pref.sort_dir.value),
        "is_authenticated": _is_authenticated(request, services),
        "enable_multi_select": settings.enable_multi_select,
        "enable_upload": settings.enable_upload,
        "upload_max_size": settings.upload_max_size,
    }
    return pref, context


@router.get("/", include_in_schema=False)
async def index(request: Request, path: str = "", services: ServiceRegistry = Depends(get_services)):
    """Full listing page. A file path redirects to its download URL."""
    resolved = services.resolver.resolve_allowed(path)
    st = services.resolver.stat(resolved)
    if not stat.S_ISDIR(st.st_mode):
        return RedirectResponse(f"/{quote(resolved)}", status_code=status.HTTP_303_SEE_OTHER)

    pref, context = await _listing_context(request, services, resolved)
    response = render(request, "index.html", services.settings, **context)
    pref.persist(response, request, services.settings)
    return response


@router.get("/partials/dir-contents", include_in_schema=False)
async def dir_contents(request: Request, path: str = "", services: ServiceRegistry = Depends(get_services)):
    """Listing fragment for HTMX navigation; plain requests go to the full page."""
    if not is_htmx(request):
        return RedirectResponse(f"/?{request.url.query}", status_code=status.HTTP_302_FOUND)

    resolved = services.resolver.resolve_allowed(path)
    st = services.resolver.stat(resolved)
    if not stat.S_ISDIR(st.st_mode):
        raise BadRequestError("not a directory")

    pref, context = await _listing_context(request, services, resolved)
    response = render(request, "partials/page_content.html", services.settings, **context)
    pref.persist(response, request, services.settings)
    return response


@router.get("/partials/file-modal", include_in_schema=False)
async def file_modal(request: Request, path: str = "", services: ServiceRegistry = Depends(get_services)):
    if not path:
        raise BadRequestError("file path not provided")

    resolved = services.resolver.resolve_allowed(path)
    try:
        st = services.resolver.stat(resolved)
    except PathNotFoundError:
        raise PathNotFoundError("file not found")
    if stat.S_ISDIR(st.st_mode):
        raise BadRequestError("cannot display directories in modal")

    content_type = determine_content_type(resolved)
    return render(
        request,
        "partials/file_modal.html",
        services.settings,
        file_name=posixpath.basename(resolved),
        file_path=resolved,
        file_size=st.st_size,
        content_type=content_type,
    )


@router.post("/partials/selection-status", include_in_schema=False)
async def selection_status(request: Request, services: ServiceRegistry = Depends(get_services)):
    """Selection counter fragment; ``select-all`` toggles between everything and nothing."""
    form = await request.form()
    selected = [str(v) for v in form.getlist("selected-files")]
    select_all = form.get("select-all") == "true"

    if select_all:
        try:
            total = int(form.get("total-files") or 0)
        except ValueError:
            raise BadRequestError("invalid total-files value")
        if len(selected) == total:
            selected = []
            check_state = False
        else:
            selected = [str(v) for v in form.getlist("path-values")]
            check_state = True
    else:
        check_state = bool(selected)

    response = render(
        request,
        "partials/selection_status.html",
        services.settings,
        count=len(selected),
        selected_files=selected,
        select_all=select_all,
        check_state=check_state,
    )
    if select_all:
        response.headers["HX-Trigger"] = "updateCheckboxes"
    return response


def _read_text(path) -> str:
    with open(path, "rb") as f:
        return f.read().decode("utf-8", errors="replace")


@router.get("/view/{path:path}", include_in_schema=False)
async def view_file(
    request: Request,
    path: str,
    theme: str = "",
    services: ServiceRegistry = Depends(get_services),
):
    """Render a text file into the viewer page; other types are served inline."""
    resolved = services.resolver.resolve_allowed(path)
    try:
        st = services.resolver.stat(resolved)
    except PathNotFoundError:
        raise PathNotFoundError("file not found")
    if stat.S_ISDIR(st.st_mode):
        raise BadRequestError("cannot view directories")

    full = services.resolver.full_path(resolved)
    content_type = determine_content_type(resolved)
    if not content_type.is_text:
        return FileResponse(full, media_type=content_type.mime_type, stat_result=st)

    content = await run_in_threadpool(_read_text, full)
    return render(
        request,
        "file_view.html",
        services.settings,
        file_name=posixpath.basename(resolved),
        file_path=resolved,
        content=content,
        is_html=content_type.is_html,
        theme=theme or services.settings.theme,
    )
