"""Multi-file ZIP download."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from weblist.api.deps import get_services
from weblist.exceptions import BadRequestError, PathNotFoundError
from weblist.services import ServiceRegistry
from weblist.services.archive_exporter import archive_name

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/download-selected", include_in_schema=False)
async def download_selected(request: Request, services: ServiceRegistry = Depends(get_services)):
    """Stream a ZIP of the ``selected-files`` form values. Only with multi-select enabled."""
    if not services.settings.enable_multi_select:
        raise PathNotFoundError("not found")

    form = await request.form()
    selected = [str(v) for v in form.getlist("selected-files")]
    if not selected:
        raise BadRequestError("No files selected")

    name = archive_name()
    logger.info("Streaming %s with %d selection(s)", name, len(selected))
    return StreamingResponse(
        services.exporter.export(selected),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )
