"""File upload into a directory under the served root."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from weblist.api.deps import get_services
from weblist.exceptions import AccessDeniedError, BadRequestError, PayloadTooLargeError
from weblist.schemas.upload import UploadResponse
from weblist.services import ServiceRegistry

logger = logging.getLogger(__name__)
router = APIRouter()


def _declared_length(request: Request) -> int | None:
    try:
        return int(request.headers["content-length"])
    except (KeyError, ValueError):
        return None


@router.post("/upload", response_model=UploadResponse)
async def upload_files(request: Request, services: ServiceRegistry = Depends(get_services)):
    """
    Multipart upload: a ``path`` field naming the target directory and one
    or more ``file`` parts. Every name is validated before anything is written.
    """
    settings = services.settings
    if not settings.enable_upload:
        raise AccessDeniedError("upload is disabled")

    length = _declared_length(request)
    if length is not None and length > settings.upload_max_size:
        raise PayloadTooLargeError("file too large")

    async with request.form() as form:
        files = [f for f in form.getlist("file") if isinstance(f, UploadFile)]
        if sum(f.size or 0 for f in files) > settings.upload_max_size:
            raise PayloadTooLargeError("file too large")

        raw_path = form.get("path")
        target = services.uploader.validate_target(raw_path if isinstance(raw_path, str) else None)

        if not files:
            raise BadRequestError("no files provided")
        for f in files:
            services.uploader.validate_filename(f.filename)

        uploaded: list[str] = []
        for f in files:
            await run_in_threadpool(services.uploader.save, target, f.filename, f.file)
            uploaded.append(f.filename)

    logger.info("Uploaded %d file(s) to %s", len(uploaded), target)
    return UploadResponse(uploaded=uploaded)
