"""Upload schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    uploaded: list[str]
