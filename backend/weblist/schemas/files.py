"""File listing schemas for the JSON API."""

from datetime import datetime

from pydantic import BaseModel

from weblist.models.file_info import FileInfo


class FileRecord(BaseModel):
    """One listing entry as exposed by /api/list."""
    name: str
    path: str
    is_dir: bool
    size: int
    size_human: str = ""
    last_modified: datetime | None = None
    time_str: str = ""
    is_viewable: bool = False

    @classmethod
    def from_file_info(cls, f: FileInfo) -> "FileRecord":
        return cls(
            name=f.name,
            path=f.path,
            is_dir=f.is_dir,
            size=f.size,
            size_human=f.size_to_string(),
            last_modified=f.last_modified,
            time_str=f.time_string(),
            is_viewable=f.is_viewable,
        )


class ListingResponse(BaseModel):
    """Directory listing; ``path`` is empty for the root."""
    path: str
    files: list[FileRecord]
    sort: str
    dir: str
