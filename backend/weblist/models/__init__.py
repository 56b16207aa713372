"""Domain models for weblist."""

from weblist.models.file_info import PARENT_NAME, FileInfo

__all__ = [
    "PARENT_NAME",
    "FileInfo",
]
