"""Directory listing entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from weblist.utils.content_types import is_viewable
from weblist.utils.storage import format_time, human_bytes

PARENT_NAME = ".."


@dataclass
class FileInfo:
    """One entry of a listing, or the synthetic ``..`` parent entry.

    ``is_binary`` is computed on first access through ``binary_probe`` and
    cached on the instance; nothing else changes after construction.
    """

    name: str
    path: str
    is_dir: bool
    size: int = 0
    last_modified: Optional[datetime] = None
    binary_probe: Optional[Callable[[], bool]] = field(default=None, repr=False, compare=False)
    _is_binary: Optional[bool] = field(default=None, init=False, repr=False, compare=False)

    @property
    def is_parent(self) -> bool:
        return self.name == PARENT_NAME

    @property
    def is_binary(self) -> bool:
        if self._is_binary is None:
            self._is_binary = False if self.is_dir or self.binary_probe is None else self.binary_probe()
        return self._is_binary

    @property
    def is_viewable(self) -> bool:
        return is_viewable(self.name, self.is_dir, self.is_binary)

    def size_to_string(self) -> str:
        if self.is_dir:
            return "-"
        return human_bytes(self.size)

    def time_string(self) -> str:
        return format_time(self.last_modified)

    def time_string_short(self) -> str:
        return format_time(self.last_modified, short=True)
