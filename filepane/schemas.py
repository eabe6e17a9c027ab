from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

PARENT_MARKER = '..'


class FileInfo(BaseModel):
    name: str
    dir_path: str
    size: int
    mode: int
    mod_time: datetime
    is_dir: bool
    previous_name: str = ''

    @classmethod
    def from_stat(cls, name: str, dir_path: str, st: os.stat_result, previous_name: str = '') -> FileInfo:
        return cls(
            name=name,
            dir_path=dir_path,
            size=st.st_size,
            mode=st.st_mode,
            mod_time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            is_dir=stat.S_ISDIR(st.st_mode),
            previous_name=previous_name,
        )


class Renaming(BaseModel):
    old_name: str = Field(min_length=1)
    new_name: str = Field(min_length=1)


class RenameRequest(BaseModel):
    renamings: list[Renaming]


class MoveRequest(BaseModel):
    sources: list[str]
    destination: str = Field(min_length=1)


class PathRequest(BaseModel):
    path: str = Field(min_length=1)


class ApiResponse(BaseModel):
    ok: bool
    message: str
    data: Optional[Any] = None
