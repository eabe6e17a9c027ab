from __future__ import annotations

import os
import stat
from typing import Callable

FILE_ATTRIBUTE_HIDDEN = getattr(stat, 'FILE_ATTRIBUTE_HIDDEN', 0x2)
_LONG_PATH_PREFIX = '\\\\?\\'


def is_hidden_posix(filename: str, base_dir: str) -> bool:
    """Dotfile rule applied to every segment of a relative name."""
    return any(segment.startswith('.') for segment in filename.split('/'))


def is_hidden_windows(filename: str, base_dir: str) -> bool:
    """Dotfile rule on the name plus the hidden attribute bit.

    Raises ``OSError`` when the attributes cannot be read.
    """
    if not filename:
        return False
    if filename.startswith('.'):
        return True

    abs_path = os.path.abspath(os.path.join(base_dir, filename))
    if not abs_path.startswith(_LONG_PATH_PREFIX):
        abs_path = _LONG_PATH_PREFIX + abs_path
    attributes = getattr(os.stat(abs_path), 'st_file_attributes', 0)
    return bool(attributes & FILE_ATTRIBUTE_HIDDEN)


HiddenCheck = Callable[[str, str], bool]

is_hidden: HiddenCheck = is_hidden_windows if os.name == 'nt' else is_hidden_posix
