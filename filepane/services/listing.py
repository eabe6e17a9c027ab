from __future__ import annotations

import logging
import os
import stat
from typing import Iterator, Optional

from ..schemas import PARENT_MARKER, FileInfo
from . import hidden
from .hidden import HiddenCheck

logger = logging.getLogger(__name__)

DEFAULT_SUBDIRECTORY_LIMIT = 3000
DEFAULT_TEMP_EXTENSION = '.dctmp'


def is_root(dir_name: str) -> bool:
    absolute = os.path.abspath(dir_name)
    return os.path.dirname(absolute) == absolute


def parent_entry(dir_name: str) -> Optional[FileInfo]:
    """Synthetic ``..`` row for ``dir_name``, or ``None`` when the parent can't be stat'd."""
    parent = os.path.dirname(os.path.abspath(dir_name))
    try:
        st = os.stat(parent)
    except OSError as exc:
        logger.debug('Omitting parent entry of %s: %s', dir_name, exc)
        return None
    return FileInfo.from_stat(PARENT_MARKER, parent, st)


def _check_hidden(check: Optional[HiddenCheck], name: str, base_dir: str) -> bool:
    check = check or hidden.is_hidden
    try:
        return check(name, base_dir)
    except OSError as exc:
        logger.debug('Could not classify %s in %s, treating as visible: %s', name, base_dir, exc)
        return False


def _read_entries(dir_name: str) -> list[tuple[str, os.stat_result]]:
    entries: list[tuple[str, os.stat_result]] = []
    with os.scandir(dir_name) as it:
        for entry in it:
            try:
                st = entry.stat(follow_symlinks=False)
            except FileNotFoundError:
                # removed between readdir and lstat
                continue
            entries.append((entry.name, st))
    return entries


def list_directory(dir_name: str, hidden_check: Optional[HiddenCheck] = None) -> list[FileInfo]:
    """Visible children of ``dir_name`` preceded by the parent entry.

    Listing failures propagate and no partial list is returned.
    """
    entries = _read_entries(dir_name)

    result: list[FileInfo] = []
    if not is_root(dir_name):
        parent = parent_entry(dir_name)
        if parent is not None:
            result.append(parent)

    for name, st in entries:
        if _check_hidden(hidden_check, name, dir_name):
            continue
        result.append(FileInfo.from_stat(name, dir_name, st))
    return result


def list_files(
    dir_name: str,
    temp_extension: str = DEFAULT_TEMP_EXTENSION,
    hidden_check: Optional[HiddenCheck] = None,
) -> list[FileInfo]:
    """Visible non-directory children, skipping in-progress temp files."""
    result: list[FileInfo] = []
    for name, st in _read_entries(dir_name):
        if stat.S_ISDIR(st.st_mode):
            continue
        if os.path.splitext(name)[1] == temp_extension:
            continue
        if _check_hidden(hidden_check, name, dir_name):
            continue
        result.append(FileInfo.from_stat(name, dir_name, st))
    return result


def iter_subdirectories(root: str) -> Iterator[tuple[str, os.stat_result]]:
    """Depth-first pre-order walk yielding ``(relative_path, lstat)`` for directories.

    Children are visited in name order and symlinks are never followed. The
    root itself is not yielded; an unreadable root raises, unreadable
    subtrees are skipped.
    """
    root_st = os.stat(root)
    if not stat.S_ISDIR(root_st.st_mode):
        raise NotADirectoryError(f'Not a directory: {root!r}')

    stack: list[tuple[str, str, Optional[os.stat_result]]] = [(root, '', None)]
    while stack:
        path, rel, st = stack.pop()
        if st is not None:
            yield rel, st

        try:
            with os.scandir(path) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            if st is None:
                raise
            logger.debug('Skipping unreadable directory %s: %s', path, exc)
            continue

        subdirs: list[tuple[str, str, Optional[os.stat_result]]] = []
        for child in children:
            try:
                child_st = child.stat(follow_symlinks=False)
            except OSError as exc:
                logger.debug('Skipping %s: %s', child.path, exc)
                continue
            if stat.S_ISDIR(child_st.st_mode):
                child_rel = os.path.join(rel, child.name) if rel else child.name
                subdirs.append((child.path, child_rel, child_st))
        stack.extend(reversed(subdirs))


def list_subdirectories(
    dir_name: str,
    limit: int = DEFAULT_SUBDIRECTORY_LIMIT,
    hidden_check: Optional[HiddenCheck] = None,
) -> list[FileInfo]:
    """All visible directories below ``dir_name``, named relative to it.

    Hidden directories are left out of the result but their children are
    still visited and reported on their own merits. At most ``limit``
    entries are returned, the parent entry included.
    """
    result: list[FileInfo] = []
    if not is_root(dir_name):
        parent = parent_entry(dir_name)
        if parent is not None:
            result.append(parent)

    for rel, st in iter_subdirectories(dir_name):
        if len(result) >= limit:
            logger.info('Subdirectory walk of %s stopped at %d entries', dir_name, limit)
            break
        if _check_hidden(hidden_check, rel, dir_name):
            continue
        result.append(FileInfo.from_stat(rel, dir_name, st))
    return result
