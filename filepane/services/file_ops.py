from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from typing import Optional

from ..schemas import FileInfo, Renaming
from . import listing
from .hidden import HiddenCheck

logger = logging.getLogger(__name__)


class FileOperationError(Exception):
    """An operation failed after part of its work was applied.

    ``completed`` holds the entries that were applied before the failure and
    the original ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, message: str, completed: Optional[list[FileInfo]] = None):
        super().__init__(message)
        self.completed: list[FileInfo] = list(completed or [])


class MoveError(FileOperationError):
    pass


class RenameError(FileOperationError):
    pass


class RemoveError(FileOperationError):
    @property
    def entry(self) -> FileInfo:
        return self.completed[0]


def _split(path: str) -> tuple[str, str]:
    normalized = os.path.normpath(path)
    return os.path.basename(normalized), os.path.dirname(normalized) or os.curdir


def _copy_file(source: str, destination: str, chunk_size: int) -> None:
    # 'xb' refuses to open a destination that already exists
    with open(source, 'rb') as src, open(destination, 'xb') as dst:
        try:
            shutil.copyfileobj(src, dst, chunk_size)
        except OSError:
            dst.close()
            os.remove(destination)
            raise
    try:
        shutil.copystat(source, destination)
    except OSError:
        os.remove(destination)
        raise


def _is_within(path: str, ancestor: str) -> bool:
    path, ancestor = os.path.realpath(path), os.path.realpath(ancestor)
    try:
        return os.path.commonpath([path, ancestor]) == ancestor
    except ValueError:
        # different drives
        return False


def move_across_devices(source: str, destination: str, chunk_size: int = 1024 * 1024) -> None:
    """Copy ``source`` to ``destination`` and delete it only once the copy is complete."""
    if os.path.lexists(destination):
        raise FileExistsError(errno.EEXIST, 'Destination already exists', destination)
    if stat.S_ISDIR(os.lstat(source).st_mode):
        try:
            shutil.copytree(source, destination, symlinks=True)
        except FileExistsError:
            raise
        except OSError:
            shutil.rmtree(destination, ignore_errors=True)
            raise
        shutil.rmtree(source)
        return

    _copy_file(source, destination, chunk_size)
    os.remove(source)


class FileOps:
    def __init__(
        self,
        temp_extension: str = listing.DEFAULT_TEMP_EXTENSION,
        subdirectory_limit: int = listing.DEFAULT_SUBDIRECTORY_LIMIT,
        directory_mode: int = 0o755,
        copy_chunk_size: int = 1024 * 1024,
        hidden_check: Optional[HiddenCheck] = None,
    ):
        self.temp_extension = temp_extension
        self.subdirectory_limit = subdirectory_limit
        self.directory_mode = directory_mode
        self.copy_chunk_size = copy_chunk_size
        self.hidden_check = hidden_check

    def current_directory(self) -> str:
        return os.getcwd()

    def list_dir(self, dir_name: str) -> list[FileInfo]:
        return listing.list_directory(dir_name, hidden_check=self.hidden_check)

    def list_files(self, dir_name: str) -> list[FileInfo]:
        return listing.list_files(dir_name, self.temp_extension, hidden_check=self.hidden_check)

    def list_subdirectories(self, dir_name: str) -> list[FileInfo]:
        return listing.list_subdirectories(dir_name, self.subdirectory_limit, hidden_check=self.hidden_check)

    def move(self, sources: list[str], destination: str) -> list[FileInfo]:
        result: list[FileInfo] = []
        for source in sources:
            target = os.path.join(destination, os.path.basename(os.path.normpath(source)))
            try:
                if _is_within(destination, source):
                    raise OSError(errno.EINVAL, 'Cannot move a directory into itself', source)
                try:
                    os.rename(source, target)
                except OSError as exc:
                    if exc.errno != errno.EXDEV:
                        raise
                    logger.info('Rename of %s to %s failed (%s), copying instead', source, target, exc)
                    move_across_devices(source, target, self.copy_chunk_size)
                st = os.stat(target)
            except OSError as exc:
                logger.warning('Moving %s to %s failed: %s', source, destination, exc)
                raise MoveError(f'Could not move {source}: {exc}', result) from exc
            result.append(FileInfo.from_stat(os.path.basename(target), destination, st))
        return result

    def rename(self, renamings: list[Renaming]) -> list[FileInfo]:
        result: list[FileInfo] = []
        for renaming in renamings:
            try:
                os.rename(renaming.old_name, renaming.new_name)
                st = os.stat(renaming.new_name)
            except OSError as exc:
                logger.warning('Renaming %s to %s failed: %s', renaming.old_name, renaming.new_name, exc)
                raise RenameError(f'Could not rename {renaming.old_name}: {exc}', result) from exc
            name, parent = _split(renaming.new_name)
            result.append(FileInfo.from_stat(name, parent, st, previous_name=renaming.old_name))
        return result

    def remove(self, path: str) -> FileInfo:
        st = os.lstat(path)
        name, parent = _split(path)
        entry = FileInfo.from_stat(name, parent, st)
        try:
            if stat.S_ISDIR(st.st_mode):
                os.rmdir(path)
            else:
                os.remove(path)
        except OSError as exc:
            logger.warning('Removing %s failed: %s', path, exc)
            raise RemoveError(f'Could not remove {path}: {exc}', [entry]) from exc
        return entry

    def mkdir(self, dir_path: str) -> FileInfo:
        os.mkdir(dir_path, self.directory_mode)
        st = os.stat(dir_path)
        name, parent = _split(dir_path)
        return FileInfo.from_stat(name, parent, st)
