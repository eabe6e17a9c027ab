from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ..config import settings
from ..schemas import ApiResponse, MoveRequest, PathRequest, RenameRequest
from ..services import launcher
from ..services.file_ops import FileOperationError, FileOps

router = APIRouter(prefix='/api/files', tags=['files'])
ops = FileOps(
    temp_extension=settings.temp_extension,
    subdirectory_limit=settings.subdirectory_limit,
    directory_mode=settings.directory_mode,
    copy_chunk_size=settings.copy_chunk_size,
)


def _status_for(exc: BaseException) -> int:
    if isinstance(exc, FileOperationError) and exc.__cause__ is not None:
        exc = exc.__cause__
    if isinstance(exc, FileNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PermissionError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, FileExistsError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, FileOperationError):
        detail = {'message': str(exc), 'data': [entry.model_dump(mode='json') for entry in exc.completed]}
        return HTTPException(status_code=_status_for(exc), detail=detail)
    return HTTPException(status_code=_status_for(exc), detail=str(exc))


@router.get('/cwd')
def current_directory():
    return ApiResponse(ok=True, message='Current directory', data=ops.current_directory())


@router.get('/list')
def list_directory(path: str = Query(..., min_length=1)):
    try:
        items = ops.list_dir(path)
    except OSError as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Listed', data=items)


@router.get('/files')
def list_files(path: str = Query(..., min_length=1)):
    try:
        items = ops.list_files(path)
    except OSError as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Listed', data=items)


@router.get('/subdirectories')
def list_subdirectories(path: str = Query(..., min_length=1)):
    try:
        items = ops.list_subdirectories(path)
    except OSError as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Listed', data=items)


@router.post('/move')
def move(payload: MoveRequest):
    if not payload.sources:
        raise HTTPException(status_code=400, detail='No sources provided')
    try:
        moved = ops.move(payload.sources, payload.destination)
    except FileOperationError as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Moved', data=moved)


@router.post('/rename')
def rename(payload: RenameRequest):
    if not payload.renamings:
        raise HTTPException(status_code=400, detail='No renamings provided')
    try:
        renamed = ops.rename(payload.renamings)
    except FileOperationError as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Renamed', data=renamed)


@router.post('/remove')
def remove(payload: PathRequest):
    try:
        removed = ops.remove(payload.path)
    except (FileOperationError, OSError) as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Removed', data=removed)


@router.post('/mkdir')
def mkdir(payload: PathRequest):
    try:
        created = ops.mkdir(payload.path)
    except OSError as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Folder created', data=created)


@router.post('/open')
async def open_path(payload: PathRequest):
    try:
        await launcher.open_path(payload.path)
    except (launcher.LaunchError, OSError) as exc:
        raise _http_error(exc)
    return ApiResponse(ok=True, message='Opened')
