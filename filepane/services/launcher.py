from __future__ import annotations

import asyncio
import logging
import os
import sys

from .system_cmd import CommandRunner, RealCommandRunner, shell_preview

logger = logging.getLogger(__name__)

_USE_STARTFILE = os.name == 'nt'

_runner: CommandRunner = RealCommandRunner()


class LaunchError(Exception):
    pass


def opener_command(path: str, platform: str | None = None) -> list[str]:
    platform = platform or sys.platform
    if platform == 'darwin':
        return ['open', path]
    return ['xdg-open', path]


async def open_path(path: str, runner: CommandRunner | None = None) -> None:
    """Open ``path`` with the desktop's default application."""
    if not os.path.exists(path):
        raise FileNotFoundError(f'No such file or directory: {path!r}')

    if _USE_STARTFILE:
        await asyncio.to_thread(os.startfile, path)  # type: ignore[attr-defined]
        return

    cmd = opener_command(path)
    result = await (runner or _runner).run(cmd)
    if not result.success:
        logger.warning('%s exited with %d: %s', shell_preview(cmd), result.exit_code, result.stderr)
        raise LaunchError(result.stderr or f'Could not open {path}')
