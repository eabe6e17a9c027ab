from __future__ import annotations

import asyncio
import shlex
import time
from dataclasses import dataclass
from typing import Protocol

from ..config import settings


@dataclass(frozen=True)
class CommandResult:
    success: bool
    stdout: str
    stderr: str
    exit_code: int
    execution_time: float


class CommandRunner(Protocol):
    async def run(self, cmd: list[str], timeout: int | None = None) -> CommandResult:
        ...


class RealCommandRunner:
    async def run(self, cmd: list[str], timeout: int | None = None) -> CommandResult:
        return await _run_once(cmd, timeout)


class MockCommandRunner:
    def __init__(self, default: CommandResult | None = None):
        self.default = default or CommandResult(True, '', '', 0, 0.0)
        self.calls: list[dict] = []
        self._queue: list[CommandResult] = []

    def queue_result(self, result: CommandResult) -> None:
        self._queue.append(result)

    async def run(self, cmd: list[str], timeout: int | None = None) -> CommandResult:
        self.calls.append({'cmd': cmd, 'timeout': timeout})
        if self._queue:
            return self._queue.pop(0)
        return self.default


async def _run_once(cmd: list[str], timeout: int | None = None) -> CommandResult:
    start = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        return CommandResult(False, '', f'Command not found: {cmd[0]}', 127, time.monotonic() - start)

    effective_timeout = timeout if timeout is not None else settings.command_timeout_sec
    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=effective_timeout)
    except asyncio.TimeoutError:
        proc.kill()
        out, err = await proc.communicate()
        err_txt = (err.decode(errors='ignore').strip() if err else '')
        detail = f'Command timed out after {effective_timeout}s'
        stdout = out.decode(errors='ignore').strip()
        stderr = f'{detail}. {err_txt}'.strip()
        return CommandResult(False, stdout, stderr, 124, time.monotonic() - start)

    stdout = out.decode(errors='ignore').strip()
    stderr = err.decode(errors='ignore').strip()
    exit_code = proc.returncode
    return CommandResult(exit_code == 0, stdout, stderr, exit_code, time.monotonic() - start)


def shell_preview(cmd: list[str]) -> str:
    return ' '.join(shlex.quote(v) for v in cmd)
