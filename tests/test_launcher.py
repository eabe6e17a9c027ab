from __future__ import annotations

import os
import threading

import pytest

from filepane.services import launcher
from filepane.services.system_cmd import CommandResult, MockCommandRunner, RealCommandRunner

pytestmark = pytest.mark.skipif(os.name == 'nt', reason='uses os.startfile on Windows')


def test_opener_command_per_platform():
    assert launcher.opener_command('/tmp/a.pdf', 'darwin') == ['open', '/tmp/a.pdf']
    assert launcher.opener_command('/tmp/a.pdf', 'linux') == ['xdg-open', '/tmp/a.pdf']


@pytest.mark.asyncio
async def test_open_path_runs_platform_opener(tmp_path):
    target = tmp_path / 'notes.txt'
    target.write_text('hello', encoding='utf-8')
    runner = MockCommandRunner()

    await launcher.open_path(str(target), runner=runner)

    assert runner.calls[0]['cmd'] == launcher.opener_command(str(target))


@pytest.mark.asyncio
async def test_open_path_raises_on_launcher_failure(tmp_path):
    target = tmp_path / 'notes.txt'
    target.write_text('hello', encoding='utf-8')
    runner = MockCommandRunner()
    runner.queue_result(CommandResult(False, '', 'no method available for opening', 3, 0.0))

    with pytest.raises(launcher.LaunchError, match='no method available'):
        await launcher.open_path(str(target), runner=runner)


@pytest.mark.asyncio
async def test_open_path_missing_file(tmp_path):
    runner = MockCommandRunner()

    with pytest.raises(FileNotFoundError):
        await launcher.open_path(str(tmp_path / 'missing.txt'), runner=runner)

    assert runner.calls == []


@pytest.mark.asyncio
async def test_real_runner_reports_missing_command():
    result = await RealCommandRunner().run(['filepane-no-such-command'])

    assert result.success is False
    assert result.exit_code == 127


@pytest.mark.asyncio
async def test_startfile_runs_off_the_event_loop_thread(monkeypatch, tmp_path):
    target = tmp_path / 'notes.txt'
    target.write_text('hello', encoding='utf-8')
    calls: list[tuple[str, bool]] = []

    def _startfile(path):
        calls.append((path, threading.current_thread() is threading.main_thread()))

    monkeypatch.setattr(launcher, '_USE_STARTFILE', True)
    monkeypatch.setattr(launcher.os, 'startfile', _startfile, raising=False)
    runner = MockCommandRunner()

    await launcher.open_path(str(target), runner=runner)

    assert calls == [(str(target), False)]
    assert runner.calls == []
