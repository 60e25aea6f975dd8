import asyncio
import os
import sys
import time

import pytest

from ytmp4.services.ytdlp import BoundedTail, SubprocessExecutor, SubprocessTimeout


def python(code):
    return [sys.executable, "-c", code]


def test_bounded_tail_keeps_last_bytes():
    tail = BoundedTail(5)
    tail.feed(b"abc")
    tail.feed(b"defgh")
    assert tail.getvalue() == b"defgh"
    tail.feed(b"ij")
    assert tail.getvalue() == b"fghij"


def test_bounded_tail_zero_limit():
    tail = BoundedTail(0)
    tail.feed(b"abc")
    assert tail.getvalue() == b""


@pytest.mark.asyncio
async def test_run_returns_exit_code_and_stderr():
    result = await SubprocessExecutor.run(
        python("import sys; print('out'); sys.stderr.write('boom'); sys.exit(3)"),
        timeout=30
    )
    assert result.returncode == 3
    assert result.stderr == b"boom"


@pytest.mark.asyncio
async def test_run_bounds_stderr():
    result = await SubprocessExecutor.run(
        python("import sys; sys.stderr.write('a' * 100000 + 'END')"),
        timeout=30,
        stderr_limit=100
    )
    assert result.returncode == 0
    assert len(result.stderr) == 100
    assert result.stderr.endswith(b"END")


@pytest.mark.asyncio
async def test_run_drains_large_stdout():
    result = await SubprocessExecutor.run(
        python("import sys; sys.stdout.write('x' * 5000000)"),
        timeout=30
    )
    assert result.returncode == 0


@pytest.mark.asyncio
async def test_run_uses_cwd(tmp_path):
    result = await SubprocessExecutor.run(
        python("import os, sys; sys.stderr.write(os.getcwd())"),
        timeout=30,
        cwd=str(tmp_path)
    )
    assert os.path.realpath(result.stderr.decode()) == os.path.realpath(tmp_path)


@pytest.mark.asyncio
async def test_run_kills_on_timeout():
    started = time.monotonic()
    with pytest.raises(SubprocessTimeout) as exc_info:
        await SubprocessExecutor.run(
            python("import sys, time; sys.stderr.write('waiting'); sys.stderr.flush(); time.sleep(60)"),
            timeout=2
        )
    assert time.monotonic() - started < 15
    assert exc_info.value.timeout == 2
    assert exc_info.value.stderr == b"waiting"
    assert isinstance(exc_info.value, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_run_missing_binary(tmp_path):
    with pytest.raises(FileNotFoundError):
        await SubprocessExecutor.run([str(tmp_path / "nope")], timeout=5)
