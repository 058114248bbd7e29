"""Run the external test command and stream its output.

The command runs through the shell in its own process group with stderr
merged into stdout. Output is read in chunks and each completed line is
handed to ``on_output`` as soon as it arrives. Two limits apply: an overall
timeout for the whole run and an idle timeout while no output at all (not
even a partial line such as a progress dot) arrives. Exceeding either kills the
process group and raises ProcessFailedError.

A non-zero exit code is not an error here; callers decide what it means.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from cloverlens.core.errors import ProcessFailedError

_READ_CHUNK = 64 * 1024


@dataclass(frozen=True, slots=True)
class ProcessResult:
    command: str
    exit_code: int
    output: str
    duration_sec: float

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    with contextlib.suppress(ProcessLookupError, PermissionError):
        os.killpg(proc.pid, signal.SIGKILL)
    with contextlib.suppress(ProcessLookupError):
        proc.kill()


async def run_command_async(
    command: str,
    cwd: Path | str,
    *,
    timeout_sec: float,
    idle_timeout_sec: float,
    on_output: Callable[[str], None] | None = None,
    env: dict[str, str] | None = None,
) -> ProcessResult:
    """Run *command* in *cwd*; see module docstring for the timeout rules."""
    if not Path(cwd).is_dir():
        raise ProcessFailedError.could_not_start(command, f"working directory not found: {cwd}")

    start = time.monotonic()
    deadline = start + timeout_sec

    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=str(cwd),
            env=env,
            start_new_session=True,
        )
    except OSError as e:
        raise ProcessFailedError.could_not_start(command, str(e)) from e

    assert proc.stdout is not None
    lines: list[str] = []
    pending = b""

    def emit(raw: bytes) -> None:
        text = raw.decode(errors="replace").rstrip("\r")
        lines.append(text)
        if on_output is not None:
            on_output(text)

    def output_so_far() -> str:
        if pending:
            return "\n".join([*lines, pending.decode(errors="replace")])
        return "\n".join(lines)

    try:
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ProcessFailedError.timed_out(command, timeout_sec, output_so_far())
            try:
                chunk = await asyncio.wait_for(
                    proc.stdout.read(_READ_CHUNK), timeout=min(idle_timeout_sec, remaining)
                )
            except TimeoutError:
                if remaining <= idle_timeout_sec:
                    raise ProcessFailedError.timed_out(
                        command, timeout_sec, output_so_far()
                    ) from None
                raise ProcessFailedError.idle_timed_out(
                    command, idle_timeout_sec, output_so_far()
                ) from None

            if not chunk:
                if pending:
                    emit(pending)
                    pending = b""
                break
            *complete, pending = (pending + chunk).split(b"\n")
            for raw in complete:
                emit(raw)

        # Output closed; allow a short grace period for the exit status
        remaining = max(deadline - time.monotonic(), 1.0)
        try:
            exit_code = await asyncio.wait_for(proc.wait(), timeout=remaining)
        except TimeoutError:
            raise ProcessFailedError.timed_out(command, timeout_sec, output_so_far()) from None
    except BaseException:
        _kill_group(proc)
        await proc.wait()
        raise

    return ProcessResult(
        command=command,
        exit_code=exit_code,
        output="\n".join(lines),
        duration_sec=time.monotonic() - start,
    )


def run_command(
    command: str,
    cwd: Path | str,
    *,
    timeout_sec: float,
    idle_timeout_sec: float,
    on_output: Callable[[str], None] | None = None,
    env: dict[str, str] | None = None,
) -> ProcessResult:
    """Blocking wrapper around run_command_async()."""
    return asyncio.run(
        run_command_async(
            command,
            cwd,
            timeout_sec=timeout_sec,
            idle_timeout_sec=idle_timeout_sec,
            on_output=on_output,
            env=env,
        )
    )
