"""
Process runner for question programs and helper scripts.

Feeds scripted input to a running program one line at a time, kills it when
it runs past the timeout, and captures its combined output.
"""

import contextlib
import logging
import os
import signal
import subprocess
import threading
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from .config import (
    COMMAND_TIMEOUT_SECONDS,
    EXECUTION_FAILED_NOTE,
    INPUT_DELAY_SECONDS,
    MAX_OUTPUT_CHARS,
)
from .models import ExecutionResult

logger = logging.getLogger(__name__)

# Seconds to wait for the I/O threads once the process is gone
THREAD_JOIN_TIMEOUT: float = 2.0


def run_with_input(
    command: Sequence[str],
    input_text: Optional[str] = None,
    timeout: float = COMMAND_TIMEOUT_SECONDS,
    input_delay: float = INPUT_DELAY_SECONDS,
    max_chars: int = MAX_OUTPUT_CHARS,
    cwd: Optional[Path] = None,
) -> ExecutionResult:
    """
    Run a program, feeding it input line by line, and capture its output.

    Each line of `input_text` is written followed by a newline and a pause of
    `input_delay` seconds, so programs that create several Scanners on stdin
    still see their lines one at a time. stdin is closed once the input is
    exhausted (immediately when there is none).

    Args:
        command: Program and arguments.
        input_text: Text to feed on stdin, or None.
        timeout: Seconds before the process is killed.
        input_delay: Pause after each input line.
        max_chars: Captured output is truncated to this many characters.
        cwd: Working directory for the process.

    Returns:
        ExecutionResult with the (truncated) combined stdout/stderr.
    """
    logger.debug("Executing: %s", " ".join(command))

    try:
        process = subprocess.Popen(
            list(command),
            cwd=str(cwd) if cwd else None,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    except OSError as e:
        logger.error("failed to start command: %s", e)
        return ExecutionResult(success=False, output=EXECUTION_FAILED_NOTE, exit_code=-1)

    chunks: list[bytes] = []
    reader = threading.Thread(target=_drain, args=(process.stdout, chunks), daemon=True)
    reader.start()

    stop_feeding = threading.Event()
    lines = input_text.split("\n") if input_text is not None else []
    feeder = threading.Thread(
        target=_feed,
        args=(process.stdin, lines, input_delay, stop_feeding),
        daemon=True,
    )
    feeder.start()

    timed_out = False
    try:
        exit_code = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("command timed out")
        timed_out = True
        _kill_session(process)
        exit_code = process.wait()
    finally:
        stop_feeding.set()

    # Leftover children would keep the output pipe open
    _kill_session(process)
    feeder.join(THREAD_JOIN_TIMEOUT)
    reader.join(THREAD_JOIN_TIMEOUT)
    with contextlib.suppress(OSError):
        process.stdout.close()

    output = b"".join(chunks).decode("utf-8", errors="replace")

    success = exit_code == 0 and not timed_out
    if success:
        logger.info("Exited gracefully")
    else:
        logger.warning("command failed: exit status %s", exit_code)
        output += EXECUTION_FAILED_NOTE

    truncated = len(output) > max_chars
    if truncated:
        output = output[:max_chars]

    return ExecutionResult(
        success=success,
        output=output,
        exit_code=exit_code,
        timeout_exceeded=timed_out,
        truncated=truncated,
    )


def run_script(script: Path, cwd: Optional[Path] = None, timeout: float = COMMAND_TIMEOUT_SECONDS) -> ExecutionResult:
    """
    Run a helper shell script and capture its combined output.

    Failures are logged, not raised: whatever output the script produced is
    still returned for the report.
    """
    cmd = [str(script.resolve())]
    logger.debug("Executing: %s", cmd[0])

    try:
        process = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.error("script %s timed out", script.name)
        return ExecutionResult(
            success=False,
            output=(e.output or b"").decode("utf-8", errors="replace"),
            timeout_exceeded=True,
        )
    except OSError as e:
        logger.error("failed to run script %s: %s", script.name, e)
        return ExecutionResult(success=False)

    output = process.stdout.decode("utf-8", errors="replace")
    if process.returncode != 0:
        logger.error("script %s exited with status %d", script.name, process.returncode)

    return ExecutionResult(success=process.returncode == 0, output=output, exit_code=process.returncode)


def _kill_session(process: subprocess.Popen) -> None:
    with contextlib.suppress(ProcessLookupError, PermissionError):
        os.killpg(process.pid, signal.SIGKILL)


def _drain(stream: BinaryIO, chunks: list[bytes]) -> None:
    # The stream may be closed under us once the process is gone
    with contextlib.suppress(OSError, ValueError):
        for chunk in iter(lambda: stream.read(4096), b""):
            chunks.append(chunk)


def _feed(stdin: BinaryIO, lines: list[str], delay: float, stop: threading.Event) -> None:
    try:
        for line in lines:
            if stop.is_set():
                break
            stdin.write((line + "\n").encode("utf-8"))
            stdin.flush()
            stop.wait(delay)
    except (OSError, ValueError):
        # The program exited before reading all of its input
        logger.debug("stopped feeding input")
    finally:
        with contextlib.suppress(OSError):
            stdin.close()
