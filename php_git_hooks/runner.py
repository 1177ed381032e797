"""
External tool invocation.

Builds normalized argument lists and runs tools either blocking (all
output captured) or streaming (output forwarded as it arrives). Both modes
block the caller until the child exits.
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from pathlib import Path
from typing import IO, Callable, Iterable, Optional, cast

import click

from php_git_hooks.errors import ToolNotFound, ToolTimeout
from php_git_hooks.models import ExecutionMode, ProcessOutcome, ToolInvocation

logger = logging.getLogger(__name__)

Echo = Callable[[bytes], None]

# Seconds to wait for the output reader after killing a timed-out child
READER_GRACE = 1.0


def build_arguments(fixed: Iterable[Optional[str]], trailing: Iterable[str] = ()) -> tuple[str, ...]:
    """
    Concatenate control flags and trailing arguments.

    Empty optional flags (``None`` or ``""``) are dropped rather than passed
    as blank strings.
    """
    return tuple(arg for arg in (*fixed, *trailing) if arg)


def locate_executable(path: Path | str, label: str = "executable") -> Path:
    """Return ``path`` if it is an executable file, else raise ToolNotFound."""
    path = Path(path)
    if not path.is_file() or not os.access(path, os.X_OK):
        raise ToolNotFound(path, label)
    return path


def _echo_to_stdout(chunk: bytes) -> None:
    click.echo(chunk.decode("utf-8", errors="replace"), nl=False)


def invoke(
    invocation: ToolInvocation,
    mode: ExecutionMode = ExecutionMode.BLOCKING,
    timeout: Optional[float] = None,
    echo: Optional[Echo] = None,
) -> ProcessOutcome:
    """
    Run an external tool.

    Args:
        invocation: Executable, arguments and working directory
        mode: BLOCKING captures output; STREAMING also forwards it
        timeout: Optional bound on the wait for the child, in seconds
        echo: Receives output chunks in STREAMING mode

    Returns:
        ProcessOutcome; a non-zero exit is not an error

    Raises:
        ToolNotFound: the executable is missing
        ToolTimeout: the child did not exit within ``timeout``
    """
    cmd = invocation.command
    logger.debug("Running %s (cwd=%s, mode=%s)", " ".join(cmd), invocation.working_directory, mode.value)

    try:
        if mode is ExecutionMode.STREAMING:
            return _run_streaming(invocation, timeout, echo or _echo_to_stdout)
        return _run_blocking(invocation, timeout)
    except FileNotFoundError as e:
        raise ToolNotFound(invocation.executable_path) from e


def _run_blocking(invocation: ToolInvocation, timeout: Optional[float]) -> ProcessOutcome:
    try:
        result = subprocess.run(
            invocation.command,
            capture_output=True,
            timeout=timeout,
            cwd=invocation.working_directory,
        )
    except subprocess.TimeoutExpired as e:
        raise ToolTimeout(invocation.executable_path, e.timeout) from e

    logger.debug("%s exited with %d", invocation.executable_path.name, result.returncode)
    return ProcessOutcome(
        exit_success=result.returncode == 0,
        returncode=result.returncode,
        stdout=result.stdout or b"",
        stderr=result.stderr or b"",
    )


def _forward(stream: IO[bytes], chunks: list[bytes], echo: Echo) -> None:
    for chunk in iter(stream.readline, b""):
        chunks.append(chunk)
        echo(chunk)


def _run_streaming(invocation: ToolInvocation, timeout: Optional[float], echo: Echo) -> ProcessOutcome:
    chunks: list[bytes] = []

    with subprocess.Popen(
        invocation.command,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        cwd=invocation.working_directory,
    ) as process:
        # Output is read off the main thread so the timeout bounds the whole run
        reader = threading.Thread(
            target=_forward,
            args=(cast(IO[bytes], process.stdout), chunks, echo),
            daemon=True,
        )
        reader.start()

        try:
            returncode = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.wait()
            reader.join(READER_GRACE)
            raise ToolTimeout(invocation.executable_path, e.timeout) from e

        reader.join()

    logger.debug("%s exited with %d", invocation.executable_path.name, returncode)
    return ProcessOutcome(
        exit_success=returncode == 0,
        returncode=returncode,
        stdout=b"".join(chunks),
    )



def vendor_executable(cwd: Path, name: str) -> Path:
    """Path of a Composer-installed tool (``vendor/bin/<name>``)."""
    return cwd / "vendor" / "bin" / name
