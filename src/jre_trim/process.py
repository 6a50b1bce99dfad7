"""Run JDK command-line tools.

stdout and stderr are drained on two reader threads so neither pipe can
fill and stall the child. After the process exits both readers are joined
with a bounded timeout before the outcome is reported.
"""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, Optional, Sequence

from .events import CancellationToken
from .exceptions import ExternalToolError, OperationCancelledError
from .logging_config import get_logger

logger = get_logger(__name__)

LineCallback = Optional[Callable[[str], None]]

_POLL_INTERVAL_SECONDS = 0.1


@dataclass(frozen=True)
class ToolRun:
    """Captured outcome of one tool invocation."""

    command: tuple[str, ...]
    exit_code: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    @property
    def tool(self) -> str:
        return Path(self.command[0]).stem if self.command else ""

    def raise_for_status(self) -> None:
        if not self.succeeded:
            raise ExternalToolError(
                self.tool, self.exit_code, self.command, stdout=self.stdout, stderr=self.stderr
            )


def _drain(stream: IO[str], sink: list[str], on_line: LineCallback, label: str) -> None:
    try:
        for line in iter(stream.readline, ""):
            line = line.rstrip("\r\n")
            sink.append(line)
            if on_line is not None:
                on_line(line)
    except (OSError, ValueError) as e:
        # ValueError: stream closed under us after a join timeout
        logger.warning(f"Reading {label} failed: {e}")
    finally:
        stream.close()


def run_tool(
    command: Sequence[str | Path],
    on_stdout_line: LineCallback = None,
    on_stderr_line: LineCallback = None,
    join_timeout: float = 1.0,
    cwd: Optional[Path] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> ToolRun:
    """Run ``command`` to completion, capturing both streams.

    Args:
        command: Executable and arguments
        on_stdout_line: Called from the stdout reader thread for each line
        on_stderr_line: Called from the stderr reader thread for each line
        join_timeout: Seconds to wait for each reader after exit
        cwd: Working directory for the child
        cancel_token: Terminates the child and raises if cancelled

    Returns:
        ToolRun with exit code and captured text; non-zero exits are not raised

    Raises:
        ExternalToolError: If the executable cannot be started
        OperationCancelledError: If ``cancel_token`` fires while running
    """
    args = tuple(str(part) for part in command)
    logger.debug(f"Running: {' '.join(args)}")

    try:
        proc = subprocess.Popen(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd else None,
        )
    except OSError as e:
        raise ExternalToolError(Path(args[0]).stem, -1, args, stderr=str(e))

    stdout_lines: list[str] = []
    stderr_lines: list[str] = []
    assert proc.stdout is not None and proc.stderr is not None
    readers = [
        threading.Thread(
            target=_drain,
            args=(proc.stdout, stdout_lines, on_stdout_line, "stdout"),
            name="jre-trim-stdout",
            daemon=True,
        ),
        threading.Thread(
            target=_drain,
            args=(proc.stderr, stderr_lines, on_stderr_line, "stderr"),
            name="jre-trim-stderr",
            daemon=True,
        ),
    ]
    for reader in readers:
        reader.start()

    while True:
        try:
            exit_code = proc.wait(timeout=_POLL_INTERVAL_SECONDS)
            break
        except subprocess.TimeoutExpired:
            if cancel_token is not None and cancel_token.cancelled:
                proc.kill()
                proc.wait()
                for reader in readers:
                    reader.join(join_timeout)
                raise OperationCancelledError(Path(args[0]).stem)

    for reader in readers:
        reader.join(join_timeout)
        if reader.is_alive():
            logger.warning(f"{reader.name} reader did not finish within {join_timeout}s")

    return ToolRun(
        command=args,
        exit_code=exit_code,
        stdout="\n".join(stdout_lines),
        stderr="\n".join(stderr_lines),
    )
