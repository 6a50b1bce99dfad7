"""External tool and output exceptions: jdeps, jlink, image directory."""

from pathlib import Path
from typing import Optional, Sequence

from .base import JreTrimError


class ExternalToolError(JreTrimError):
    """Raised when a JDK tool exits unsuccessfully.

    The exit code, both captured streams and the full command line are part of
    the message so a single log line is enough to reproduce the failure.
    """

    def __init__(
        self,
        tool: str,
        exit_code: int,
        command: Sequence[str],
        stdout: str = "",
        stderr: str = "",
    ):
        self.tool = tool
        self.exit_code = exit_code
        self.command = tuple(command)
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            self._compose_message(),
            details={"tool": tool, "exit_code": str(exit_code)},
        )

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def _compose_message(self) -> str:
        lines = [
            f"{self.tool} exited with code {self.exit_code}",
            f"command: {self.command_line}",
        ]
        if self.stderr.strip():
            lines.append(f"stderr:\n{self.stderr.rstrip()}")
        if self.stdout.strip():
            lines.append(f"stdout:\n{self.stdout.rstrip()}")
        return "\n".join(lines)


class BuildError(ExternalToolError):
    """Raised when jlink fails or produces an image without a launcher."""

    def __init__(
        self,
        exit_code: int,
        command: Sequence[str],
        stdout: str = "",
        stderr: str = "",
        reason: Optional[str] = None,
    ):
        super().__init__("jlink", exit_code, command, stdout=stdout, stderr=stderr)
        self.reason = reason
        if reason:
            self.message = f"{reason}\n{self.message}"
            self.details["reason"] = reason
            self.args = (self.message,)


class OutputDirectoryError(JreTrimError):
    """Raised when a stale output directory cannot be removed or created."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot prepare output directory: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
