"""Analysis-related exceptions: archive access, class parsing, cancellation."""

from pathlib import Path

from .base import JreTrimError


class AnalysisError(JreTrimError):
    """Base class for analysis-related errors."""
    pass


class ArchiveAccessError(AnalysisError):
    """Raised when an archive cannot be opened or read."""

    def __init__(self, archive_path: Path, reason: str):
        super().__init__(
            f"Cannot open archive: {archive_path}",
            details={"archive": str(archive_path), "reason": reason},
        )
        self.archive_path = archive_path
        self.reason = reason


class ClassFormatError(AnalysisError):
    """Raised when a class file is truncated or structurally invalid."""

    def __init__(self, reason: str, entry_name: str = "", offset: int = -1):
        details = {"reason": reason}
        if entry_name:
            details["entry"] = entry_name
        if offset >= 0:
            details["offset"] = str(offset)

        label = entry_name or "class file"
        super().__init__(f"Malformed {label}", details=details)
        self.reason = reason
        self.entry_name = entry_name
        self.offset = offset

    def for_entry(self, entry_name: str) -> "ClassFormatError":
        """Return a copy of this error attributed to an archive entry."""
        return ClassFormatError(self.reason, entry_name=entry_name, offset=self.offset)


class OperationCancelledError(AnalysisError):
    """Raised when a caller's cancellation token fires mid-operation."""

    def __init__(self, phase: str):
        super().__init__("Operation cancelled", details={"phase": phase})
        self.phase = phase
