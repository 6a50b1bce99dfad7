"""Exception hierarchy for jre-trim."""

from .analysis import (
    AnalysisError,
    ArchiveAccessError,
    ClassFormatError,
    OperationCancelledError,
)
from .base import JreTrimError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    JdkEnvironmentError,
)
from .tooling import BuildError, ExternalToolError, OutputDirectoryError

__all__ = [
    "JreTrimError",
    "AnalysisError",
    "ArchiveAccessError",
    "ClassFormatError",
    "OperationCancelledError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "JdkEnvironmentError",
    "ExternalToolError",
    "BuildError",
    "OutputDirectoryError",
]
