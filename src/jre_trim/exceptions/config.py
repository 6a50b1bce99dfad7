"""Configuration exceptions: paths, settings, JDK installation."""

from pathlib import Path
from typing import Any, Optional

from .base import JreTrimError


class ConfigurationError(JreTrimError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class JdkEnvironmentError(JreTrimError):
    """Raised when the JDK installation cannot serve a request.

    Covers a missing ``jlink``/``jdeps`` executable, a missing ``jmods``
    directory, or a home that turns out to be a plain JRE.
    """

    def __init__(self, reason: str, jdk_home: Optional[Path] = None):
        details = {"reason": reason}
        if jdk_home is not None:
            details["jdk_home"] = str(jdk_home)

        super().__init__(f"Unusable JDK: {reason}", details=details)
        self.reason = reason
        self.jdk_home = jdk_home
