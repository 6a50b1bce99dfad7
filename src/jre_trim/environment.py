"""JDK discovery for jre-trim.

Locates the JDK that provides ``jlink`` and ``jdeps`` and captures the facts
the builder needs (tool paths, ``jmods`` location, platform version). The
result is immutable once created.

Search order:
    1. Explicit path passed by the caller
    2. ``jdk_home`` from AnalysisConfig
    3. ``JAVA_HOME`` environment variable
    4. The ``java`` executable on ``PATH`` (resolved through symlinks)

Example:
    >>> jdk = discover_jdk()
    >>> jdk.tool("jlink")
    PosixPath('/usr/lib/jvm/java-21/bin/jlink')
    >>> jdk.version
    '21.0.2'
"""

from __future__ import annotations

import os
import platform
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .exceptions import JdkEnvironmentError
from .logging_config import get_logger

logger = get_logger(__name__)

IS_WINDOWS = sys.platform.startswith("win")


def executable_name(name: str) -> str:
    """Platform-specific executable file name (``.exe`` on Windows)."""
    return f"{name}.exe" if IS_WINDOWS else name


@dataclass(frozen=True)
class JdkEnvironment:
    """Immutable snapshot of a JDK installation.

    Use discover_jdk() rather than constructing this directly.

    Attributes:
        home: JDK home directory
        version: Platform version from the ``release`` file (None if absent)
        os_name: Host operating system name
        os_arch: Host machine architecture
    """

    home: Path
    version: Optional[str] = None
    os_name: str = ""
    os_arch: str = ""

    def tool(self, name: str) -> Path:
        """Path of a tool under ``bin/``; may not exist."""
        return self.home / "bin" / executable_name(name)

    def has_tool(self, name: str) -> bool:
        return self.tool(name).is_file()

    def require_tool(self, name: str) -> Path:
        """Path of a tool that must exist.

        Raises:
            JdkEnvironmentError: If the tool is missing (typically a JRE)
        """
        path = self.tool(name)
        if not path.is_file():
            raise JdkEnvironmentError(
                f"{name} not found at {path}; a full JDK is required, not a JRE",
                jdk_home=self.home,
            )
        return path

    def jmods_dir(self) -> Optional[Path]:
        """The platform ``jmods`` directory, trying ``<home>/../jmods`` second."""
        primary = self.home / "jmods"
        if primary.is_dir():
            return primary
        alternate = self.home.parent / "jmods"
        if alternate.is_dir():
            logger.warning(f"Using alternate jmods directory: {alternate}")
            return alternate
        return None

    def require_jmods_dir(self) -> Path:
        jmods = self.jmods_dir()
        if jmods is None:
            raise JdkEnvironmentError(
                f"jmods directory not found under {self.home}; a full JDK is required",
                jdk_home=self.home,
            )
        return jmods


def discover_jdk(
    jdk_home: Optional[Path | str] = None,
    config_home: Optional[Path | str] = None,
) -> JdkEnvironment:
    """Locate a JDK and capture its facts.

    Args:
        jdk_home: Explicit JDK home (highest priority)
        config_home: ``jdk_home`` from configuration

    Returns:
        Immutable JdkEnvironment

    Raises:
        JdkEnvironmentError: If no candidate directory exists
    """
    home = _select_home(jdk_home, config_home)
    version = read_release_version(home)

    logger.debug(f"JDK discovered: home={home}, version={version}")

    return JdkEnvironment(
        home=home,
        version=version,
        os_name=platform.system(),
        os_arch=platform.machine(),
    )


def _select_home(
    jdk_home: Optional[Path | str], config_home: Optional[Path | str]
) -> Path:
    for source, candidate in (
        ("argument", jdk_home),
        ("configuration", config_home),
        ("JAVA_HOME", os.environ.get("JAVA_HOME")),
    ):
        if not candidate:
            continue
        path = Path(candidate).expanduser()
        if not path.is_dir():
            raise JdkEnvironmentError(
                f"JDK home from {source} is not a directory: {path}", jdk_home=path
            )
        return path.resolve()

    java = shutil.which("java")
    if java is not None:
        # <home>/bin/java
        return Path(java).resolve().parent.parent

    raise JdkEnvironmentError("no JDK found; set JAVA_HOME or pass --jdk")


def read_release_version(home: Path) -> Optional[str]:
    """``JAVA_VERSION`` from ``<home>/release``, or None if unavailable."""
    release = home / "release"
    try:
        text = release.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None

    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "JAVA_VERSION":
            return value.strip().strip('"') or None
    return None
