"""Remembered CLI choices stored as JSON.

Only the CLI reads and writes this record; analysis and build take their
inputs as arguments.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .logging_config import get_logger
from .models import BuildConfiguration

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "app.json"


@dataclass
class BuildOptions:
    compress: bool = True
    compression_level: int = 2
    strip_debug: bool = True
    no_man_pages: bool = True
    no_header_files: bool = True


@dataclass
class UserConfig:
    """Last-used archive, JavaFX choice, output directory and build options."""

    archive_path: Optional[str] = None
    enable_javafx: bool = False
    javafx_sdk_path: Optional[str] = None
    output_directory: Optional[str] = None
    build: BuildOptions = field(default_factory=BuildOptions)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserConfig:
        """Build from parsed JSON, ignoring unknown keys."""
        known = {f.name for f in fields(cls)} - {"build"}
        values = {k: v for k, v in data.items() if k in known}
        build_data = data.get("build") or {}
        build_known = {f.name for f in fields(BuildOptions)}
        build = BuildOptions(**{k: v for k, v in build_data.items() if k in build_known})
        return cls(build=build, **values)

    def to_build_configuration(
        self, output_path: Path | str, enable_advanced_features: bool = True
    ) -> BuildConfiguration:
        sdk = Path(self.javafx_sdk_path) if self.javafx_sdk_path else None
        return BuildConfiguration(
            output_path=Path(output_path),
            javafx_sdk_path=sdk,
            compress=self.build.compress,
            compression_level=self.build.compression_level,
            strip_debug=self.build.strip_debug,
            no_man_pages=self.build.no_man_pages,
            no_header_files=self.build.no_header_files,
            enable_advanced_features=enable_advanced_features,
            include_javafx=self.enable_javafx and sdk is not None,
        )


def load_user_config(path: Path = DEFAULT_CONFIG_PATH) -> UserConfig:
    """Read the stored record; defaults when missing or unreadable."""
    if not path.exists():
        logger.debug(f"No user config at {path}, using defaults")
        return UserConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value is not an object")
        return UserConfig.from_dict(data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Cannot read user config {path}: {e}; using defaults")
        return UserConfig()


def save_user_config(config: UserConfig, path: Path = DEFAULT_CONFIG_PATH) -> bool:
    """Write the record as indented JSON. Returns False on I/O failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot save user config {path}: {e}")
        return False
    logger.info(f"Saved user config to {path}")
    return True
