"""Configuration loading and management for jre-trim.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.jre-trim.toml)
    3. Project config (./jre-trim.toml)
    4. Explicit config file
    5. Environment variables (JRE_TRIM_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
    >>> config.fallback_min_modules
    8
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, JreTrimError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "JRE_TRIM_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Tuning knobs for analysis and image building.

    Attributes:
        Performance tuning:
            workers: Worker threads for class parsing (None = min(cpu, 8))
            parallel_threshold: Below this many class files, parse sequentially

        Module resolution:
            fallback_min_modules: Run jdeps when fewer modules than this resolved
            log_sample_fraction: Fraction of classes logged individually at debug

        External tools:
            reader_join_timeout_seconds: Bound on joining stream reader threads
            progress_line_step: Report jlink progress every N stdout lines
            jdk_home: Explicit JDK location (None = discover)

        Output:
            output_subdir: Directory created under the requested output path
            verbosity: Logging verbosity level
    """

    # Performance tuning
    workers: Optional[int] = None
    parallel_threshold: int = 10

    # Module resolution
    fallback_min_modules: int = 8
    log_sample_fraction: float = 0.10

    # External tools
    reader_join_timeout_seconds: float = 1.0
    progress_line_step: int = 10
    jdk_home: Optional[str] = None

    # Output
    output_subdir: str = "library"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.parallel_threshold < 1:
            raise InvalidConfigError(
                "parallel_threshold", self.parallel_threshold, "must be at least 1"
            )
        if self.fallback_min_modules < 0:
            raise InvalidConfigError(
                "fallback_min_modules", self.fallback_min_modules, "must be non-negative"
            )
        if not 0.0 <= self.log_sample_fraction <= 1.0:
            raise InvalidConfigError(
                "log_sample_fraction", self.log_sample_fraction, "must be between 0.0 and 1.0"
            )
        if self.reader_join_timeout_seconds <= 0:
            raise InvalidConfigError(
                "reader_join_timeout_seconds",
                self.reader_join_timeout_seconds,
                "must be positive",
            )
        if self.progress_line_step < 1:
            raise InvalidConfigError(
                "progress_line_step", self.progress_line_step, "must be at least 1"
            )
        if not self.output_subdir or "/" in self.output_subdir or "\\" in self.output_subdir:
            raise InvalidConfigError(
                "output_subdir", self.output_subdir, "must be a single directory name"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "must be one of quiet, normal, verbose"
            )

    @property
    def effective_workers(self) -> int:
        """Worker count with auto-detection applied."""
        if self.workers is not None:
            return self.workers
        return min(os.cpu_count() or 1, 8)

    @property
    def jdk_home_path(self) -> Optional[Path]:
        return Path(self.jdk_home) if self.jdk_home else None


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        JreTrimError: If a config file is invalid or missing
        InvalidConfigError: If a merged value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".jre-trim.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except (OSError, ValueError) as e:
            raise JreTrimError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "jre-trim.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except (OSError, ValueError) as e:
            raise JreTrimError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise JreTrimError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except (OSError, ValueError) as e:
            raise JreTrimError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    if isinstance(merged.get("jdk_home"), Path):
        merged["jdk_home"] = str(merged["jdk_home"])

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise JreTrimError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from JRE_TRIM_* environment variables.

    Every AnalysisConfig field has a matching variable, e.g.
    ``JRE_TRIM_WORKERS=4`` or ``JRE_TRIM_JDK_HOME=/opt/jdk-21``.

    Returns:
        Dict of field_name -> parsed_value for any JRE_TRIM_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise JreTrimError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise JreTrimError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Allow either top-level keys or a [jre-trim] table
    section = data.get("jre-trim")
    if isinstance(section, dict):
        return dict(section)
    return data
