"""Data models for archive analysis and runtime image builds."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .exceptions import InvalidConfigError

BASE_MODULE = "java.base"


def format_size(size_bytes: int) -> str:
    """Human-readable byte count: ``N B``, ``x.xx KB`` or ``x.xx MB``."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.2f} KB"
    return f"{size_bytes / (1024 * 1024):.2f} MB"


@dataclass(frozen=True)
class ArchiveRecord:
    """Facts about the analyzed JAR."""

    path: Path
    main_class: Optional[str] = None
    class_count: int = 0
    nested_archive_count: int = 0
    is_spring_boot: bool = False
    is_javafx_app: bool = False
    size_bytes: int = 0
    version: Optional[str] = None

    @property
    def formatted_size(self) -> str:
        return format_size(self.size_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "main_class": self.main_class,
            "class_count": self.class_count,
            "nested_archive_count": self.nested_archive_count,
            "is_spring_boot": self.is_spring_boot,
            "is_javafx_app": self.is_javafx_app,
            "size_bytes": self.size_bytes,
            "formatted_size": self.formatted_size,
            "version": self.version,
        }


@dataclass(frozen=True)
class ClassDependencyRecord:
    """Type references of one class, keyed by its dotted name."""

    class_name: str
    dependencies: frozenset[str] = frozenset()
    module: Optional[str] = None
    is_javafx_class: bool = False

    def __post_init__(self) -> None:
        if self.class_name in self.dependencies:
            object.__setattr__(self, "dependencies", self.dependencies - {self.class_name})

    def to_dict(self) -> dict[str, Any]:
        return {
            "class_name": self.class_name,
            "dependencies": sorted(self.dependencies),
            "module": self.module,
            "is_javafx_class": self.is_javafx_class,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analyzing one archive.

    ``phase_module_counts`` records the module-set size after each phase in
    execution order; the counts never decrease.
    """

    archive: ArchiveRecord
    modules: frozenset[str]
    class_dependencies: tuple[ClassDependencyRecord, ...] = ()
    nested_archives: tuple[str, ...] = ()
    requires_javafx: bool = False
    elapsed_seconds: float = 0.0
    classes_total: int = 0
    classes_processed: int = 0
    failed_classes: tuple[str, ...] = ()
    supplemented: bool = False
    phase_module_counts: Mapping[str, int] = field(default_factory=dict)
    fired_rules: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "phase_module_counts", MappingProxyType(dict(self.phase_module_counts))
        )
        object.__setattr__(self, "fired_rules", MappingProxyType(dict(self.fired_rules)))

    @property
    def sorted_modules(self) -> list[str]:
        return sorted(self.modules)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view."""
        return {
            "archive": self.archive.to_dict(),
            "modules": self.sorted_modules,
            "requires_javafx": self.requires_javafx,
            "nested_archives": list(self.nested_archives),
            "classes_total": self.classes_total,
            "classes_processed": self.classes_processed,
            "failed_classes": list(self.failed_classes),
            "supplemented": self.supplemented,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "phase_module_counts": dict(self.phase_module_counts),
            "fired_rules": {name: list(mods) for name, mods in self.fired_rules.items()},
            "class_dependencies": [r.to_dict() for r in self.class_dependencies],
        }


@dataclass(frozen=True)
class BuildConfiguration:
    """User options for one jlink run.

    Defaults: compress at level 2, strip debug info, drop man pages and
    header files, advanced heuristics on. ``include_javafx`` follows
    ``javafx_sdk_path`` unless set explicitly.
    """

    output_path: Path
    javafx_sdk_path: Optional[Path] = None
    compress: bool = True
    compression_level: int = 2
    strip_debug: bool = True
    no_man_pages: bool = True
    no_header_files: bool = True
    enable_advanced_features: bool = True
    include_javafx: Optional[bool] = None

    def __post_init__(self) -> None:
        # Path("") is Path("."), so an empty path can only be caught by its parts
        if self.output_path is None or not Path(str(self.output_path).strip()).parts:
            raise InvalidConfigError(
                "output_path", self.output_path, "output path is required and may not be empty"
            )
        if not isinstance(self.output_path, Path):
            object.__setattr__(self, "output_path", Path(self.output_path))
        if self.javafx_sdk_path is not None and not isinstance(self.javafx_sdk_path, Path):
            object.__setattr__(self, "javafx_sdk_path", Path(self.javafx_sdk_path))
        if self.compression_level not in (0, 1, 2):
            raise InvalidConfigError(
                "compression_level", self.compression_level, "must be 0, 1 or 2"
            )
        if self.include_javafx is None:
            object.__setattr__(self, "include_javafx", self.javafx_sdk_path is not None)


@dataclass(frozen=True)
class BuildReport:
    """Outcome of a successful runtime image build."""

    output_dir: Path
    modules: tuple[str, ...]
    command: tuple[str, ...]
    image_size_bytes: int
    manifest_path: Path
    final_state: str

    @property
    def formatted_size(self) -> str:
        return format_size(self.image_size_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_dir": str(self.output_dir),
            "modules": list(self.modules),
            "command": list(self.command),
            "image_size_bytes": self.image_size_bytes,
            "formatted_size": self.formatted_size,
            "manifest_path": str(self.manifest_path),
            "final_state": self.final_state,
        }
