"""Archive scanning: entry classification, manifest facts, layout detection.

A single pass over the central directory classifies entries into class
files, nested archives and FXML resources, and sets the Spring Boot and
JavaFX flags from the first matching entry.
"""

from __future__ import annotations

import threading
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..exceptions import ArchiveAccessError
from ..logging_config import get_logger
from ..models import ArchiveRecord
from .manifest import IMPLEMENTATION_VERSION, MAIN_CLASS, MANIFEST_ENTRY, parse_manifest

logger = get_logger(__name__)

CLASS_SUFFIX = ".class"
ARCHIVE_SUFFIX = ".jar"
FXML_SUFFIX = ".fxml"

JAVAFX_PREFIXES = ("javafx.", "com.sun.javafx.", "com.sun.glass.", "com.sun.prism.")
SPRING_BOOT_INDICATORS = ("BOOT-INF/", "org/springframework/boot/")
SPRING_BOOT_MANIFEST_KEYS = ("Spring-Boot-Version", "Start-Class")
SPRING_BOOT_LOADER_PACKAGE = "org.springframework.boot.loader."
BOOT_LIB_PREFIX = "BOOT-INF/lib/"
FXML_WEB_MARKERS = ("HTMLEditor", "WebView", "WebEngine", "javafx.scene.web")


def entry_to_class_name(entry_name: str) -> str:
    """``com/acme/Main.class`` -> ``com.acme.Main``."""
    if entry_name.endswith(CLASS_SUFFIX):
        entry_name = entry_name[: -len(CLASS_SUFFIX)]
    return entry_name.replace("/", ".")


def is_javafx_class(class_name: str) -> bool:
    return class_name.startswith(JAVAFX_PREFIXES)


def is_spring_boot_manifest(manifest: dict[str, str]) -> bool:
    """True for a manifest written by the Spring Boot repackager."""
    if any(manifest.get(key) for key in SPRING_BOOT_MANIFEST_KEYS):
        return True
    return (manifest.get(MAIN_CLASS) or "").startswith(SPRING_BOOT_LOADER_PACKAGE)


def has_fxml_web_marker(content: str) -> bool:
    return any(marker in content for marker in FXML_WEB_MARKERS)


@dataclass(frozen=True)
class ArchiveScan:
    """Classification of an archive's entries.

    Attributes:
        record: Archive-level facts
        class_entries: Entry names ending in ``.class``, in archive order
        nested_archives: Entry names ending in ``.jar``
        fxml_resources: Entry names ending in ``.fxml``
    """

    record: ArchiveRecord
    class_entries: tuple[str, ...] = ()
    nested_archives: tuple[str, ...] = ()
    fxml_resources: tuple[str, ...] = ()

    @property
    def boot_libraries(self) -> tuple[str, ...]:
        """Nested archives under ``BOOT-INF/lib/``."""
        return tuple(n for n in self.nested_archives if n.startswith(BOOT_LIB_PREFIX))


class OpenArchive:
    """Open handle on a JAR that is safe to read from several threads.

    Usage:
        with OpenArchive(path) as archive:
            data = archive.read_entry("com/acme/Main.class")
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.Lock()
        try:
            self._zip = zipfile.ZipFile(self.path)
        except FileNotFoundError:
            raise ArchiveAccessError(self.path, "file does not exist")
        except zipfile.BadZipFile as e:
            raise ArchiveAccessError(self.path, f"not a valid JAR/ZIP archive: {e}")
        except OSError as e:
            raise ArchiveAccessError(self.path, f"OS error: {e}")

    def __enter__(self) -> OpenArchive:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def entry_names(self) -> list[str]:
        return [info.filename for info in self._zip.infolist() if not info.is_dir()]

    def read_entry(self, name: str) -> bytes:
        """Raw bytes of one entry.

        Raises:
            ArchiveAccessError: If the entry is missing or its data is corrupt
        """
        try:
            with self._lock:
                return self._zip.read(name)
        except KeyError:
            raise ArchiveAccessError(self.path, f"no entry named {name}")
        except (zipfile.BadZipFile, zlib.error, OSError) as e:
            raise ArchiveAccessError(self.path, f"cannot read entry {name}: {e}")

    def read_manifest(self) -> dict[str, str]:
        """Main manifest attributes, or an empty dict when there is none."""
        name = next(
            (n for n in self._zip.namelist() if n.upper() == MANIFEST_ENTRY), None
        )
        if name is None:
            return {}
        return parse_manifest(self.read_entry(name))

    def iter_fxml_contents(self, names: Iterable[str]) -> Iterator[tuple[str, str]]:
        """Yield ``(entry_name, text)`` for each FXML resource.

        Unreadable resources are logged and skipped.
        """
        for name in names:
            try:
                data = self.read_entry(name)
            except ArchiveAccessError as e:
                logger.warning(f"Skipping unreadable FXML resource: {e}")
                continue
            yield name, data.decode("utf-8", errors="replace")

    def scan(self) -> ArchiveScan:
        """Classify entries and read manifest facts in one pass."""
        class_entries: list[str] = []
        nested: list[str] = []
        fxml: list[str] = []
        is_spring_boot = False
        is_javafx_app = False

        for name in self.entry_names():
            if name.endswith(CLASS_SUFFIX):
                class_entries.append(name)
                if not is_javafx_app and is_javafx_class(entry_to_class_name(name)):
                    is_javafx_app = True
            elif name.endswith(ARCHIVE_SUFFIX):
                nested.append(name)
            elif name.endswith(FXML_SUFFIX):
                fxml.append(name)

            if not is_spring_boot and name.startswith(SPRING_BOOT_INDICATORS):
                is_spring_boot = True
                logger.debug(f"Spring Boot layout detected at entry {name}")

        manifest = self.read_manifest()
        main_class: Optional[str] = manifest.get(MAIN_CLASS) or None
        version: Optional[str] = manifest.get(IMPLEMENTATION_VERSION) or None
        if not is_spring_boot and is_spring_boot_manifest(manifest):
            is_spring_boot = True
            logger.debug("Spring Boot layout detected from manifest")

        try:
            size_bytes = self.path.stat().st_size
        except OSError as e:
            raise ArchiveAccessError(self.path, f"cannot stat archive: {e}")

        record = ArchiveRecord(
            path=self.path,
            main_class=main_class,
            class_count=len(class_entries),
            nested_archive_count=len(nested),
            is_spring_boot=is_spring_boot,
            is_javafx_app=is_javafx_app,
            size_bytes=size_bytes,
            version=version,
        )

        logger.debug(
            f"Archive scanned: {record.class_count} classes, "
            f"{record.nested_archive_count} nested archives, {len(fxml)} FXML resources"
        )

        return ArchiveScan(
            record=record,
            class_entries=tuple(class_entries),
            nested_archives=tuple(nested),
            fxml_resources=tuple(fxml),
        )


def scan_archive(path: Path | str) -> ArchiveScan:
    """Open ``path``, classify its entries and close it again.

    Raises:
        ArchiveAccessError: If the archive cannot be opened
    """
    with OpenArchive(path) as archive:
        return archive.scan()
