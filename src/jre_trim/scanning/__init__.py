"""Archive scanning for compiled Java applications."""

from .archive import (
    ArchiveScan,
    OpenArchive,
    entry_to_class_name,
    has_fxml_web_marker,
    is_javafx_class,
    scan_archive,
)
from .manifest import parse_manifest

__all__ = [
    "ArchiveScan",
    "OpenArchive",
    "entry_to_class_name",
    "has_fxml_web_marker",
    "is_javafx_class",
    "parse_manifest",
    "scan_archive",
]
