"""Mapping of Java types to the platform modules that provide them."""

from .module_table import (
    PACKAGE_TO_MODULE,
    known_modules,
    known_packages,
    modules_for_packages,
    modules_for_types,
    package_of,
    resolve_module,
)

__all__ = [
    "PACKAGE_TO_MODULE",
    "known_modules",
    "known_packages",
    "modules_for_packages",
    "modules_for_types",
    "package_of",
    "resolve_module",
]
