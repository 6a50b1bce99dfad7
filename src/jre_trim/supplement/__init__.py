"""Fallback module discovery."""

from .jdeps import SupplementResult, parse_module_list, supplement_with_jdeps

__all__ = ["SupplementResult", "parse_module_list", "supplement_with_jdeps"]
