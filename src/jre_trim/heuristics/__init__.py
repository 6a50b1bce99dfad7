"""Heuristic module augmentation."""

from .engine import AugmentationReport, augment
from .rules import (
    RULES,
    SPRING_BOOT_MODULES,
    ModuleRule,
    RuleContext,
    RuleGroup,
    detect_javafx_requirement,
    get_rule,
)

__all__ = [
    "AugmentationReport",
    "ModuleRule",
    "RULES",
    "RuleContext",
    "RuleGroup",
    "SPRING_BOOT_MODULES",
    "augment",
    "detect_javafx_requirement",
    "get_rule",
]
