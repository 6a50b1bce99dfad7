"""Rule evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from ..logging_config import get_logger
from .rules import RULES, ModuleRule, RuleContext, RuleGroup

logger = get_logger(__name__)


@dataclass(frozen=True)
class AugmentationReport:
    """Outcome of running the rule table.

    Attributes:
        modules: Module set after all fired rules
        fired: Names of rules whose trigger held, in table order
        added: Rule name -> modules that rule newly contributed
        group_counts: Group name -> module count after that group ran
    """

    modules: frozenset[str]
    fired: tuple[str, ...] = ()
    added: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    group_counts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "added", MappingProxyType(dict(self.added)))
        object.__setattr__(self, "group_counts", MappingProxyType(dict(self.group_counts)))


def augment(
    modules: Iterable[str],
    context: RuleContext,
    rules: Sequence[ModuleRule] = RULES,
) -> AugmentationReport:
    """Union the modules of every applicable rule into ``modules``.

    Rules run in order; a rule sees the context only, never the growing set.
    """
    current = set(modules)
    fired: list[str] = []
    added: dict[str, tuple[str, ...]] = {}
    group_counts: dict[str, int] = {}

    for group in RuleGroup:
        for rule in rules:
            if rule.group is not group:
                continue
            if not rule.applies(context):
                continue
            new = tuple(m for m in rule.modules if m not in current)
            current.update(rule.modules)
            fired.append(rule.name)
            added[rule.name] = new
            if new:
                logger.log(
                    rule.log_level,
                    f"Rule {rule.name} added {len(new)} module(s): {', '.join(new)}",
                )
        group_counts[group.value] = len(current)

    return AugmentationReport(
        modules=frozenset(current),
        fired=tuple(fired),
        added=added,
        group_counts=group_counts,
    )
