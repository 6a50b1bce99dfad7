"""Fallback module discovery with ``jdeps``.

When static extraction and the rule table leave too few modules, the JDK's
own analyzer gets a say. Its failures are never fatal.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..environment import JdkEnvironment
from ..events import CancellationToken, check_cancelled
from ..exceptions import ExternalToolError
from ..logging_config import get_logger
from ..process import run_tool

logger = get_logger(__name__)

JDEPS_ARGS = ("--print-module-deps", "--ignore-missing-deps")


@dataclass(frozen=True)
class SupplementResult:
    """Outcome of the fallback step.

    Attributes:
        modules: Module set after merging
        invoked: Whether jdeps was actually run
        discovered: Modules jdeps reported, in output order
        warning: Why jdeps contributed nothing, if it failed
    """

    modules: frozenset[str]
    invoked: bool = False
    discovered: tuple[str, ...] = ()
    warning: Optional[str] = None


def parse_module_list(output: str) -> list[str]:
    """Module names from ``--print-module-deps`` output (comma-separated lines)."""
    found: list[str] = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        for name in line.split(","):
            name = name.strip()
            if name and name not in found:
                found.append(name)
    return found


def jdeps_command(jdk: JdkEnvironment, archive_path: Path) -> list[str]:
    return [str(jdk.tool("jdeps")), *JDEPS_ARGS, str(archive_path)]


def supplement_with_jdeps(
    archive_path: Path,
    modules: Iterable[str],
    jdk: Optional[JdkEnvironment],
    min_modules: int = 8,
    join_timeout: float = 1.0,
    cancel_token: Optional[CancellationToken] = None,
) -> SupplementResult:
    """Merge jdeps' module list into ``modules`` if fewer than ``min_modules``.

    A missing JDK or jdeps binary, or a non-zero exit, is logged as a warning
    and leaves the set unchanged.
    """
    current = set(modules)
    if len(current) >= min_modules:
        return SupplementResult(modules=frozenset(current))

    logger.debug(f"Only {len(current)} modules resolved (< {min_modules}); consulting jdeps")

    if jdk is None:
        warning = "No JDK available; skipping jdeps supplement"
        logger.warning(warning)
        return SupplementResult(modules=frozenset(current), warning=warning)

    if not jdk.has_tool("jdeps"):
        warning = f"jdeps not found at {jdk.tool('jdeps')}; skipping supplement"
        logger.warning(warning)
        return SupplementResult(modules=frozenset(current), warning=warning)

    check_cancelled(cancel_token, "supplement")
    try:
        run = run_tool(
            jdeps_command(jdk, archive_path),
            join_timeout=join_timeout,
            cancel_token=cancel_token,
        )
    except ExternalToolError as e:
        warning = f"jdeps could not be started: {e.stderr or e}"
        logger.warning(warning)
        return SupplementResult(modules=frozenset(current), invoked=True, warning=warning)

    if not run.succeeded:
        warning = f"jdeps exited with code {run.exit_code}: {run.stderr.strip()}"
        logger.warning(warning)
        return SupplementResult(modules=frozenset(current), invoked=True, warning=warning)

    discovered = parse_module_list(run.stdout)
    for name in discovered:
        if name not in current:
            logger.debug(f"jdeps found module: {name}")
    current.update(discovered)
    logger.debug(f"jdeps supplement done; {len(current)} modules total")

    return SupplementResult(
        modules=frozenset(current), invoked=True, discovered=tuple(discovered)
    )
