"""Declarative module-augmentation rules.

Static extraction misses modules that applications reach only at run time
(SPI discovery, reflection, agents, FXML loading). Each rule pairs a trigger
over the analyzed archive with the modules to add when it fires. Rules run
in table order and only ever add modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from ..scanning.archive import JAVAFX_PREFIXES


class RuleGroup(Enum):
    """Phase a rule belongs to; groups run in declaration order."""

    FRAMEWORK = "framework"
    TOOLKIT = "toolkit"
    RUNTIME = "runtime"


@dataclass(frozen=True)
class RuleContext:
    """What the rules may inspect.

    Attributes:
        dependencies: Union of every class record's dependency set
        is_spring_boot: Archive uses the BOOT-INF nested layout
        requires_javafx: JavaFX classes, JavaFX references or FXML web markers found
        has_fxml: Archive carries at least one ``.fxml`` resource
        fxml_web_marker: An FXML resource mentions a web component
        enable_advanced_features: Advanced rules are allowed to fire
    """

    dependencies: frozenset[str] = frozenset()
    is_spring_boot: bool = False
    requires_javafx: bool = False
    has_fxml: bool = False
    fxml_web_marker: bool = False
    enable_advanced_features: bool = True

    def any_startswith(self, *prefixes: str) -> bool:
        return any(d.startswith(prefixes) for d in self.dependencies)

    def any_contains(self, *fragments: str) -> bool:
        return any(f in d for d in self.dependencies for f in fragments)


@dataclass(frozen=True)
class ModuleRule:
    """A trigger and the modules it contributes.

    Attributes:
        name: Unique rule identifier
        group: Phase the rule runs in
        trigger: Predicate over the rule context
        modules: Modules unioned into the set when the trigger holds
        description: Human-readable reason shown in reports
        advanced: Skipped when advanced features are disabled
        log_level: Level used to announce newly added modules
    """

    name: str
    group: RuleGroup
    trigger: Callable[[RuleContext], bool]
    modules: tuple[str, ...]
    description: str
    advanced: bool = False
    log_level: int = logging.DEBUG

    def applies(self, context: RuleContext) -> bool:
        if self.advanced and not context.enable_advanced_features:
            return False
        return self.trigger(context)


def detect_javafx_requirement(
    dependencies: Iterable[str], has_javafx_class: bool, fxml_web_marker: bool
) -> bool:
    """JavaFX is needed if a JavaFX class ships, is referenced, or FXML embeds web views."""
    if has_javafx_class or fxml_web_marker:
        return True
    return any(d.startswith(JAVAFX_PREFIXES) for d in dependencies)


# ==============================================================================
# Rule table
# ==============================================================================

SPRING_BOOT_MODULES = (
    "java.naming",
    "java.logging",
    "java.management",
    "java.security.jgss",
    "java.security.sasl",
    "java.scripting",
    "java.rmi",
    "java.xml",
    "java.sql",
    "java.compiler",
    "java.instrument",
    "java.datatransfer",
    "java.transaction.xa",
    "java.prefs",
    "jdk.unsupported",
    "jdk.management",
    "jdk.crypto.ec",
    "jdk.crypto.cryptoki",
    "jdk.localedata",
    "jdk.jfr",
    "jdk.security.auth",
)


def _javafx(predicate: Callable[[RuleContext], bool]) -> Callable[[RuleContext], bool]:
    return lambda ctx: ctx.requires_javafx and predicate(ctx)


RULES: tuple[ModuleRule, ...] = (
    ModuleRule(
        name="spring_boot_essentials",
        group=RuleGroup.FRAMEWORK,
        trigger=lambda ctx: ctx.is_spring_boot,
        modules=SPRING_BOOT_MODULES,
        description="Spring Boot loads JNDI, JMX, scripting and crypto providers at run time",
        log_level=logging.INFO,
    ),
    ModuleRule(
        name="javafx_foundation",
        group=RuleGroup.TOOLKIT,
        trigger=_javafx(lambda ctx: True),
        modules=("javafx.base", "javafx.graphics"),
        description="Every JavaFX application needs the base and graphics modules",
    ),
    ModuleRule(
        name="javafx_controls",
        group=RuleGroup.TOOLKIT,
        trigger=_javafx(lambda ctx: ctx.any_startswith("javafx.scene.control", "javafx.scene.chart")),
        modules=("javafx.controls",),
        description="Controls or charts referenced",
    ),
    ModuleRule(
        name="javafx_fxml",
        group=RuleGroup.TOOLKIT,
        trigger=_javafx(lambda ctx: ctx.has_fxml or ctx.any_startswith("javafx.fxml")),
        modules=("javafx.fxml",),
        description="FXML loader referenced or FXML resources bundled",
    ),
    ModuleRule(
        name="javafx_web",
        group=RuleGroup.TOOLKIT,
        trigger=_javafx(lambda ctx: ctx.fxml_web_marker or ctx.any_startswith("javafx.scene.web")),
        modules=("javafx.web",),
        description="WebView, WebEngine or HTMLEditor used",
    ),
    ModuleRule(
        name="javafx_media",
        group=RuleGroup.TOOLKIT,
        trigger=_javafx(lambda ctx: ctx.any_startswith("javafx.scene.media")),
        modules=("javafx.media",),
        description="Media playback referenced",
    ),
    ModuleRule(
        name="javafx_swing",
        group=RuleGroup.TOOLKIT,
        trigger=_javafx(lambda ctx: ctx.any_startswith("javafx.embed.swing")),
        modules=("javafx.swing",),
        description="Swing interop referenced",
    ),
    ModuleRule(
        name="logging_frameworks",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: ctx.any_startswith(
            "ch.qos.logback.", "org.slf4j.", "java.util.logging.", "org.apache.logging.log4j."
        ),
        modules=("java.naming", "java.logging", "java.management"),
        description="Logging frameworks use JNDI lookups and JMX",
    ),
    ModuleRule(
        name="javafx_desktop_integration",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: ctx.requires_javafx,
        modules=("java.desktop", "java.datatransfer", "java.prefs"),
        description="JavaFX uses AWT interop, the clipboard and preferences",
    ),
    ModuleRule(
        name="reflection",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: ctx.any_startswith("java.lang.reflect.", "java.lang.Class")
        or ctx.any_contains("ClassLoader"),
        modules=("java.compiler", "java.instrument"),
        description="Reflection or custom class loading",
    ),
    ModuleRule(
        name="instrumentation_agents",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: ctx.any_startswith(
            "java.lang.instrument.",
            "net.bytebuddy.",
            "org.objectweb.asm.",
            "javassist.",
            "org.springframework.aop.",
        )
        or ctx.any_contains("Agent", "Instrumentation"),
        modules=(
            "java.instrument",
            "java.management",
            "jdk.attach",
            "jdk.management.agent",
            "jdk.unsupported",
        ),
        description="Java agents or bytecode enhancement",
        advanced=True,
        log_level=logging.INFO,
    ),
    ModuleRule(
        name="native_interop",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: ctx.any_startswith("com.sun.jna.", "jnr.ffi.")
        or ctx.any_contains("Native", "JNI"),
        modules=("jdk.unsupported",),
        description="JNI or JNA native access",
        advanced=True,
        log_level=logging.INFO,
    ),
    ModuleRule(
        name="crypto_security",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: ctx.any_startswith("java.security.", "javax.crypto.", "org.bouncycastle.")
        or ctx.any_contains("Certificate", "KeyStore", "Signature"),
        modules=(
            "jdk.crypto.ec",
            "jdk.crypto.cryptoki",
            "java.security.jgss",
            "jdk.security.auth",
            "java.naming",
            "jdk.jartool",
        ),
        description="Cryptography, certificates or signing",
        advanced=True,
        log_level=logging.INFO,
    ),
    ModuleRule(
        name="enterprise_defaults",
        group=RuleGroup.RUNTIME,
        trigger=lambda ctx: True,
        modules=(
            "java.instrument",
            "jdk.unsupported",
            "jdk.crypto.ec",
            "jdk.management",
            "jdk.jartool",
        ),
        description="Modules enterprise applications commonly need",
        advanced=True,
        log_level=logging.INFO,
    ),
)


def get_rule(name: str) -> ModuleRule:
    for rule in RULES:
        if rule.name == name:
            return rule
    raise KeyError(name)
