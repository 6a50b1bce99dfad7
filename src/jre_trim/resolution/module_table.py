"""Package -> platform module lookup.

The table is assembled once at import from per-module package groups. Groups
are applied in order, so a package listed under two modules resolves to the
later one (``java.awt.datatransfer`` -> ``java.datatransfer``).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

_MODULE_PACKAGES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("java.base", (
        "java.lang", "java.lang.annotation", "java.lang.invoke", "java.lang.module",
        "java.lang.ref", "java.lang.reflect",
        "java.io", "java.math",
        "java.net", "java.net.spi",
        "java.nio", "java.nio.channels", "java.nio.channels.spi", "java.nio.charset",
        "java.nio.charset.spi", "java.nio.file", "java.nio.file.attribute",
        "java.nio.file.spi",
        "java.security", "java.security.cert", "java.security.interfaces",
        "java.security.spec",
        "java.text", "java.text.spi",
        "java.time", "java.time.chrono", "java.time.format", "java.time.temporal",
        "java.time.zone",
        "java.util", "java.util.concurrent", "java.util.concurrent.atomic",
        "java.util.concurrent.locks", "java.util.function", "java.util.jar",
        "java.util.regex", "java.util.spi", "java.util.stream", "java.util.zip",
        "javax.crypto", "javax.crypto.interfaces", "javax.crypto.spec",
        "javax.net", "javax.net.ssl",
        "javax.security.auth", "javax.security.auth.callback",
        "javax.security.auth.login", "javax.security.auth.spi",
        "javax.security.auth.x500", "javax.security.cert",
    )),
    ("java.desktop", (
        "java.awt", "java.awt.color", "java.awt.datatransfer", "java.awt.dnd",
        "java.awt.event", "java.awt.font", "java.awt.geom", "java.awt.im",
        "java.awt.im.spi", "java.awt.image", "java.awt.image.renderable",
        "java.awt.print",
        "javax.swing", "javax.swing.border", "javax.swing.colorchooser",
        "javax.swing.event", "javax.swing.filechooser", "javax.swing.plaf",
        "javax.swing.plaf.basic", "javax.swing.plaf.metal", "javax.swing.plaf.multi",
        "javax.swing.plaf.nimbus", "javax.swing.plaf.synth", "javax.swing.table",
        "javax.swing.text", "javax.swing.text.html", "javax.swing.text.html.parser",
        "javax.swing.text.rtf", "javax.swing.tree", "javax.swing.undo",
        "javax.accessibility",
        "javax.imageio", "javax.imageio.event", "javax.imageio.metadata",
        "javax.imageio.plugins.jpeg", "javax.imageio.plugins.tiff",
        "javax.imageio.spi", "javax.imageio.stream",
        "javax.print", "javax.print.attribute", "javax.print.attribute.standard",
        "javax.print.event",
        "javax.sound.sampled", "javax.sound.sampled.spi", "javax.sound.midi",
        "javax.sound.midi.spi",
        "java.applet", "java.beans", "java.beans.beancontext",
    )),
    ("java.sql", ("java.sql", "javax.sql")),
    ("java.xml", (
        "javax.xml", "javax.xml.catalog", "javax.xml.datatype", "javax.xml.namespace",
        "javax.xml.parsers", "javax.xml.stream", "javax.xml.stream.events",
        "javax.xml.stream.util", "javax.xml.transform", "javax.xml.transform.dom",
        "javax.xml.transform.sax", "javax.xml.transform.stax",
        "javax.xml.transform.stream", "javax.xml.validation", "javax.xml.xpath",
        "org.w3c.dom", "org.w3c.dom.bootstrap", "org.w3c.dom.events", "org.w3c.dom.ls",
        "org.w3c.dom.ranges", "org.w3c.dom.traversal", "org.w3c.dom.views",
        "org.xml.sax", "org.xml.sax.ext", "org.xml.sax.helpers",
    )),
    ("java.logging", ("java.util.logging",)),
    ("java.prefs", ("java.util.prefs",)),
    ("java.management", (
        "java.lang.management", "javax.management", "javax.management.loading",
        "javax.management.modelmbean", "javax.management.monitor",
        "javax.management.openmbean", "javax.management.relation",
        "javax.management.remote", "javax.management.timer",
    )),
    ("java.naming", (
        "javax.naming", "javax.naming.directory", "javax.naming.event",
        "javax.naming.ldap", "javax.naming.spi",
    )),
    ("java.rmi", (
        "java.rmi", "java.rmi.activation", "java.rmi.dgc", "java.rmi.registry",
        "java.rmi.server", "javax.rmi.ssl",
    )),
    ("java.scripting", ("javax.script",)),
    ("java.security.jgss", (
        "javax.security.auth.kerberos", "javax.security.auth.sasl", "org.ietf.jgss",
    )),
    ("java.security.sasl", ("javax.security.sasl",)),
    ("java.net.http", ("java.net.http",)),
    ("java.compiler", (
        "javax.annotation.processing", "javax.lang.model", "javax.lang.model.element",
        "javax.lang.model.type", "javax.lang.model.util", "javax.tools",
    )),
    ("java.instrument", ("java.lang.instrument",)),
    ("javafx.base", (
        "javafx.beans", "javafx.beans.binding", "javafx.beans.property",
        "javafx.beans.value", "javafx.collections", "javafx.event", "javafx.util",
        "javafx.util.converter", "javafx.concurrent",
    )),
    ("javafx.graphics", (
        "javafx.animation", "javafx.application", "javafx.css", "javafx.geometry",
        "javafx.print", "javafx.scene", "javafx.scene.effect", "javafx.scene.image",
        "javafx.scene.input", "javafx.scene.layout", "javafx.scene.paint",
        "javafx.scene.shape", "javafx.scene.text", "javafx.scene.transform",
        "javafx.stage",
    )),
    ("javafx.fxml", ("javafx.fxml",)),
    ("javafx.controls", (
        "javafx.scene.chart", "javafx.scene.control", "javafx.scene.control.cell",
        "javafx.scene.control.skin",
    )),
    ("javafx.web", ("javafx.scene.web",)),
    ("javafx.media", ("javafx.scene.media",)),
    ("javafx.swing", ("javafx.embed.swing",)),
    ("jdk.httpserver", ("com.sun.net.httpserver", "com.sun.net.httpserver.spi")),
    ("jdk.unsupported", ("sun.misc", "sun.reflect")),
    ("jdk.management", ("com.sun.management",)),
    ("jdk.management.agent", ("jdk.management.agent",)),
    ("jdk.attach", ("com.sun.tools.attach", "com.sun.tools.attach.spi")),
    ("jdk.jartool", ("com.sun.jarsigner", "sun.security.tools.jarsigner")),
    ("jdk.crypto.ec", ("sun.security.ec",)),
    ("jdk.crypto.cryptoki", ("sun.security.pkcs11",)),
    ("jdk.security.auth", (
        "com.sun.security.auth", "com.sun.security.auth.callback",
        "com.sun.security.auth.login", "com.sun.security.auth.module",
    )),
    ("jdk.localedata", ("sun.text.resources", "sun.util.resources")),
    ("jdk.jfr", ("jdk.jfr", "jdk.jfr.consumer")),
    ("jdk.zipfs", ("jdk.nio.zipfs",)),
    ("jdk.jsobject", ("netscape.javascript",)),
    ("jdk.xml.dom", (
        "org.w3c.dom.css", "org.w3c.dom.html", "org.w3c.dom.stylesheets",
        "org.w3c.dom.xpath",
    )),
    ("java.datatransfer", ("java.awt.datatransfer",)),
    ("java.transaction.xa", ("javax.transaction.xa",)),
)


def _build_table() -> Mapping[str, str]:
    table: dict[str, str] = {}
    for module, packages in _MODULE_PACKAGES:
        for package in packages:
            table[package] = module
    return MappingProxyType(table)


PACKAGE_TO_MODULE: Mapping[str, str] = _build_table()

_CORE_PREFIXES = (
    "java.lang.",
    "java.util.",
    "java.io.",
    "java.nio.",
    "java.net.",
    "java.text.",
    "java.time.",
    "java.math.",
    "java.security.",
)
_CORE_EXCLUDED_PREFIXES = ("java.security.auth.kerberos", "java.security.sasl")


def package_of(type_name: str) -> str:
    """Text before the last dot, or ``""`` for a type in the default package."""
    index = type_name.rfind(".")
    return type_name[:index] if index > 0 else ""


def resolve_module(type_name: Optional[str]) -> Optional[str]:
    """Platform module owning ``type_name``, or None for application code.

    Tries the exact package, then each ancestor package, then a core-prefix
    fallback to ``java.base``.
    """
    if not type_name:
        return None

    package = package_of(type_name)
    while package:
        module = PACKAGE_TO_MODULE.get(package)
        if module is not None:
            return module
        index = package.rfind(".")
        if index < 0:
            break
        package = package[:index]

    if type_name.startswith(_CORE_PREFIXES) and not type_name.startswith(
        _CORE_EXCLUDED_PREFIXES
    ):
        return "java.base"

    return None


def modules_for_types(type_names: Iterable[str]) -> dict[str, Optional[str]]:
    """Resolve several type names at once, preserving input order."""
    return {name: resolve_module(name) for name in type_names}


def modules_for_packages(packages: Iterable[str]) -> set[str]:
    """Modules that own any of ``packages`` (exact or ancestor match)."""
    found: set[str] = set()
    for package in packages:
        # A synthetic member name lets the package itself be looked up
        module = resolve_module(f"{package}.X")
        if module is not None:
            found.add(module)
    return found


def known_packages(module: Optional[str] = None) -> list[str]:
    """Sorted packages in the table, optionally limited to one module."""
    return sorted(p for p, m in PACKAGE_TO_MODULE.items() if module is None or m == module)


def known_modules() -> list[str]:
    return sorted(set(PACKAGE_TO_MODULE.values()))
