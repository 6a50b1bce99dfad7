"""Tests for type-name to platform-module resolution."""

import pytest

from jre_trim.resolution import (
    known_modules,
    known_packages,
    modules_for_packages,
    modules_for_types,
    package_of,
    resolve_module,
)


class TestResolveModule:
    """Exact, ancestor and core-prefix lookups."""

    @pytest.mark.parametrize(
        "type_name,module",
        [
            ("java.sql.Connection", "java.sql"),
            ("javax.sql.DataSource", "java.sql"),
            ("javax.swing.JFrame", "java.desktop"),
            ("java.util.logging.Logger", "java.logging"),
            ("java.lang.management.ManagementFactory", "java.management"),
            ("javax.naming.InitialContext", "java.naming"),
            ("java.lang.instrument.Instrumentation", "java.instrument"),
            ("sun.misc.Unsafe", "jdk.unsupported"),
            ("javafx.scene.control.Button", "javafx.controls"),
            ("javafx.scene.Node", "javafx.graphics"),
            ("javafx.scene.web.WebView", "javafx.web"),
        ],
    )
    def test_exact_package(self, type_name, module):
        assert resolve_module(type_name) == module

    def test_later_table_entry_wins(self):
        assert resolve_module("java.awt.datatransfer.Clipboard") == "java.datatransfer"

    def test_ancestor_package(self):
        assert resolve_module("javafx.scene.control.skin.internal.Thing") == "javafx.controls"

    def test_core_prefix_fallback(self):
        assert resolve_module("java.util.concurrent.atomic.LongAdder") == "java.base"
        assert resolve_module("java.lang.String") == "java.base"

    def test_application_class_unresolved(self):
        assert resolve_module("com.acme.Main") is None

    def test_default_package(self):
        assert resolve_module("Main") is None

    def test_empty_and_none(self):
        assert resolve_module("") is None
        assert resolve_module(None) is None

    def test_kerberos_not_base(self):
        # Excluded from the java.security. fallback
        assert resolve_module("java.security.auth.kerberos.Unknown") is None


class TestHelpers:
    def test_package_of(self):
        assert package_of("java.util.List") == "java.util"
        assert package_of("Main") == ""

    def test_modules_for_types_preserves_order(self):
        result = modules_for_types(["com.acme.X", "java.sql.Date"])
        assert list(result.items()) == [("com.acme.X", None), ("java.sql.Date", "java.sql")]

    def test_modules_for_packages(self):
        assert modules_for_packages(["java.sql", "javax.script", "org.acme"]) == {
            "java.sql",
            "java.scripting",
        }

    def test_known_packages_filtered(self):
        packages = known_packages("java.logging")
        assert packages == ["java.util.logging"]

    def test_known_modules(self):
        modules = known_modules()
        assert "java.base" in modules
        assert modules == sorted(modules)
