"""Tests for the jdeps fallback."""

from pathlib import Path

from jre_trim.supplement import parse_module_list, supplement_with_jdeps
from toolgen import fake_jdeps, jdeps_calls, posix_only


class TestParseModuleList:
    def test_comma_separated(self):
        assert parse_module_list("java.base,java.sql,java.xml\n") == [
            "java.base",
            "java.sql",
            "java.xml",
        ]

    def test_multiple_lines_deduplicated(self):
        assert parse_module_list("java.base\njava.base, java.naming\n\n") == [
            "java.base",
            "java.naming",
        ]

    def test_empty(self):
        assert parse_module_list("") == []


class TestSupplement:
    def test_not_needed_above_threshold(self, make_jdk):
        modules = {f"m{i}" for i in range(8)}
        result = supplement_with_jdeps(Path("app.jar"), modules, jdk=None, min_modules=8)
        assert not result.invoked
        assert result.modules == modules

    def test_no_jdk_warns(self):
        result = supplement_with_jdeps(Path("app.jar"), {"java.base"}, jdk=None)
        assert not result.invoked
        assert result.warning
        assert result.modules == {"java.base"}

    def test_missing_jdeps_binary(self, make_jdk):
        jdk = make_jdk(jdeps=None)
        result = supplement_with_jdeps(Path("app.jar"), {"java.base"}, jdk=jdk)
        assert not result.invoked
        assert "jdeps" in result.warning

    @posix_only
    def test_merges_output(self, make_jdk, tmp_path):
        jdk = make_jdk(jdeps=fake_jdeps("java.base,java.sql,java.naming"))
        result = supplement_with_jdeps(tmp_path / "app.jar", {"java.base", "java.xml"}, jdk=jdk)
        assert result.invoked
        assert result.discovered == ("java.base", "java.sql", "java.naming")
        assert result.modules == {"java.base", "java.xml", "java.sql", "java.naming"}
        assert jdeps_calls(jdk.home) == 1

    @posix_only
    def test_failure_leaves_set_unchanged(self, make_jdk, tmp_path):
        jdk = make_jdk(jdeps=fake_jdeps("java.sql", exit_code=2))
        result = supplement_with_jdeps(tmp_path / "app.jar", {"java.base"}, jdk=jdk)
        assert result.invoked
        assert result.modules == {"java.base"}
        assert "exited with code 2" in result.warning
