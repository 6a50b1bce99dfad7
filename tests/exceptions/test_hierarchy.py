"""Tests for the jre-trim exception hierarchy."""

from pathlib import Path

import pytest

from jre_trim.exceptions import (
    AnalysisError,
    ArchiveAccessError,
    BuildError,
    ClassFormatError,
    ConfigurationError,
    ExternalToolError,
    InvalidConfigError,
    InvalidPathError,
    JdkEnvironmentError,
    JreTrimError,
    OperationCancelledError,
    OutputDirectoryError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            InvalidConfigError("workers", 0, "must be at least 1"),
            InvalidPathError(Path("x"), "missing"),
            JdkEnvironmentError("no jlink"),
            ArchiveAccessError(Path("a.jar"), "corrupt"),
            ClassFormatError("bad magic"),
            OperationCancelledError("scan"),
            ExternalToolError("jdeps", 1, ["jdeps"]),
            BuildError(1, ["jlink"]),
            OutputDirectoryError(Path("out"), "locked"),
        ],
    )
    def test_all_derive_from_base(self, error):
        assert isinstance(error, JreTrimError)

    def test_groupings(self):
        assert issubclass(InvalidConfigError, ConfigurationError)
        assert issubclass(InvalidPathError, ConfigurationError)
        assert issubclass(ClassFormatError, AnalysisError)
        assert issubclass(ArchiveAccessError, AnalysisError)
        assert issubclass(BuildError, ExternalToolError)


class TestMessages:
    def test_details_appended(self):
        error = JreTrimError("Something failed", details={"phase": "scan"})
        assert str(error) == "Something failed (phase=scan)"

    def test_no_details(self):
        assert str(JreTrimError("plain")) == "plain"

    def test_build_error_carries_everything(self):
        error = BuildError(
            2,
            ["/jdk/bin/jlink", "--add-modules", "java.base"],
            stdout="partial output",
            stderr="Error: boom",
        )
        text = str(error)
        assert "exited with code 2" in text
        assert "/jdk/bin/jlink --add-modules java.base" in text
        assert "Error: boom" in text
        assert "partial output" in text
        assert error.tool == "jlink"
        assert error.command_line == "/jdk/bin/jlink --add-modules java.base"

    def test_build_error_reason_first(self):
        error = BuildError(0, ["jlink"], reason="no launcher")
        assert str(error).startswith("no launcher")
        assert error.details["reason"] == "no launcher"

    def test_class_format_error_for_entry(self):
        error = ClassFormatError("truncated", offset=12).for_entry("com/acme/A.class")
        assert error.entry_name == "com/acme/A.class"
        assert error.offset == 12
        assert "com/acme/A.class" in str(error)
