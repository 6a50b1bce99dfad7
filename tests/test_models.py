"""Tests for analysis and build data models."""

from pathlib import Path

import pytest

from jre_trim.exceptions import InvalidConfigError
from jre_trim.models import (
    AnalysisResult,
    ArchiveRecord,
    BuildConfiguration,
    ClassDependencyRecord,
    format_size,
)


class TestFormatSize:
    @pytest.mark.parametrize(
        "size,text",
        [(512, "512 B"), (2048, "2.00 KB"), (5 * 1024 * 1024, "5.00 MB")],
    )
    def test_units(self, size, text):
        assert format_size(size) == text


class TestClassDependencyRecord:
    def test_self_dependency_removed(self):
        record = ClassDependencyRecord("com.acme.A", frozenset({"com.acme.A", "java.sql.Date"}))
        assert record.dependencies == {"java.sql.Date"}

    def test_to_dict_sorted(self):
        record = ClassDependencyRecord("a.B", frozenset({"z.Z", "c.C"}))
        assert record.to_dict()["dependencies"] == ["c.C", "z.Z"]


class TestAnalysisResult:
    def test_mappings_read_only(self):
        result = AnalysisResult(
            archive=ArchiveRecord(path=Path("a.jar")),
            modules=frozenset({"java.sql", "java.base"}),
            phase_module_counts={"extraction": 2},
        )
        assert result.sorted_modules == ["java.base", "java.sql"]
        with pytest.raises(TypeError):
            result.phase_module_counts["extraction"] = 5


class TestBuildConfiguration:
    def test_defaults(self, tmp_path):
        cfg = BuildConfiguration(output_path=tmp_path)
        assert cfg.compress and cfg.compression_level == 2
        assert cfg.strip_debug and cfg.no_man_pages and cfg.no_header_files
        assert cfg.enable_advanced_features
        assert cfg.include_javafx is False

    def test_paths_coerced(self):
        cfg = BuildConfiguration(output_path="dist", javafx_sdk_path="/opt/fx")
        assert cfg.output_path == Path("dist")
        assert cfg.javafx_sdk_path == Path("/opt/fx")
        assert cfg.include_javafx is True

    def test_explicit_javafx_flag_kept(self):
        cfg = BuildConfiguration(output_path="dist", javafx_sdk_path="/opt/fx", include_javafx=False)
        assert cfg.include_javafx is False

    @pytest.mark.parametrize("level", [-1, 3, 9])
    def test_invalid_compression_level(self, level):
        with pytest.raises(InvalidConfigError):
            BuildConfiguration(output_path="dist", compression_level=level)

    @pytest.mark.parametrize("path", [None, "", "   ", Path(""), Path(".")])
    def test_output_path_required(self, path):
        with pytest.raises(InvalidConfigError):
            BuildConfiguration(output_path=path)

    def test_root_and_absolute_paths_accepted(self, tmp_path):
        assert BuildConfiguration(output_path=tmp_path).output_path == tmp_path
        assert BuildConfiguration(output_path=Path("/")).output_path == Path("/")
