"""Tests for configuration loading and validation."""

import pytest

from jre_trim.config import AnalysisConfig, load_config
from jre_trim.exceptions import InvalidConfigError, JreTrimError


class TestAnalysisConfig:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.fallback_min_modules == 8
        assert config.parallel_threshold == 10
        assert config.output_subdir == "library"
        assert 1 <= config.effective_workers <= 8

    def test_explicit_workers(self):
        assert AnalysisConfig(workers=3).effective_workers == 3

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"parallel_threshold": 0},
            {"fallback_min_modules": -1},
            {"log_sample_fraction": 1.5},
            {"reader_join_timeout_seconds": 0},
            {"progress_line_step": 0},
            {"output_subdir": "a/b"},
            {"output_subdir": ""},
            {"verbosity": "loud"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(**kwargs)

    def test_jdk_home_path(self):
        assert AnalysisConfig().jdk_home_path is None
        assert str(AnalysisConfig(jdk_home="/opt/jdk").jdk_home_path) == "/opt/jdk"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            AnalysisConfig().workers = 2


class TestLoadConfig:
    """Merging order: files, then environment, then overrides."""

    def test_defaults_only(self, isolated_env):
        assert load_config() == AnalysisConfig()

    def test_project_file(self, isolated_env):
        (isolated_env / "jre-trim.toml").write_text("fallback_min_modules = 4\n")
        assert load_config().fallback_min_modules == 4

    def test_table_form(self, isolated_env):
        (isolated_env / "jre-trim.toml").write_text('[jre-trim]\noutput_subdir = "runtime"\n')
        assert load_config().output_subdir == "runtime"

    def test_explicit_file_beats_project(self, isolated_env, tmp_path):
        (isolated_env / "jre-trim.toml").write_text("workers = 2\n")
        explicit = tmp_path / "custom.toml"
        explicit.write_text("workers = 6\n")
        assert load_config(config_file=explicit).workers == 6

    def test_env_beats_files(self, isolated_env, monkeypatch):
        (isolated_env / "jre-trim.toml").write_text("workers = 2\n")
        monkeypatch.setenv("JRE_TRIM_WORKERS", "5")
        monkeypatch.setenv("JRE_TRIM_LOG_SAMPLE_FRACTION", "0.5")
        config = load_config()
        assert config.workers == 5
        assert config.log_sample_fraction == 0.5

    def test_overrides_beat_env(self, isolated_env, monkeypatch):
        monkeypatch.setenv("JRE_TRIM_WORKERS", "5")
        assert load_config(workers=7).workers == 7

    def test_none_overrides_ignored(self, isolated_env, monkeypatch):
        monkeypatch.setenv("JRE_TRIM_WORKERS", "5")
        assert load_config(workers=None).workers == 5

    def test_verbose_and_quiet_flags(self, isolated_env):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_path_jdk_home_converted(self, isolated_env, tmp_path):
        assert load_config(jdk_home=tmp_path).jdk_home == str(tmp_path)

    def test_missing_explicit_file(self, isolated_env, tmp_path):
        with pytest.raises(JreTrimError):
            load_config(config_file=tmp_path / "nope.toml")

    def test_invalid_toml(self, isolated_env):
        (isolated_env / "jre-trim.toml").write_text("workers = = 3\n")
        with pytest.raises(JreTrimError):
            load_config()

    def test_unknown_key(self, isolated_env):
        (isolated_env / "jre-trim.toml").write_text("colour = 'blue'\n")
        with pytest.raises(JreTrimError):
            load_config()

    def test_bad_env_value(self, isolated_env, monkeypatch):
        monkeypatch.setenv("JRE_TRIM_WORKERS", "many")
        with pytest.raises(JreTrimError):
            load_config()
