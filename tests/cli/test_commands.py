"""Tests for the jre-trim command line."""

import json

from typer.testing import CliRunner

from classgen import class_referencing, write_jar
from jre_trim import __version__
from jre_trim.cli import app
from toolgen import posix_only

runner = CliRunner()


def _jar(tmp_path):
    return write_jar(
        tmp_path / "app.jar",
        classes={
            "com/acme/Main": class_referencing("com/acme/Main", "java/sql/Connection"),
        },
        manifest={"Main-Class": "com.acme.Main"},
    )


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestAnalyzeCommand:
    def test_summary(self, tmp_path, isolated_env, monkeypatch):
        monkeypatch.setenv("JRE_TRIM_FALLBACK_MIN_MODULES", "0")
        result = runner.invoke(app, ["analyze", str(_jar(tmp_path))])
        assert result.exit_code == 0, result.output
        assert "java.sql" in result.output
        assert "com.acme.Main" in result.output

    def test_json(self, tmp_path, isolated_env, monkeypatch):
        monkeypatch.setenv("JRE_TRIM_FALLBACK_MIN_MODULES", "0")
        result = runner.invoke(app, ["analyze", str(_jar(tmp_path)), "--json", "--no-advanced", "-q"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["modules"] == ["java.base", "java.sql"]
        assert data["archive"]["main_class"] == "com.acme.Main"

    def test_corrupt_archive(self, tmp_path, isolated_env):
        bad = tmp_path / "bad.jar"
        bad.write_bytes(b"nope")
        result = runner.invoke(app, ["analyze", str(bad), "-q"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_file_rejected(self, tmp_path, isolated_env):
        result = runner.invoke(app, ["analyze", str(tmp_path / "absent.jar")])
        assert result.exit_code != 0


class TestResolveCommand:
    def test_resolve(self):
        result = runner.invoke(app, ["resolve", "java.sql.Connection", "com.acme.Thing"])
        assert result.exit_code == 0
        assert "java.sql" in result.output
        assert "unknown" in result.output

    def test_resolve_packages(self):
        result = runner.invoke(
            app, ["resolve", "--packages", "java.util.logging", "javax.naming", "com.acme"]
        )
        assert result.exit_code == 0, result.output
        assert "java.logging" in result.output
        assert "java.naming" in result.output
        assert "unknown" in result.output

    def test_resolve_list_module(self):
        result = runner.invoke(app, ["resolve", "--list", "java.sql"])
        assert result.exit_code == 0, result.output
        assert "java.sql" in result.output.split()

    def test_resolve_list_unknown_module(self):
        result = runner.invoke(app, ["resolve", "--list", "no.such.module"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_resolve_needs_names(self):
        result = runner.invoke(app, ["resolve"])
        assert result.exit_code == 1


@posix_only
class TestBuildCommand:
    def test_build_and_save_config(self, tmp_path, isolated_env, make_jdk):
        jdk = make_jdk()
        out = tmp_path / "dist"
        result = runner.invoke(
            app,
            [
                "build",
                str(_jar(tmp_path)),
                "-o",
                str(out),
                "--jdk",
                str(jdk.home),
                "--no-advanced",
                "--save-config",
                "-q",
            ],
        )
        assert result.exit_code == 0, result.output
        assert (out / "library" / "bin" / "java").exists()
        saved = json.loads((isolated_env / "config" / "app.json").read_text())
        assert saved["output_directory"] == str(out)
        assert saved["build"]["compression_level"] == 2

    def test_output_from_saved_config(self, tmp_path, isolated_env, make_jdk):
        jdk = make_jdk()
        out = tmp_path / "remembered"
        (isolated_env / "config").mkdir()
        (isolated_env / "config" / "app.json").write_text(json.dumps({"output_directory": str(out)}))
        result = runner.invoke(
            app, ["build", str(_jar(tmp_path)), "--jdk", str(jdk.home), "--no-advanced", "-q"]
        )
        assert result.exit_code == 0, result.output
        assert (out / "library" / "VERSION.txt").exists()

    def test_no_output_anywhere(self, tmp_path, isolated_env):
        result = runner.invoke(app, ["build", str(_jar(tmp_path)), "-q"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_jlink_failure(self, tmp_path, isolated_env, make_jdk):
        from toolgen import FAILING_JLINK

        jdk = make_jdk(jlink=FAILING_JLINK)
        result = runner.invoke(
            app,
            ["build", str(_jar(tmp_path)), "-o", str(tmp_path / "o"), "--jdk", str(jdk.home), "-q"],
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_saved_build_options_reused(self, tmp_path, isolated_env, make_jdk):
        jdk = make_jdk()
        jar = str(_jar(tmp_path))
        common = ["--jdk", str(jdk.home), "--no-advanced", "-q"]
        first = runner.invoke(
            app,
            ["build", jar, "-o", str(tmp_path / "dist"), "--compress-level", "1", "--keep-debug"]
            + common
            + ["--save-config"],
        )
        assert first.exit_code == 0, first.output
        saved = json.loads((isolated_env / "config" / "app.json").read_text())
        assert saved["build"]["compression_level"] == 1
        assert saved["build"]["strip_debug"] is False

        second = runner.invoke(app, ["build", jar] + common)
        assert second.exit_code == 0, second.output
        second_args = (jdk.home / "jlink.log").read_text().splitlines()[-1]
        assert "--compress 1" in second_args
        assert "--strip-debug" not in second_args

        third = runner.invoke(app, ["build", jar, "--strip-debug", "--no-compress"] + common)
        assert third.exit_code == 0, third.output
        third_args = (jdk.home / "jlink.log").read_text().splitlines()[-1]
        assert "--strip-debug" in third_args
        assert "--compress" not in third_args

    def test_current_directory_output(self, tmp_path, isolated_env, make_jdk):
        jdk = make_jdk()
        result = runner.invoke(
            app,
            ["build", str(_jar(tmp_path)), "-o", ".", "--jdk", str(jdk.home), "--no-advanced", "-q"],
        )
        assert result.exit_code == 0, result.output
        assert (isolated_env / "library" / "bin" / "java").exists()
