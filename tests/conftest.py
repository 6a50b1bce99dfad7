"""Shared test fixtures for jre-trim."""

import os

import pytest

from jre_trim.environment import JdkEnvironment
from toolgen import FAKE_JLINK, write_script


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def make_jdk(tmp_path):
    """Factory for a fake JDK home with chosen tool scripts.

    ``make_jdk(jlink=..., jdeps=..., jmods=True)`` returns a JdkEnvironment.
    Pass None for a tool to leave it out.
    """
    counter = {"n": 0}

    def factory(jlink=FAKE_JLINK, jdeps=None, jmods=True, version="17.0.9"):
        counter["n"] += 1
        home = tmp_path / f"jdk{counter['n']}"
        (home / "bin").mkdir(parents=True)
        if jlink is not None:
            write_script(home / "bin" / "jlink", jlink)
        if jdeps is not None:
            write_script(home / "bin" / "jdeps", jdeps)
        if jmods:
            (home / "jmods").mkdir()
            (home / "jmods" / "java.base.jmod").write_bytes(b"JM")
        (home / "release").write_text(f'JAVA_VERSION="{version}"\n', encoding="utf-8")
        return JdkEnvironment(home=home, version=version, os_name="Linux", os_arch="x86_64")

    return factory


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Clean cwd and home, no JRE_TRIM_* or JAVA_HOME variables."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in list(os.environ):
        if key.startswith("JRE_TRIM_") or key == "JAVA_HOME":
            monkeypatch.delenv(key)
    monkeypatch.chdir(work)
    return work
