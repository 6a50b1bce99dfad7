"""Tests for archive classification and entry access."""

import pytest

from classgen import class_referencing, write_jar
from jre_trim.exceptions import ArchiveAccessError
from jre_trim.scanning.archive import (
    OpenArchive,
    entry_to_class_name,
    has_fxml_web_marker,
    is_javafx_class,
    is_spring_boot_manifest,
    scan_archive,
)


class TestHelpers:
    def test_entry_to_class_name(self):
        assert entry_to_class_name("com/acme/Main.class") == "com.acme.Main"

    def test_is_javafx_class(self):
        assert is_javafx_class("javafx.application.Application")
        assert is_javafx_class("com.sun.javafx.runtime.VersionInfo")
        assert not is_javafx_class("com.acme.Main")

    def test_fxml_web_marker(self):
        assert has_fxml_web_marker('<WebView fx:id="browser"/>')
        assert not has_fxml_web_marker("<Button text='ok'/>")

    def test_spring_boot_manifest(self):
        assert is_spring_boot_manifest({"Spring-Boot-Version": "3.2.0"})
        assert is_spring_boot_manifest({"Start-Class": "com.acme.App"})
        assert is_spring_boot_manifest(
            {"Main-Class": "org.springframework.boot.loader.launch.JarLauncher"}
        )
        assert not is_spring_boot_manifest({"Main-Class": "com.acme.Main"})
        assert not is_spring_boot_manifest({})


class TestScanArchive:
    def test_plain_application(self, tmp_path):
        jar = write_jar(
            tmp_path / "app.jar",
            classes={
                "com/acme/Main": class_referencing("com/acme/Main"),
                "com/acme/util/Helper": class_referencing("com/acme/util/Helper"),
            },
            manifest={"Main-Class": "com.acme.Main", "Implementation-Version": "1.4"},
            resources={"config/app.properties": b"a=1"},
        )
        scan = scan_archive(jar)
        assert scan.class_entries == ("com/acme/Main.class", "com/acme/util/Helper.class")
        assert scan.record.main_class == "com.acme.Main"
        assert scan.record.version == "1.4"
        assert scan.record.class_count == 2
        assert scan.record.size_bytes == jar.stat().st_size
        assert not scan.record.is_spring_boot
        assert not scan.record.is_javafx_app

    def test_spring_boot_layout(self, tmp_path):
        jar = write_jar(
            tmp_path / "boot.jar",
            classes={"BOOT-INF/classes/com/acme/App": class_referencing("com/acme/App")},
            resources={
                "BOOT-INF/lib/spring-core-6.0.jar": b"PK",
                "BOOT-INF/lib/jackson-databind.jar": b"PK",
                "lib/other.jar": b"PK",
            },
        )
        scan = scan_archive(jar)
        assert scan.record.is_spring_boot
        assert scan.record.nested_archive_count == 3
        assert scan.boot_libraries == (
            "BOOT-INF/lib/spring-core-6.0.jar",
            "BOOT-INF/lib/jackson-databind.jar",
        )

    def test_spring_boot_loader_without_boot_inf(self, tmp_path):
        jar = write_jar(
            tmp_path / "launcher.jar",
            classes={
                "org/springframework/boot/loader/JarLauncher": class_referencing(
                    "org/springframework/boot/loader/JarLauncher"
                ),
            },
            manifest={"Main-Class": "org.springframework.boot.loader.JarLauncher"},
        )
        assert scan_archive(jar).record.is_spring_boot

    def test_spring_boot_from_manifest_only(self, tmp_path):
        jar = write_jar(
            tmp_path / "thin.jar",
            classes={"com/acme/App": class_referencing("com/acme/App")},
            manifest={"Main-Class": "com.acme.App", "Spring-Boot-Version": "3.2.0"},
        )
        assert scan_archive(jar).record.is_spring_boot

    def test_javafx_class_detected(self, tmp_path):
        jar = write_jar(
            tmp_path / "fx.jar",
            classes={"javafx/application/Application": class_referencing("javafx/application/Application")},
        )
        assert scan_archive(jar).record.is_javafx_app

    def test_fxml_resources_collected(self, tmp_path):
        jar = write_jar(
            tmp_path / "ui.jar",
            resources={"ui/main.fxml": b"<VBox/>", "ui/style.css": b""},
        )
        assert scan_archive(jar).fxml_resources == ("ui/main.fxml",)

    def test_missing_manifest(self, tmp_path):
        jar = write_jar(tmp_path / "bare.jar", resources={"readme.txt": b"hi"})
        assert scan_archive(jar).record.main_class is None


class TestOpenArchive:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ArchiveAccessError):
            OpenArchive(tmp_path / "nope.jar")

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "fake.jar"
        path.write_bytes(b"definitely not a zip")
        with pytest.raises(ArchiveAccessError) as exc_info:
            OpenArchive(path)
        assert "fake.jar" in str(exc_info.value)

    def test_missing_entry(self, tmp_path):
        jar = write_jar(tmp_path / "a.jar", resources={"x.txt": b"x"})
        with OpenArchive(jar) as archive:
            with pytest.raises(ArchiveAccessError):
                archive.read_entry("y.txt")

    def test_fxml_contents(self, tmp_path):
        jar = write_jar(tmp_path / "a.jar", resources={"v.fxml": b"<WebView/>"})
        with OpenArchive(jar) as archive:
            assert list(archive.iter_fxml_contents(["v.fxml", "missing.fxml"])) == [
                ("v.fxml", "<WebView/>")
            ]
