"""Runtime image builder.

Turns an analysis result into a trimmed runtime image via ``jlink``:

    PREPARING -> LINKING -> POST_PROCESSING -> DONE
          \\          \\             \\
           +----------+-------------+--> FAILED

Progress: 0 at start, 10 once prepared, 30 once modules are validated,
30-90 while jlink runs, 100 when the image is verified.
"""

from __future__ import annotations

import os
import stat
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config import AnalysisConfig
from ..environment import JdkEnvironment, executable_name
from ..events import CancellationToken, EventEmitter, check_cancelled
from ..exceptions import BuildError, OutputDirectoryError
from ..logging_config import get_logger
from ..models import BASE_MODULE, AnalysisResult, BuildConfiguration, BuildReport
from ..process import run_tool

logger = get_logger(__name__)

JAVAFX_JMODS_DIR = "javafx-jmods"
VERSION_FILE = "VERSION.txt"

PROGRESS_PREPARED = 10.0
PROGRESS_VALIDATED = 30.0
PROGRESS_LINK_SPAN = 60.0
PROGRESS_DONE = 100.0


class BuildState(Enum):
    PREPARING = "preparing"
    LINKING = "linking"
    POST_PROCESSING = "post_processing"
    DONE = "done"
    FAILED = "failed"


def delete_tree(path: Path) -> None:
    """Remove ``path`` deepest-first, clearing read-only bits as needed.

    Raises:
        OSError: If any entry cannot be removed
    """
    for root, dirs, files in os.walk(path, topdown=False):
        for name in files:
            _remove(Path(root) / name, os.unlink)
        for name in dirs:
            child = Path(root) / name
            if child.is_symlink():
                _remove(child, os.unlink)
            else:
                _remove(child, os.rmdir)
    _remove(path, os.rmdir)


def _remove(path: Path, remover) -> None:
    try:
        remover(path)
    except PermissionError:
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD | stat.S_IEXEC)
        remover(path)


def directory_size(path: Path) -> int:
    """Sum of regular-file sizes under ``path``; unreadable files count as zero."""
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            file_path = Path(root) / name
            try:
                if file_path.is_file():
                    total += file_path.stat().st_size
            except OSError as e:
                logger.warning(f"Cannot size {file_path}: {e}")
    return total


class RuntimeImageBuilder:
    """Links a runtime image for one analysis result.

    Args:
        jdk: JDK providing ``jlink`` and ``jmods``
        config: Tuning (output subdirectory, join timeout, progress step)
        emitter: Receives log events and progress
        cancel_token: Checked between stages and while jlink runs
    """

    def __init__(
        self,
        jdk: JdkEnvironment,
        config: Optional[AnalysisConfig] = None,
        emitter: Optional[EventEmitter] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.jdk = jdk
        self.config = config or AnalysisConfig()
        self.emitter = emitter or EventEmitter(logger)
        self.cancel_token = cancel_token
        self.state = BuildState.PREPARING

    def _enter(self, state: BuildState) -> None:
        logger.debug(f"Build state {self.state.value} -> {state.value}")
        self.state = state
        self.emitter.enter_phase(state.value)

    def build(self, result: AnalysisResult, build_config: BuildConfiguration) -> BuildReport:
        """Prepare, link, post-process and verify.

        Raises:
            OutputDirectoryError: If a stale image cannot be removed
            JdkEnvironmentError: If jlink or jmods are missing
            BuildError: If jlink fails or the image lacks a launcher
            OperationCancelledError: If cancelled
        """
        self.emitter.progress(0.0)
        try:
            self._enter(BuildState.PREPARING)
            output_dir, jmods, javafx_jmods = self.prepare(build_config)
            self.emitter.progress(PROGRESS_PREPARED)

            modules = self.validate_modules(result.modules, build_config, javafx_jmods)
            self.emitter.progress(PROGRESS_VALIDATED)

            check_cancelled(self.cancel_token, BuildState.LINKING.value)
            self._enter(BuildState.LINKING)
            command = self.jlink_command(modules, build_config, output_dir, jmods, javafx_jmods)
            self.link(command)

            self._enter(BuildState.POST_PROCESSING)
            manifest_path, size = self.post_process(output_dir, command)

            self._enter(BuildState.DONE)
            self.emitter.progress(PROGRESS_DONE)
        except Exception:
            self.state = BuildState.FAILED
            raise

        self.emitter.info(f"Runtime image ready: {output_dir}")
        return BuildReport(
            output_dir=output_dir,
            modules=tuple(modules),
            command=tuple(command),
            image_size_bytes=size,
            manifest_path=manifest_path,
            final_state=self.state.value,
        )

    # ── Preparing ─────────────────────────────────────────────────

    def prepare(self, build_config: BuildConfiguration) -> tuple[Path, Path, Optional[Path]]:
        """Clear the output directory and verify the toolchain.

        Returns:
            (output directory, platform jmods, JavaFX jmods or None)
        """
        parent = Path(build_config.output_path)
        output_dir = parent / self.config.output_subdir
        self.emitter.info(f"Output directory: {output_dir}")

        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(parent, f"cannot create: {e}")

        if output_dir.exists() or output_dir.is_symlink():
            self.emitter.warning(f"Output directory exists and will be replaced: {output_dir}")
            try:
                if output_dir.is_dir() and not output_dir.is_symlink():
                    delete_tree(output_dir)
                else:
                    output_dir.unlink()
            except OSError as e:
                raise OutputDirectoryError(output_dir, f"cannot delete existing directory: {e}")

        self.jdk.require_tool("jlink")
        jmods = self.jdk.require_jmods_dir()
        if self.jdk.version:
            self.emitter.info(f"JDK {self.jdk.version} at {self.jdk.home}")

        javafx_jmods: Optional[Path] = None
        if build_config.include_javafx and build_config.javafx_sdk_path is not None:
            candidate = Path(build_config.javafx_sdk_path) / JAVAFX_JMODS_DIR
            if candidate.is_dir():
                javafx_jmods = candidate
            else:
                self.emitter.warning(
                    f"JavaFX jmods not found at {candidate}; JavaFX modules will be omitted"
                )

        return output_dir, jmods, javafx_jmods

    # ── Module validation ─────────────────────────────────────────

    def validate_modules(
        self,
        modules,
        build_config: BuildConfiguration,
        javafx_jmods: Optional[Path],
    ) -> list[str]:
        """Final link list: java.base ensured, JavaFX dropped if unlinkable, sorted."""
        selected = set(modules)
        selected.add(BASE_MODULE)

        javafx = sorted(m for m in selected if m.startswith("javafx."))
        if javafx:
            reason = None
            if not build_config.include_javafx:
                reason = "JavaFX support is not enabled"
            elif build_config.javafx_sdk_path is None:
                reason = "no JavaFX SDK path was given"
            elif javafx_jmods is None:
                reason = "the JavaFX SDK has no javafx-jmods directory"
            if reason:
                self.emitter.warning(f"Dropping {', '.join(javafx)}: {reason}")
                selected.difference_update(javafx)

        ordered = sorted(selected)
        self.emitter.info(f"Linking {len(ordered)} modules: {', '.join(ordered)}")
        return ordered

    # ── Linking ───────────────────────────────────────────────────

    def jlink_command(
        self,
        modules: list[str],
        build_config: BuildConfiguration,
        output_dir: Path,
        jmods: Path,
        javafx_jmods: Optional[Path],
    ) -> list[str]:
        module_path = str(jmods)
        if javafx_jmods is not None:
            module_path = f"{module_path}{os.pathsep}{javafx_jmods}"

        command = [
            str(self.jdk.tool("jlink")),
            "--module-path",
            module_path,
            "--add-modules",
            ",".join(modules),
            "--output",
            str(output_dir),
        ]
        if build_config.compress:
            command += ["--compress", str(build_config.compression_level)]
        if build_config.strip_debug:
            command.append("--strip-debug")
        if build_config.no_man_pages:
            command.append("--no-man-pages")
        if build_config.no_header_files:
            command.append("--no-header-files")
        command.append("--verbose")
        return command

    def link(self, command: list[str]) -> None:
        """Run jlink, mapping stdout volume onto the 30-90 progress span.

        Raises:
            BuildError: On a non-zero exit
        """
        step = self.config.progress_line_step
        line_count = 0

        def on_stdout(line: str) -> None:
            nonlocal line_count
            line_count += 1
            logger.debug(f"jlink: {line}")
            if line_count % step == 0:
                fraction = min(0.9, line_count / 100.0)
                self.emitter.progress(PROGRESS_VALIDATED + fraction * PROGRESS_LINK_SPAN)

        def on_stderr(line: str) -> None:
            logger.error(f"jlink stderr: {line}")

        run = run_tool(
            command,
            on_stdout_line=on_stdout,
            on_stderr_line=on_stderr,
            join_timeout=self.config.reader_join_timeout_seconds,
            cancel_token=self.cancel_token,
        )
        if not run.succeeded:
            error = BuildError(run.exit_code, run.command, stdout=run.stdout, stderr=run.stderr)
            self.emitter.error(str(error))
            raise error

        self.emitter.progress(PROGRESS_VALIDATED + PROGRESS_LINK_SPAN)
        self.emitter.info("jlink finished successfully")

    # ── Post-processing ───────────────────────────────────────────

    def post_process(self, output_dir: Path, command: list[str]) -> tuple[Path, int]:
        """Verify the launcher, write VERSION.txt and measure the image.

        Raises:
            BuildError: If ``bin/java`` is missing
        """
        launcher = output_dir / "bin" / executable_name("java")
        if not launcher.exists():
            raise BuildError(
                0,
                command,
                reason=f"runtime image has no launcher at {launcher}",
            )

        manifest_path = self.write_version_file(output_dir)
        size = directory_size(output_dir)
        self.emitter.info(f"Runtime image size: {size / (1024 * 1024):.2f} MB")
        return manifest_path, size

    def write_version_file(self, output_dir: Path) -> Path:
        path = output_dir / VERSION_FILE
        lines = [
            "Custom runtime image",
            f"Build time: {datetime.now().isoformat(timespec='seconds')}",
            f"Build tool: jre-trim {__version__}",
            f"Java version: {self.jdk.version or 'unknown'}",
            f"Operating system: {self.jdk.os_name} {self.jdk.os_arch}".rstrip(),
        ]
        try:
            path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as e:
            raise OutputDirectoryError(path, f"cannot write version file: {e}")
        logger.debug(f"Wrote {path}")
        return path


def build_image(
    result: AnalysisResult,
    build_config: BuildConfiguration,
    jdk: JdkEnvironment,
    config: Optional[AnalysisConfig] = None,
    emitter: Optional[EventEmitter] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> BuildReport:
    """Convenience wrapper around RuntimeImageBuilder.build."""
    builder = RuntimeImageBuilder(jdk, config=config, emitter=emitter, cancel_token=cancel_token)
    return builder.build(result, build_config)
