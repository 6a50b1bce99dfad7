"""Public API for jre-trim.

Two calls cover the whole pipeline: analyze() works out which platform
modules an archive needs, build_runtime_image() links them into a runtime.

Example:
    >>> from jre_trim import analyze, build_runtime_image, BuildConfiguration
    >>>
    >>> result = analyze("app.jar")
    >>> print(result.sorted_modules)
    >>>
    >>> report = build_runtime_image(
    ...     result,
    ...     BuildConfiguration(output_path="dist/app-runtime"),
    ...     on_progress=lambda pct: print(f"{pct:.0f}%"),
    ... )
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .analysis import AnalysisEngine
from .builder import RuntimeImageBuilder
from .config import AnalysisConfig
from .environment import discover_jdk
from .events import CancellationToken, EventCallback, EventEmitter, ProgressCallback
from .exceptions import InvalidPathError
from .logging_config import get_logger
from .models import AnalysisResult, BuildConfiguration, BuildReport

logger = get_logger(__name__)


def analyze(
    archive_path: Path | str,
    on_progress: ProgressCallback = None,
    build_config: Optional[BuildConfiguration] = None,
    *,
    config: Optional[AnalysisConfig] = None,
    on_event: EventCallback = None,
    cancel_token: Optional[CancellationToken] = None,
) -> AnalysisResult:
    """Determine the platform modules an archive needs.

    The pipeline:
    1. Scan the archive (manifest, class entries, nested libraries, FXML)
    2. Parse every class file and resolve referenced types to modules
    3. Apply framework, toolkit and runtime heuristics
    4. Ask jdeps for more when too few modules were found

    Args:
        archive_path: JAR file to analyze
        on_progress: Receives percent complete in [0, 100]
        build_config: Only its ``enable_advanced_features`` flag is used;
            advanced rules are on when omitted
        config: Analysis tuning; defaults when omitted
        on_event: Receives AnalysisEvent records
        cancel_token: Checked between class files and phases

    Returns:
        AnalysisResult with the module set and per-class records

    Raises:
        InvalidPathError: If the archive does not exist
        ArchiveAccessError: If the archive cannot be read as a ZIP
        OperationCancelledError: If cancelled
    """
    path = Path(archive_path)
    if not path.is_file():
        raise InvalidPathError(path, "archive does not exist or is not a file")

    emitter = EventEmitter(logger, on_event=on_event, on_progress=on_progress)
    engine = AnalysisEngine(
        path,
        config=config,
        build_config=build_config,
        emitter=emitter,
        cancel_token=cancel_token,
    )
    return engine.run()


def build_runtime_image(
    result: AnalysisResult,
    build_config: BuildConfiguration,
    on_progress: ProgressCallback = None,
    *,
    config: Optional[AnalysisConfig] = None,
    on_event: EventCallback = None,
    cancel_token: Optional[CancellationToken] = None,
) -> BuildReport:
    """Link a runtime image holding ``result.modules``.

    The image lands in ``build_config.output_path / config.output_subdir``;
    an existing image there is deleted first.

    Raises:
        JdkEnvironmentError: If no JDK with jlink and jmods is found
        OutputDirectoryError: If the previous image cannot be removed
        BuildError: If jlink fails or the image lacks a launcher
        OperationCancelledError: If cancelled
    """
    config = config or AnalysisConfig()
    emitter = EventEmitter(logger, on_event=on_event, on_progress=on_progress)
    jdk = discover_jdk(config_home=config.jdk_home)
    emitter.info(f"Using JDK at {jdk.home}" + (f" ({jdk.version})" if jdk.version else ""))
    builder = RuntimeImageBuilder(jdk, config=config, emitter=emitter, cancel_token=cancel_token)
    return builder.build(result, build_config)
