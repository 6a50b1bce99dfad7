"""Archive analysis pipeline.

Phases (progress in percent):
    0-20    scan entries, manifest and layout flags
    20-70   parse class files and resolve their modules (thread pool)
    70-90   record Spring Boot nested libraries
    90-95   decide whether JavaFX is required
    95-98   heuristic augmentation
    98-100  jdeps fallback when too few modules resolved

The module set only grows; its size after each phase is recorded in
``AnalysisResult.phase_module_counts``.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from ..bytecode import extract_dependencies
from ..config import AnalysisConfig
from ..environment import JdkEnvironment, discover_jdk
from ..events import CancellationToken, EventEmitter, EventLevel, check_cancelled
from ..exceptions import ArchiveAccessError, ClassFormatError, JdkEnvironmentError
from ..heuristics import RuleContext, augment, detect_javafx_requirement
from ..logging_config import get_logger
from ..models import BASE_MODULE, AnalysisResult, BuildConfiguration, ClassDependencyRecord
from ..resolution import resolve_module
from ..scanning.archive import ArchiveScan, OpenArchive, has_fxml_web_marker, is_javafx_class
from ..supplement import supplement_with_jdeps
from .accumulator import AnalysisAccumulator

logger = get_logger(__name__)

PHASE_EXTRACTION = "extraction"
PHASE_SUPPLEMENT = "fallback_supplement"

KNOWN_THIRD_PARTY_PREFIXES = (
    "javax.money.",
    "javax.ws.rs.",
    "javax.servlet.",
    "javax.mail.",
    "javax.activation.",
    "javax.annotation.",
    "javax.inject.",
    "javax.validation.",
    "javax.persistence.",
    "javax.enterprise.",
    "javax.interceptor.",
    "javax.decorator.",
    "javax.jms.",
    "javax.jws.",
    "javax.xml.ws.",
    "javax.xml.bind.",
    "javax.faces.",
    "javax.portlet.",
    "javax.ejb.",
    "javax.resource.",
)


def is_known_third_party(type_name: str) -> bool:
    return type_name.startswith(KNOWN_THIRD_PARTY_PREFIXES)


class AnalysisEngine:
    """Runs the analysis phases for one archive.

    Args:
        archive_path: JAR to analyze
        config: Tuning (workers, fallback threshold, ...)
        build_config: Only ``enable_advanced_features`` is consulted
        jdk: JDK for the jdeps fallback; discovered lazily when None
        emitter: Log events and progress sink
        cancel_token: Checked between class files and phases
    """

    def __init__(
        self,
        archive_path: Path | str,
        config: Optional[AnalysisConfig] = None,
        build_config: Optional[BuildConfiguration] = None,
        jdk: Optional[JdkEnvironment] = None,
        emitter: Optional[EventEmitter] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.archive_path = Path(archive_path)
        self.config = config or AnalysisConfig()
        self.build_config = build_config
        self.jdk = jdk
        self.emitter = emitter or EventEmitter(logger)
        self.cancel_token = cancel_token
        self._accumulator = AnalysisAccumulator()
        self._phase_counts: dict[str, int] = {}
        self._unmapped_logged: set[str] = set()

    @property
    def advanced_enabled(self) -> bool:
        return self.build_config is None or self.build_config.enable_advanced_features

    def run(self) -> AnalysisResult:
        """Analyze the archive.

        Raises:
            ArchiveAccessError: If the archive cannot be opened
            OperationCancelledError: If the token is cancelled
        """
        start = time.monotonic()
        acc = self._accumulator
        emitter = self.emitter
        emitter.progress(0.0)

        with OpenArchive(self.archive_path) as archive:
            # ── Scan ─────────────────────────────────────────────
            emitter.enter_phase("scan")
            scan = archive.scan()
            record = scan.record
            emitter.info(
                f"Archive {record.path.name}: {record.class_count} classes, "
                f"{record.formatted_size}"
                + (f", main class {record.main_class}" if record.main_class else "")
            )
            emitter.progress(20.0)
            check_cancelled(self.cancel_token, "scan")

            # ── Extraction ───────────────────────────────────────
            emitter.enter_phase(PHASE_EXTRACTION)
            acc.add_modules([BASE_MODULE])
            self._extract_all(archive, scan)
            self._mark(PHASE_EXTRACTION)
            emitter.info(
                f"Processed {acc.processed} of {len(scan.class_entries)} class files"
            )
            emitter.progress(70.0)
            check_cancelled(self.cancel_token, PHASE_EXTRACTION)

            # ── Nested archives ──────────────────────────────────
            nested: tuple[str, ...] = ()
            if record.is_spring_boot:
                emitter.enter_phase("nested_archives")
                nested = scan.boot_libraries
                emitter.info(f"Spring Boot layout with {len(nested)} nested libraries")
            emitter.progress(90.0)

            # ── JavaFX detection ─────────────────────────────────
            emitter.enter_phase("javafx_detection")
            records = acc.records
            dependencies = frozenset(d for r in records for d in r.dependencies)
            web_marker = self._fxml_web_marker(archive, scan)
            requires_javafx = detect_javafx_requirement(
                dependencies,
                has_javafx_class=any(r.is_javafx_class for r in records),
                fxml_web_marker=web_marker,
            )
            if requires_javafx:
                emitter.info("JavaFX is required")
            emitter.progress(95.0)
            check_cancelled(self.cancel_token, "javafx_detection")

        # ── Heuristics ───────────────────────────────────────────
        emitter.enter_phase("heuristics")
        context = RuleContext(
            dependencies=dependencies,
            is_spring_boot=record.is_spring_boot,
            requires_javafx=requires_javafx,
            has_fxml=bool(scan.fxml_resources),
            fxml_web_marker=web_marker,
            enable_advanced_features=self.advanced_enabled,
        )
        report = augment(acc.modules, context)
        acc.add_modules(report.modules)
        for group, count in report.group_counts.items():
            self._phase_counts[group] = count
        emitter.progress(98.0)

        # ── Fallback ─────────────────────────────────────────────
        emitter.enter_phase(PHASE_SUPPLEMENT)
        supplemented = False
        if acc.module_count < self.config.fallback_min_modules:
            check_cancelled(self.cancel_token, PHASE_SUPPLEMENT)
            emitter.info(
                f"Only {acc.module_count} modules resolved; supplementing with jdeps"
            )
            supplement = supplement_with_jdeps(
                self.archive_path,
                acc.modules,
                self._jdk_or_none(),
                min_modules=self.config.fallback_min_modules,
                join_timeout=self.config.reader_join_timeout_seconds,
                cancel_token=self.cancel_token,
            )
            supplemented = supplement.invoked
            if supplement.warning:
                emitter.emit(EventLevel.WARNING, supplement.warning, log=False)
            acc.add_modules(supplement.modules)
        self._mark(PHASE_SUPPLEMENT)
        emitter.progress(100.0)

        elapsed = time.monotonic() - start
        modules = acc.modules
        emitter.info(
            f"Analysis finished in {elapsed:.2f}s: {len(modules)} modules, "
            f"{len(records)} classes"
        )

        return AnalysisResult(
            archive=record,
            modules=modules,
            class_dependencies=records,
            nested_archives=nested,
            requires_javafx=requires_javafx,
            elapsed_seconds=elapsed,
            classes_total=len(scan.class_entries),
            classes_processed=acc.processed,
            failed_classes=acc.failed,
            supplemented=supplemented,
            phase_module_counts=self._phase_counts,
            fired_rules=report.added,
        )

    def _mark(self, phase: str) -> None:
        self._phase_counts[phase] = self._accumulator.module_count

    # ── Extraction ────────────────────────────────────────────────

    def _extract_all(self, archive: OpenArchive, scan: ArchiveScan) -> None:
        entries = scan.class_entries
        total = len(entries)
        if total == 0:
            return

        log_every = max(1, int(total * self.config.log_sample_fraction))

        def process(entry_name: str) -> None:
            check_cancelled(self.cancel_token, PHASE_EXTRACTION)
            done = self._process_entry(archive, entry_name)
            if done is None:
                return
            self.emitter.progress(20.0 + 50.0 * done / total)
            if done % log_every == 0:
                logger.debug(f"Processed {done}/{total} class files ({done / total:.1%})")

        if total < self.config.parallel_threshold or self.config.effective_workers == 1:
            for entry_name in entries:
                process(entry_name)
            return

        with ThreadPoolExecutor(max_workers=self.config.effective_workers) as executor:
            futures = [executor.submit(process, name) for name in entries]
            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _process_entry(self, archive: OpenArchive, entry_name: str) -> Optional[int]:
        """Parse one class file into the accumulator; None if it failed."""
        try:
            extracted = extract_dependencies(archive.read_entry(entry_name), entry_name)
        except (ClassFormatError, ArchiveAccessError) as e:
            self.emitter.warning(f"Skipping {entry_name}: {e}")
            self._accumulator.record_failure(entry_name)
            return None
        except Exception as e:
            # One bad class file must not sink the rest of the archive
            self.emitter.warning(f"Skipping {entry_name}: unexpected {type(e).__name__}: {e}")
            self._accumulator.record_failure(entry_name)
            return None

        modules: set[str] = set()
        own_module = resolve_module(extracted.name)
        if own_module is not None:
            modules.add(own_module)
        for dependency in extracted.dependencies:
            module = resolve_module(dependency)
            if module is not None:
                modules.add(module)
            elif dependency.startswith(("java.", "javax.")) and not is_known_third_party(
                dependency
            ):
                self._log_unmapped(dependency)

        record = ClassDependencyRecord(
            class_name=extracted.name,
            dependencies=extracted.dependencies,
            module=own_module,
            is_javafx_class=is_javafx_class(extracted.name),
        )
        return self._accumulator.add_record(record, modules)

    def _log_unmapped(self, type_name: str) -> None:
        if type_name in self._unmapped_logged:
            return
        self._unmapped_logged.add(type_name)
        logger.debug(f"Unmapped platform type: {type_name}")

    # ── Helpers ───────────────────────────────────────────────────

    def _fxml_web_marker(self, archive: OpenArchive, scan: ArchiveScan) -> bool:
        for name, content in archive.iter_fxml_contents(scan.fxml_resources):
            if has_fxml_web_marker(content):
                logger.debug(f"Web component referenced in {name}")
                return True
        return False

    def _jdk_or_none(self) -> Optional[JdkEnvironment]:
        if self.jdk is not None:
            return self.jdk
        try:
            self.jdk = discover_jdk(config_home=self.config.jdk_home)
        except JdkEnvironmentError as e:
            self.emitter.debug(f"Cannot locate a JDK for jdeps: {e}")
            return None
        return self.jdk


def analyze_archive(
    archive_path: Path | str,
    config: Optional[AnalysisConfig] = None,
    build_config: Optional[BuildConfiguration] = None,
    jdk: Optional[JdkEnvironment] = None,
    emitter: Optional[EventEmitter] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> AnalysisResult:
    """Convenience wrapper around AnalysisEngine.run."""
    return AnalysisEngine(
        archive_path,
        config=config,
        build_config=build_config,
        jdk=jdk,
        emitter=emitter,
        cancel_token=cancel_token,
    ).run()
