"""
jre-trim - minimal Java runtime images for a single application JAR

Reads the bytecode of every class in an archive, maps referenced platform
types to Java platform modules, widens the set with framework heuristics and
links a trimmed runtime with jlink.
"""

__version__ = "0.1.0"

from .api import analyze, build_runtime_image
from .events import AnalysisEvent, CancellationToken
from .models import AnalysisResult, ArchiveRecord, BuildConfiguration, BuildReport

__all__ = [
    "analyze",  # Main entry point
    "build_runtime_image",
    "AnalysisEvent",
    "AnalysisResult",
    "ArchiveRecord",
    "BuildConfiguration",
    "BuildReport",
    "CancellationToken",
]
