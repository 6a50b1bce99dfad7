"""Archive analysis pipeline."""

from .accumulator import AnalysisAccumulator
from .engine import AnalysisEngine, analyze_archive

__all__ = ["AnalysisAccumulator", "AnalysisEngine", "analyze_archive"]
