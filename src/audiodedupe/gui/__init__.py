"""
Qt integration built on PySide6 (optional dependency, install with [gui] extra).
"""

from .worker import AnalysisWorker, WorkerSignals

__all__ = ["AnalysisWorker", "WorkerSignals"]
