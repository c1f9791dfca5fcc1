"""
Qt worker runnable — follows modern Qt pattern: QRunnable + QThreadPool.
Runs one analysis off the UI thread and hands the UI groups ready for review:
the keeper of every group already chosen by params.keep_strategy.
A stopped worker never reports results.
"""
from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QRunnable, QObject, Signal, QMutex, QMutexLocker
from audiodedupe.core.models import AnalysisParams, AnalysisStats, DuplicateGroup
from audiodedupe.commands import AnalysisCommand
from audiodedupe.services.duplicate_service import DuplicateService


class WorkerSignals(QObject):
    """Separate QObject to hold signals (QRunnable cannot emit signals directly)."""
    progress = Signal(str, int, object)  # stage, current, total
    finished = Signal(list, object, object)  # review_groups, stats, files_by_path
    error = Signal(str)


class AnalysisWorker(QRunnable):
    """
    Worker runnable that performs the analysis in a thread pool.
    Scans params.root_dir, or groups `paths` as given when the user picked files.
    Automatically deleted after execution (setAutoDelete=True).
    """
    def __init__(self, params: AnalysisParams, paths: Optional[Sequence[str]] = None):
        super().__init__()
        self.params = params
        self.paths = list(paths) if paths is not None else None
        self.command = AnalysisCommand()
        self.signals = WorkerSignals()
        self._stopped = False
        self._mutex = QMutex()
        self.setAutoDelete(True)

    def stop(self):
        """Sets the stopped flag; results computed after this are discarded."""
        with QMutexLocker(self._mutex):
            self._stopped = True

    def is_stopped(self) -> bool:
        with QMutexLocker(self._mutex):
            return self._stopped

    def safe_progress_emit(self, stage: str, current: int, total=None):
        """Emits progress unless the worker was stopped."""
        with QMutexLocker(self._mutex):
            if self._stopped:
                return
        self.signals.progress.emit(stage, current, total)

    def _analyze(self) -> Tuple[List[DuplicateGroup], AnalysisStats]:
        if self.paths is not None:
            return self.command.analyze_paths(
                self.paths,
                threshold=self.params.threshold,
                policy=self.params.version_policy,
                progress_callback=self.safe_progress_emit,
                strategy=self.params.keep_strategy
            )
        else:
            return self.command.execute(
                self.params,
                stopped_flag=self.is_stopped,
                progress_callback=self.safe_progress_emit
            )

    def run(self):
        """Main execution method. Runs in thread pool thread."""
        if self.is_stopped():
            return
        try:
            groups, stats = self._analyze()
            if self.is_stopped():
                return
            files_by_path = self.command.files_by_path()
            review_groups = DuplicateService.to_review_groups(
                groups, files_by_path, self.params.keep_strategy)
        except Exception as e:
            if not self.is_stopped():
                self.signals.error.emit(f"{type(e).__name__}: {str(e)}")
            return

        if not self.is_stopped():
            self.signals.finished.emit(review_groups, stats, files_by_path)
