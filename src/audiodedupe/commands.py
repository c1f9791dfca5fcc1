"""
Unified command orchestrator for duplicate analysis.
This is the SINGLE source of truth for the workflow — used by both GUI and CLI.
No Qt/PySide6 dependencies — pure Python.
"""
import logging
import os
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from audiodedupe.core.models import (
    AnalysisParams, AnalysisStats, AudioFile, DuplicateGroup, KeepStrategy, Stage, VersionPolicy,
    DEFAULT_THRESHOLD)
from audiodedupe.core.scanner import AudioScanner
from audiodedupe.core.grouper import NameGrouper
from audiodedupe.services.metadata_service import MetadataService

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]


class AnalysisCommand:
    """
    Orchestrates one analysis run:
    1. Scan the root directory for audio files
    2. Group the collected paths by file name similarity

    Cancellation is checked between the two steps; the grouping itself always
    runs to completion and a caller that cancelled simply discards the result.

    Usage:
        params = AnalysisParams(root_dir="~/Music", threshold=0.85)
        command = AnalysisCommand()
        groups, stats = command.execute(
            params,
            progress_callback=progress_printer,
            stopped_flag=cancellation_check
        )
    """

    def __init__(self):
        self._files: List[AudioFile] = []

    def execute(
            self,
            params: AnalysisParams,
            progress_callback: Optional[ProgressCallback] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[DuplicateGroup], AnalysisStats]:
        """
        Scan params.root_dir and find duplicate groups.

        Returns:
            Tuple of (duplicate_groups, statistics); empty groups if stopped

        Raises:
            RuntimeError: If the directory cannot be scanned or holds no audio files
        """
        stats = AnalysisStats()
        start = time.time()

        scanner = AudioScanner(
            root_dir=params.root_dir,
            extensions=params.extensions,
            excluded_dirs=params.excluded_dirs,
            min_size=params.min_size_bytes,
            read_bitrate=params.keep_strategy == KeepStrategy.LARGEST,
        )
        self._files = scanner.scan(stopped_flag=stopped_flag, progress_callback=progress_callback)
        stats.update_stage(Stage.SCAN.value, time.time() - start)
        stats.files_scanned = len(self._files)

        if stopped_flag and stopped_flag():
            stats.total_time = time.time() - start
            return [], stats

        if not self._files:
            raise RuntimeError("No audio files found matching filters")

        groups = self._group(
            [f.path for f in self._files], params.threshold, params.version_policy,
            stats, progress_callback
        )
        stats.total_time = time.time() - start
        return groups, stats

    def analyze_paths(
            self,
            paths: Sequence[str],
            threshold: float = DEFAULT_THRESHOLD,
            policy: VersionPolicy = VersionPolicy.REMOVE,
            progress_callback: Optional[ProgressCallback] = None,
            strategy: KeepStrategy = KeepStrategy.FIRST
    ) -> Tuple[List[DuplicateGroup], AnalysisStats]:
        """
        Group paths obtained elsewhere (a list file, stdin, a file picker).

        Paths that exist on disk get their size, and their bitrate when the
        LARGEST strategy will need it; the rest keep empty metadata.
        """
        stats = AnalysisStats()
        start = time.time()
        read_bitrate = strategy == KeepStrategy.LARGEST
        self._files = [self._describe(p, read_bitrate) for p in paths]
        stats.update_stage(Stage.SCAN.value, time.time() - start)
        stats.files_scanned = len(self._files)
        groups = self._group(list(paths), threshold, policy, stats, progress_callback)
        stats.total_time = time.time() - start
        return groups, stats

    @staticmethod
    def _describe(path: str, read_bitrate: bool) -> AudioFile:
        try:
            size = os.stat(path).st_size if os.path.isfile(path) else 0
        except OSError:
            size = 0
        if not size:
            return AudioFile(path=path)

        bitrate = MetadataService.read_bitrate(path) if read_bitrate else 0
        return AudioFile(path=path, size=size, bitrate=bitrate)

    @staticmethod
    def _group(
            paths: List[str],
            threshold: float,
            policy: VersionPolicy,
            stats: AnalysisStats,
            progress_callback: Optional[ProgressCallback]
    ) -> List[DuplicateGroup]:
        if progress_callback:
            progress_callback(Stage.COMPARE.value, 0, len(paths))

        start = time.time()
        grouper = NameGrouper(policy)
        groups = grouper.find_duplicate_groups(paths, threshold)
        stats.update_stage(Stage.COMPARE.value, time.time() - start)

        stats.files_compared = grouper.last_files_compared
        stats.distinct_keys = grouper.last_distinct_keys
        stats.comparisons = grouper.last_comparisons
        stats.groups_found = len(groups)

        if progress_callback:
            progress_callback(Stage.COMPARE.value, len(paths), len(paths))
        logger.debug(f"Found {len(groups)} duplicate groups among {len(paths)} files")
        return groups

    def get_files(self) -> List[AudioFile]:
        """Get scanned files after execution."""
        return self._files.copy()

    def files_by_path(self) -> Dict[str, AudioFile]:
        return {f.path: f for f in self._files}
