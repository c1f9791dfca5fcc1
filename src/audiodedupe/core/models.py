"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for filename-based duplicate detection of audio files.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Callable
import os
from enum import Enum

from audiodedupe.utils.convert_utils import ConvertUtils


AUDIO_EXTENSIONS = (".mp3", ".wav", ".flac", ".m4a", ".ogg", ".aac", ".aiff")


# =============================
# Enums
# =============================

class VersionPolicy(Enum):
    """
    How version markers (remix, live, radio edit, ...) are treated by the normalizer.
    """
    REMOVE = "remove"
    PRESERVE = "preserve"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            VersionPolicy.REMOVE: "Group versions together",
            VersionPolicy.PRESERVE: "Keep versions apart",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class KeepStrategy(Enum):
    """Which file of a duplicate group is kept when the rest are deleted."""
    FIRST = "first"
    LARGEST = "largest"
    SHORTEST_PATH = "shortest-path"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            KeepStrategy.FIRST: "First (alphabetical)",
            KeepStrategy.LARGEST: "Largest file",
            KeepStrategy.SHORTEST_PATH: "Shortest Path",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    SCAN = "scanning"
    COMPARE = "comparing"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class DuplicateGroup:
    """
    Two or more file paths judged to name the same track.

    files are sorted lexicographically; similarity_score is the similarity of
    the first two files' normalized names, a sample of the group's cohesion.
    """
    files: Tuple[str, ...]
    reason: str
    similarity_score: float

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    def to_dict(self) -> Dict[str, object]:
        """Plain representation used by the JSON output."""
        return {
            "files": list(self.files),
            "reason": self.reason,
            "similarityScore": self.similarity_score,
        }

    def __repr__(self):
        return f"<DuplicateGroup count={len(self.files)}, score={self.similarity_score:.3f}>"


@dataclass(frozen=True)
class AudioFile:
    """
    Metadata about one audio file on disk.
    Only the keep strategy looks at it; the duplicate finder works on bare paths.
    """
    path: str
    size: int = 0  # in bytes
    bitrate: int = 0  # kbps, 0 when unknown

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def folder(self) -> str:
        return os.path.dirname(self.path) or "/"

    def __repr__(self):
        return f"<AudioFile path={self.path}, size={self.size}>"


class AnalysisStats:
    """
    Statistics collected during one analysis run.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_scanned: int = 0
        self.files_compared: int = 0
        self.distinct_keys: int = 0
        self.comparisons: int = 0
        self.groups_found: int = 0
        self.stage_times: Dict[str, float] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when a stage finishes."""
        self._listeners.append(listener)

    def update_stage(self, stage_name: str, duration: float) -> None:
        self.stage_times[stage_name] = self.stage_times.get(stage_name, 0.0) + duration
        for listener in self._listeners:
            listener(stage_name, {"time": self.stage_times[stage_name]})

    def print_summary(self) -> str:
        lines = [
            "Analysis Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Files scanned: {self.files_scanned}",
            f"Files compared: {self.files_compared}",
            f"Distinct names: {self.distinct_keys}",
            f"Name comparisons: {self.comparisons}",
            f"Duplicate groups: {self.groups_found}",
        ]
        for stage, seconds in self.stage_times.items():
            lines.append(f"{stage.title()}: {seconds:.3f}s")
        return "\n".join(lines)


@dataclass
class ReviewGroup:
    """
    A duplicate group as shown to the user: stable id plus a mutable set of
    files selected for deletion. Owned by the caller, never by the finder.
    """
    id: str
    files: List[str]
    reason: str
    similarity_score: float
    selection: set = field(default_factory=set)

    def __repr__(self):
        return f"<ReviewGroup id={self.id}, count={len(self.files)}, selected={len(self.selection)}>"


@dataclass
class DeletionReport:
    """Outcome of a batch deletion."""
    deleted: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


"""
DTO for analysis parameters with built-in validation.
Interface-agnostic — used by both GUI and CLI.
"""

MIN_THRESHOLD = 0.5
MAX_THRESHOLD = 1.0
DEFAULT_THRESHOLD = 0.85


@dataclass
class AnalysisParams:
    """Parameters for one analysis run with validation."""
    root_dir: str
    threshold: float = DEFAULT_THRESHOLD
    extensions: List[str] = field(default_factory=lambda: list(AUDIO_EXTENSIONS))
    excluded_dirs: List[str] = field(default_factory=list)
    min_size_bytes: int = 0
    version_policy: VersionPolicy = VersionPolicy.REMOVE
    keep_strategy: KeepStrategy = KeepStrategy.FIRST

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if not MIN_THRESHOLD <= self.threshold <= MAX_THRESHOLD:
            raise ValueError(
                f"Similarity threshold must be between {MIN_THRESHOLD} and {MAX_THRESHOLD}"
            )

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized

    @staticmethod
    def from_human_readable(
            root_dir: str,
            threshold: float = DEFAULT_THRESHOLD,
            min_size_str: str = "0",
            extensions_str: str = "",
            excluded_dirs: Optional[List[str]] = None,
            version_policy: VersionPolicy = VersionPolicy.REMOVE,
            keep_strategy: KeepStrategy = KeepStrategy.FIRST,
    ) -> 'AnalysisParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing or GUI input conversion.
        """
        min_size = ConvertUtils.human_to_bytes(min_size_str)

        ext_list = [
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ] if extensions_str else list(AUDIO_EXTENSIONS)

        return AnalysisParams(
            root_dir=root_dir,
            threshold=threshold,
            extensions=ext_list,
            excluded_dirs=excluded_dirs or [],
            min_size_bytes=min_size,
            version_policy=version_policy,
            keep_strategy=keep_strategy,
        )
