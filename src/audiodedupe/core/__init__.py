"""
Core duplicate-detection engine — normalizer, similarity metric and grouper.

This package contains the pure, filesystem-free heart of audiodedupe:
- normalize: file path -> comparison key (extension, DJ tags, copy/version markers stripped)
- similarity: Levenshtein-based score in [0, 1]
- NameGrouper / find_duplicate_groups: exact bucketing, then similarity merge
- AudioScanner: recursive directory walk collecting audio files
- Models: DuplicateGroup, AudioFile, AnalysisParams and policy enums

Nothing here deletes files or keeps state between calls.
"""

from .normalizer import normalize, VERSION_MARKERS
from .similarity import similarity
from .grouper import NameGrouper, find_duplicate_groups
from .selector import Selector
from .scanner import AudioScanner
from .models import (
    DuplicateGroup, AudioFile, AnalysisParams, AnalysisStats, ReviewGroup,
    DeletionReport, VersionPolicy, KeepStrategy, AUDIO_EXTENSIONS)

__all__ = [
    "normalize",
    "VERSION_MARKERS",
    "similarity",
    "NameGrouper",
    "find_duplicate_groups",
    "AudioScanner",
    "Selector",
    "DuplicateGroup",
    "AudioFile",
    "AnalysisParams",
    "AnalysisStats",
    "ReviewGroup",
    "DeletionReport",
    "VersionPolicy",
    "KeepStrategy",
    "AUDIO_EXTENSIONS",
]
