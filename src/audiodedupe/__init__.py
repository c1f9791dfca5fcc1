"""
Audio Dedupe — find duplicate audio files in a music library by their names.

Core features:
- Filename normalization aware of DJ tags (Camelot key, BPM), copy markers and version markers
- Levenshtein similarity with a configurable threshold (0.5-1.0)
- Exact-name bucketing before fuzzy comparison, so large libraries stay fast
- Safe deletion to system trash (via send2trash)
- CLI interface, plus a Qt worker for GUIs (install with [gui] extra)
"""

try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("audiodedupe")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from audiodedupe.core import (
    normalize, similarity, find_duplicate_groups, NameGrouper,
    DuplicateGroup, AudioFile, AnalysisParams, VersionPolicy, KeepStrategy)
from audiodedupe.commands import AnalysisCommand
from audiodedupe.services import DuplicateService, FileService

__all__ = [
    "normalize",
    "similarity",
    "find_duplicate_groups",
    "NameGrouper",
    "DuplicateGroup",
    "AudioFile",
    "AnalysisParams",
    "VersionPolicy",
    "KeepStrategy",
    "AnalysisCommand",
    "DuplicateService",
    "FileService",
    "__version__",
]
