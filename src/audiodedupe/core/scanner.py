"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Collects audio files below a directory.
Features:
- Recursively scans directories with os.walk
- Skips system trash, excluded directories, symlinks and empty files
- Applies extension and minimum size filters
- Keeps going when a directory cannot be read
"""

import os
import sys
from typing import List, Optional, Callable
from pathlib import Path
import time
import logging

from audiodedupe.core.models import AudioFile, AUDIO_EXTENSIONS
from audiodedupe.services.metadata_service import MetadataService

logger = logging.getLogger(__name__)


class AudioScanner:
    """
    Scans directories recursively for audio files.

    Attributes:
        root_dir: Root directory to scan
        extensions: Allowed file extensions (e.g., [".mp3", ".flac"])
        excluded_dirs: Directories that are never entered
        min_size: Minimum file size in bytes
        read_bitrate: Read the bitrate of every accepted file (slower)
    """

    PROGRESS_INTERVAL = 500

    def __init__(
        self,
        root_dir: str,
        extensions: Optional[List[str]] = None,
        excluded_dirs: Optional[List[str]] = None,
        min_size: int = 0,
        read_bitrate: bool = False
    ):
        self.root_dir = root_dir
        self.extensions = [ext.lower() for ext in (extensions or AUDIO_EXTENSIONS)]
        self.excluded_dirs = [str(Path(d).resolve()) for d in excluded_dirs] if excluded_dirs else []
        self.min_size = min_size
        self.read_bitrate = read_bitrate
        self.unreadable_dirs: List[str] = []

    def scan(self,
             stopped_flag: Optional[Callable[[], bool]] = None,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[AudioFile]:
        """
        Walk the tree once and return the audio files that pass all filters.
        Paths in the result use '/' separators.
        """
        root_path = Path(self.root_dir)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        if stopped_flag and stopped_flag():
            logger.debug("Scan cancelled before start")
            return []

        found_files: List[AudioFile] = []
        self.unreadable_dirs = []
        start_time = time.time()

        for root, dirs, files in os.walk(str(root_path), onerror=self._on_walk_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                return []

            dirs[:] = [d for d in dirs if self._prefilter_dirs(Path(root) / d)]

            for filename in files:
                audio_file = self._process_file(Path(root) / filename)
                if audio_file is None:
                    continue
                found_files.append(audio_file)
                if progress_callback and len(found_files) % self.PROGRESS_INTERVAL == 0:
                    progress_callback("scanning", len(found_files), None)

        if progress_callback:
            progress_callback("scanning", len(found_files), None)

        logger.debug(f"Scan completed in {time.time() - start_time:.2f}s, "
                     f"found {len(found_files)} audio files")
        return found_files

    def _on_walk_error(self, error: OSError) -> None:
        """Unreadable directories are reported and skipped."""
        path = getattr(error, "filename", None) or str(error)
        self.unreadable_dirs.append(str(path))
        logger.warning(f"Permission denied for directory: {path}. Some files may not be included.")

    @staticmethod
    def _is_system_trash(path: Path) -> bool:
        """
        Check if path belongs to OS trash/recycle bin (cross-platform).
        Returns False on any error.
        """
        try:
            path_str = str(path.resolve(strict=False))

            if sys.platform == "win32":
                return "$Recycle.Bin" in path_str or "\\Recycler\\" in path_str
            if sys.platform == "darwin":
                return "/.Trash/" in path_str or path_str.endswith("/.Trash")
            return ".local/share/Trash" in path_str or "/.trash/" in path_str
        except (OSError, ValueError):
            return False

    def _is_excluded_directory(self, path: Path) -> bool:
        try:
            path_str = str(path.resolve(strict=False))
        except (OSError, ValueError):
            return False
        for excluded_dir in self.excluded_dirs:
            if path_str == excluded_dir or path_str.startswith(excluded_dir + os.sep):
                return True
        return False

    def _prefilter_dirs(self, path: Path) -> bool:
        """Decide whether os.walk may enter a subdirectory."""
        if self._is_system_trash(path):
            logger.debug(f"Skipping system trash directory: {path}")
            return False

        if self.excluded_dirs and self._is_excluded_directory(path):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        try:
            return not path.is_symlink() and path.is_dir()
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False

    def _process_file(self, path: Path) -> Optional[AudioFile]:
        """
        Return an AudioFile for path if it passes all filters, else None.
        """
        if path.suffix.lower() not in self.extensions:
            return None

        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return None
            size = path.stat().st_size
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return None

        if size == 0:
            logger.debug(f"Skipping zero-byte file: {path}")
            return None

        if size < self.min_size:
            logger.debug(f"Skipping {path} (size {size} bytes below minimum)")
            return None

        bitrate = MetadataService.read_bitrate(str(path)) if self.read_bitrate else 0
        return AudioFile(path=path.as_posix(), size=size, bitrate=bitrate)
