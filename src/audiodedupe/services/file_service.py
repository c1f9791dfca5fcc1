"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Safe deletion of audio files: everything goes to the system trash, nothing is erased.
"""
import logging
from pathlib import Path
from typing import Iterable

from send2trash import send2trash

from audiodedupe.core.models import DeletionReport

logger = logging.getLogger(__name__)


class FileService:
    """
    Deletion collaborator. The duplicate finder never calls it;
    only the CLI / GUI do, for files the user selected.
    """

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Moved to trash: {path}")

    @classmethod
    def move_multiple_to_trash(cls, file_paths: Iterable[str]) -> DeletionReport:
        """
        Moves several files to trash, continuing past individual failures.
        Returns which paths were deleted and which failed (with the error message).
        """
        report = DeletionReport()
        for path in file_paths:
            try:
                cls.move_to_trash(path)
                report.deleted.append(path)
            except (OSError, RuntimeError) as e:
                logger.warning(f"Failed to delete {path}: {e}")
                report.failed.append((path, str(e)))
        return report

    @staticmethod
    def summarize_failures(report: DeletionReport, limit: int = 5) -> str:
        """Short multi-line description of failed deletions."""
        lines = [
            f"  • {Path(p).name}: {msg.split(':')[-1].strip()}"
            for p, msg in report.failed[:limit]
        ]
        if len(report.failed) > limit:
            lines.append(f"  • ...and {len(report.failed) - limit} more files")
        return "\n".join(lines)
