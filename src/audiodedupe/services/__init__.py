"""File operations, audio metadata and duplicate review services."""

from .file_service import FileService
from .duplicate_service import DuplicateService
from .metadata_service import MetadataService

__all__ = ["FileService", "DuplicateService", "MetadataService"]
