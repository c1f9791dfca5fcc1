"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/metadata_service.py
Reads the audio quality indicator used when choosing which duplicate to keep.
"""
import logging

from mutagen import File as MutagenFile, MutagenError

logger = logging.getLogger(__name__)


class MetadataService:
    @staticmethod
    def read_bitrate(file_path: str) -> int:
        """
        Bitrate in kbps read from the audio stream info, 0 when unknown.
        Unreadable or unsupported files are not an error here.
        """
        try:
            audio = MutagenFile(file_path)
        except (MutagenError, OSError) as e:
            logger.debug(f"Could not read audio info of {file_path}: {e}")
            return 0

        if audio is None or audio.info is None:
            return 0
        bitrate = getattr(audio.info, "bitrate", None)
        return int(bitrate) // 1000 if bitrate else 0
