"""
Shared fixtures for audiodedupe tests.
Creates isolated music libraries with controlled file names.
"""
import pytest
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so the package is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def music_library(tmp_path) -> Dict[str, Path]:
    """
    Creates a small library:
    - "Song.mp3" and "Song (1).mp3" in Artist/ (name duplicates)
    - "Song copy.mp3" in Backup/ (copy marker)
    - "Other Tune.flac" (unique)
    - "notes.txt" (not audio, ignored)
    - "empty.mp3" (0 bytes, ignored)
    """
    files = {}

    artist = tmp_path / "Artist"
    artist.mkdir()
    backup = tmp_path / "Backup"
    backup.mkdir()

    files["song"] = artist / "Song.mp3"
    files["song"].write_bytes(b"A" * 4096)
    files["song_1"] = artist / "Song (1).mp3"
    files["song_1"].write_bytes(b"A" * 2048)
    files["song_copy"] = backup / "Song copy.mp3"
    files["song_copy"].write_bytes(b"A" * 1024)

    files["unique"] = tmp_path / "Other Tune.flac"
    files["unique"].write_bytes(b"B" * 3000)

    files["text"] = tmp_path / "notes.txt"
    files["text"].write_text("not audio")

    files["empty"] = tmp_path / "empty.mp3"
    files["empty"].write_bytes(b"")

    return files


@pytest.fixture
def dj_paths():
    """File names as exported by DJ software, with Camelot key and BPM."""
    return [
        "crates/house/8A - 124 - Daft Punk - One More Time.mp3",
        "crates/radio/8A - 124 - Daft Punk - One More Time (Radio Edit).mp3",
        "crates/house/5B - 128 - Stardust - Music Sounds Better With You.mp3",
    ]
