"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/normalizer.py
Turns an audio file path into the key its name is compared by.
"""

import re
from functools import lru_cache

from audiodedupe.core.models import VersionPolicy

VERSION_MARKERS = (
    "remix", "live", "acoustic", "instrumental", "radio edit",
    "reprise", "bonus", "demo", "alternate version", "unplugged",
    "rehearsal", "soundcheck", "extended", "club mix", "original mix",
    "edit", "version", "dub",
)

# Pre-compiled regex patterns (performance optimization)
_PATTERN_TOOL_SUFFIX = re.compile(r'_pn$')
_PATTERN_COPY_MARKER = re.compile(
    r'(?:[\s_\-]+[(\[]?|[\s_\-]*[(\[])\s*(?:copy|kopya)(?:[\s_\-]*\d+)?\s*[)\]]?'
    r'\s*(?:[(\[]\s*\d+\s*[)\]])?\s*$'
)
_PATTERN_CAMELOT = re.compile(r'^\d{1,2}[ab]$', re.IGNORECASE)
_PATTERN_BPM = re.compile(r'^\d{2,3}$')
_PATTERN_BRACKETED = re.compile(r'[\[(](.*?)[\])]')
_PATTERN_MARKER_WORDS = [
    re.compile(rf'\b{re.escape(marker)}\b', re.IGNORECASE) for marker in VERSION_MARKERS
]
_PATTERN_PUNCTUATION = re.compile(r'[^\w\s\d]')
_PATTERN_WHITESPACE = re.compile(r'\s+')
_PATTERN_DASH_NUMBER = re.compile(r'-\s*\d{1,3}\s*$')
_PATTERN_TRAILING_NUMBER = re.compile(r'\s+\d{1,3}$')

DJ_FIELD_SEPARATOR = " - "


def file_name(path: str) -> str:
    """Last segment of a '/' separated path; a path without '/' is the name itself."""
    return path.rsplit('/', 1)[-1]


def has_extension(path: str) -> bool:
    """True when the file name has a non-empty stem and a non-empty extension."""
    name = file_name(path)
    dot = name.rfind(".")
    return 0 < dot < len(name) - 1


def _strip_extension(name: str) -> str:
    dot = name.rfind(".")
    return name if dot < 0 else name[:dot]


def _strip_copy_markers(name: str) -> str:
    # "track copy (2)" and "track - copy - copy" both need more than one pass
    while True:
        stripped = _PATTERN_COPY_MARKER.sub('', name).strip()
        if stripped == name:
            return name
        name = stripped


def _artist_and_title(name: str) -> str:
    """
    Drop the '[Camelot key] - [BPM]' prefix DJ software writes in front of
    '[Artist] - [Title]'.
    """
    parts = name.split(DJ_FIELD_SEPARATOR)
    if len(parts) < 3:
        return name

    is_camelot = bool(_PATTERN_CAMELOT.match(parts[0].strip()))
    is_bpm = bool(_PATTERN_BPM.match(parts[1].strip()))

    if is_camelot and is_bpm and len(parts) >= 4:
        return " ".join(parts[2:])
    if is_camelot:
        return " ".join(parts[1:])
    return " ".join(parts)


def _drop_version_brackets(text: str) -> str:
    def replace(match: "re.Match") -> str:
        content = match.group(1).lower().strip()
        if any(marker in content for marker in VERSION_MARKERS):
            return ""
        return match.group(0)

    return _PATTERN_BRACKETED.sub(replace, text).strip()


def _drop_version_words(text: str) -> str:
    for pattern in _PATTERN_MARKER_WORDS:
        text = pattern.sub('', text)
    return text


@lru_cache(maxsize=65536)
def normalize(path: str, policy: VersionPolicy = VersionPolicy.REMOVE) -> str:
    """
    Normalize an audio file path into a comparison key.

    Normalization rules:
    - Keep only the file name, lowercase it, drop the extension
    - Drop a trailing '_pn' tool marker and trailing copy markers ('copy', 'kopya')
    - Drop a leading Camelot key and BPM ('8A - 124 - Artist - Title')
    - Drop version markers (remix, live, radio edit, ...) unless policy is PRESERVE
    - Replace punctuation with spaces, collapse whitespace
    - Drop a trailing 1-3 digit track number

    Args:
        path: '/'-separated file path (any string is accepted)
        policy: whether version markers are removed or kept

    Returns:
        str: normalized key, possibly empty when the name was only noise

    Examples:
        "music/Track (1).mp3" -> "track"
        "8A - 124 - Daft Punk - One More Time (Radio Edit).mp3" -> "daft punk one more time"
        "Song - 03.flac" -> "song"
    """
    if not path:
        return ""

    name = file_name(path).lower()
    name = _strip_extension(name)
    name = _PATTERN_TOOL_SUFFIX.sub('', name).strip()
    name = _strip_copy_markers(name)

    key = _artist_and_title(name)

    if policy == VersionPolicy.REMOVE:
        key = _drop_version_brackets(key)
        key = _drop_version_words(key)

    key = _PATTERN_PUNCTUATION.sub(' ', key)
    key = _PATTERN_WHITESPACE.sub(' ', key).strip()

    key = _PATTERN_DASH_NUMBER.sub('', key).strip()
    key = _PATTERN_TRAILING_NUMBER.sub('', key).strip()

    return key
