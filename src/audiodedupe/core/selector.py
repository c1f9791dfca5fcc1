"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/selector.py
Chooses the file to keep inside a duplicate group.
Works on the group's paths plus optional AudioFile metadata; never touches the disk.
"""
from typing import Dict, List, Optional

from audiodedupe.core.models import AudioFile, DuplicateGroup, KeepStrategy


class Selector:
    """
    Ordering of files inside a duplicate group, best candidate to keep first.
    Ties always fall back to lexicographic path order, so the result is stable.
      FIRST         : lexicographic path order
      LARGEST       : bigger file, then higher bitrate
      SHORTEST_PATH : fewer path segments, then shorter path
    """

    @staticmethod
    def rank_files(
            group: DuplicateGroup,
            files_by_path: Optional[Dict[str, AudioFile]] = None,
            strategy: KeepStrategy = KeepStrategy.FIRST
    ) -> List[str]:
        files_by_path = files_by_path or {}

        def meta(path: str) -> AudioFile:
            return files_by_path.get(path) or AudioFile(path=path)

        if strategy == KeepStrategy.LARGEST:
            key_func = lambda p: (-meta(p).size, -meta(p).bitrate, p)
        elif strategy == KeepStrategy.SHORTEST_PATH:
            key_func = lambda p: (p.count("/"), len(p), p)
        else:
            key_func = lambda p: p
        return sorted(group.files, key=key_func)

    @staticmethod
    def choose_keeper(
            group: DuplicateGroup,
            files_by_path: Optional[Dict[str, AudioFile]] = None,
            strategy: KeepStrategy = KeepStrategy.FIRST
    ) -> str:
        """Path of the file that survives when the rest of the group is deleted."""
        return Selector.rank_files(group, files_by_path, strategy)[0]
