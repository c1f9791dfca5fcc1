"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Review state around duplicate groups: ids, per-file selection, pruning after deletion.
"""
from typing import Dict, Iterable, List, Optional

import xxhash

from audiodedupe.core.models import AudioFile, DuplicateGroup, KeepStrategy, ReviewGroup
from audiodedupe.core.selector import Selector


class DuplicateService:
    @staticmethod
    def group_id(group: DuplicateGroup) -> str:
        """
        Stable identifier of a group: the same set of files always gets the same id,
        across runs and regardless of output order.
        """
        digest = xxhash.xxh64("\0".join(group.files).encode("utf-8")).hexdigest()
        return f"group-{digest}"

    @staticmethod
    def to_review_groups(
            groups: List[DuplicateGroup],
            files_by_path: Optional[Dict[str, AudioFile]] = None,
            strategy: KeepStrategy = KeepStrategy.FIRST
    ) -> List[ReviewGroup]:
        """
        Wraps duplicate groups for review.
        Every file except the one the strategy keeps starts out selected for deletion.
        """
        review_groups = []
        for group in groups:
            keeper = Selector.choose_keeper(group, files_by_path, strategy)
            review_groups.append(ReviewGroup(
                id=DuplicateService.group_id(group),
                files=list(group.files),
                reason=group.reason,
                similarity_score=group.similarity_score,
                selection={path for path in group.files if path != keeper},
            ))
        return review_groups

    @staticmethod
    def toggle_selection(group: ReviewGroup, file_path: str) -> None:
        """Selects or deselects one file of the group. Unknown paths are ignored."""
        if file_path not in group.files:
            return
        if file_path in group.selection:
            group.selection.discard(file_path)
        else:
            group.selection.add(file_path)

    @staticmethod
    def total_selected(groups: List[ReviewGroup]) -> int:
        return sum(len(group.selection) for group in groups)

    @staticmethod
    def files_to_delete(groups: List[ReviewGroup]) -> List[str]:
        """
        Selected paths across groups, each once, in group order then file order.
        """
        seen = set()
        result = []
        for group in groups:
            for path in group.files:
                if path in group.selection and path not in seen:
                    seen.add(path)
                    result.append(path)
        return result

    @staticmethod
    def remove_deleted(groups: List[ReviewGroup], deleted_paths: Iterable[str]) -> List[ReviewGroup]:
        """
        Removes deleted files from all groups and their selections.
        Groups that contain fewer than 2 files afterwards are discarded.
        """
        deleted = set(deleted_paths)
        updated_groups = []
        for group in groups:
            remaining = [path for path in group.files if path not in deleted]
            if len(remaining) < 2:
                continue
            updated_groups.append(ReviewGroup(
                id=group.id,
                files=remaining,
                reason=group.reason,
                similarity_score=group.similarity_score,
                selection={path for path in group.selection if path not in deleted},
            ))
        return updated_groups
