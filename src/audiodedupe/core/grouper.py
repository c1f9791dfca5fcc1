"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups audio file paths whose normalized names are equal or similar enough.

Two phases:
  1. Exact bucketing: paths sharing a normalized key land in one bucket.
  2. Approximate merge: distinct keys are compared pairwise and buckets whose
     keys score at or above the threshold are joined (union-find), so the work
     grows with the number of distinct names rather than the number of files.
"""

import logging
import time
from collections import defaultdict
from typing import List, Dict, Any, Callable, Sequence

from audiodedupe.core.models import DuplicateGroup, VersionPolicy, DEFAULT_THRESHOLD
from audiodedupe.core.normalizer import normalize, has_extension
from audiodedupe.core.similarity import similarity, max_possible_similarity

logger = logging.getLogger(__name__)

REASON_TEMPLATE = 'Files named like "{key}"'


class _DisjointSet:
    """Union-find over bucket indices."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, i: int) -> int:
        parent = self.parent
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    def union(self, a: int, b: int) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        if self.rank[root_a] < self.rank[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        if self.rank[root_a] == self.rank[root_b]:
            self.rank[root_a] += 1


class NameGrouper:
    """
    Finds duplicate groups among file paths by comparing normalized file names.
    Holds no state between calls except counters of the last run.
    """

    def __init__(self, policy: VersionPolicy = VersionPolicy.REMOVE):
        self.policy = policy
        self.last_distinct_keys = 0
        self.last_comparisons = 0
        self.last_files_compared = 0

    def key_for(self, path: str) -> str:
        """Normalized key of a path, or '' when the path cannot take part in grouping."""
        if not has_extension(path):
            return ""
        return normalize(path, self.policy)

    def group_by_key(self, paths: Sequence[str]) -> Dict[str, List[str]]:
        """Buckets paths by exact normalized key. Paths with an empty key are left out."""
        return self._group_by(paths, self.key_for)

    def find_duplicate_groups(
            self,
            paths: Sequence[str],
            threshold: float = DEFAULT_THRESHOLD
    ) -> List[DuplicateGroup]:
        """
        Partition paths into duplicate groups.

        Args:
            paths: file paths, '/'-separated; duplicates and unreadable names allowed
            threshold: minimum similarity (inclusive) for two names to be grouped

        Returns:
            List[DuplicateGroup] with 2+ files each, best-scoring groups first
        """
        self.last_comparisons = 0
        self.last_distinct_keys = 0
        self.last_files_compared = 0
        if len(paths) < 2:
            return []

        start = time.perf_counter()
        buckets = self.group_by_key(paths)
        keys = list(buckets)
        self.last_distinct_keys = len(keys)
        self.last_files_compared = sum(len(files) for files in buckets.values())

        clusters = self._merge_similar_keys(keys, threshold)

        groups = []
        for members in clusters:
            files = [path for index in members for path in buckets[keys[index]]]
            if len(files) < 2:
                continue
            groups.append(self._build_group(files))

        groups.sort(key=lambda g: (-g.similarity_score, g.files[0]))

        logger.debug(
            f"Grouped {len(paths)} paths: {len(keys)} distinct names, "
            f"{self.last_comparisons} comparisons, {len(groups)} groups "
            f"in {time.perf_counter() - start:.3f}s"
        )
        return groups

    def _merge_similar_keys(self, keys: List[str], threshold: float) -> List[List[int]]:
        """
        Join keys whose similarity reaches the threshold.
        Returns clusters as lists of key indices, each list ascending.
        """
        sets = _DisjointSet(len(keys))

        # Ascending length: once the length ratio drops below the threshold,
        # every longer key is out of reach too.
        order = sorted(range(len(keys)), key=lambda i: len(keys[i]))
        for pos, i in enumerate(order):
            key_i = keys[i]
            for j in order[pos + 1:]:
                key_j = keys[j]
                if max_possible_similarity(len(key_i), len(key_j)) < threshold:
                    break
                if sets.find(i) == sets.find(j):
                    continue
                self.last_comparisons += 1
                if similarity(key_i, key_j) >= threshold:
                    sets.union(i, j)

        clusters: Dict[int, List[int]] = defaultdict(list)
        for index in range(len(keys)):
            clusters[sets.find(index)].append(index)
        return list(clusters.values())

    def _build_group(self, files: List[str]) -> DuplicateGroup:
        files = sorted(files)
        representative_key = self.key_for(files[0])
        score = similarity(representative_key, self.key_for(files[1]))
        return DuplicateGroup(
            files=tuple(files),
            reason=REASON_TEMPLATE.format(key=representative_key),
            similarity_score=score,
        )

    @staticmethod
    def _group_by(paths: Sequence[str], key_func: Callable[[str], Any]) -> Dict[Any, List[str]]:
        """
        Helper method to group paths by any computed key.
        Falsy keys are dropped; single-path buckets are kept.
        """
        groups = defaultdict(list)
        for path in paths:
            key = key_func(path)
            if key:
                groups[key].append(path)
        return dict(groups)


def find_duplicate_groups(
        paths: Sequence[str],
        threshold: float = DEFAULT_THRESHOLD,
        policy: VersionPolicy = VersionPolicy.REMOVE
) -> List[DuplicateGroup]:
    """Group paths naming the same track. See NameGrouper.find_duplicate_groups."""
    return NameGrouper(policy).find_duplicate_groups(paths, threshold)
