"""
Unit tests for core/grouper.py
Covers bucketing, similarity merge, threshold behaviour and degenerate input.
"""
import logging

import pytest

from audiodedupe.core.grouper import NameGrouper, find_duplicate_groups, REASON_TEMPLATE
from audiodedupe.core.models import DuplicateGroup, VersionPolicy


def _file_sets(groups):
    return [set(group.files) for group in groups]


class TestBasicGrouping:
    """Exact-key groups and the shape of the returned records."""

    def test_same_name_in_different_folders(self):
        paths = ["a/song.mp3", "b/song.mp3", "c/unrelated.mp3"]
        groups = find_duplicate_groups(paths, 0.85)

        assert len(groups) == 1
        assert groups[0].files == ("a/song.mp3", "b/song.mp3")
        assert groups[0].similarity_score == 1.0
        assert groups[0].reason == 'Files named like "song"'

    def test_copy_markers_grouped(self):
        paths = ["music/track.mp3", "music/track (1).mp3", "music/track copy.mp3"]
        groups = find_duplicate_groups(paths, 0.85)

        assert len(groups) == 1
        assert set(groups[0].files) == set(paths)

    def test_dj_tagged_radio_edit_grouped(self, dj_paths):
        groups = find_duplicate_groups(dj_paths, 0.85)

        assert len(groups) == 1
        assert set(groups[0].files) == set(dj_paths[:2])

    def test_files_sorted_lexicographically(self):
        paths = ["z/Song.mp3", "a/Song (1).mp3", "m/Song.flac"]
        group = find_duplicate_groups(paths)[0]
        assert list(group.files) == sorted(paths)

    def test_returns_frozen_records(self):
        group = find_duplicate_groups(["a/x song.mp3", "b/x song.mp3"])[0]
        assert isinstance(group, DuplicateGroup)
        with pytest.raises(Exception):
            group.reason = "changed"

    def test_no_duplicates(self):
        paths = ["Alpha.mp3", "Bravo.mp3", "Charlie.mp3"]
        assert find_duplicate_groups(paths) == []

    def test_separate_groups_stay_separate(self):
        paths = ["a/Yellow.mp3", "b/Yellow (1).mp3", "a/Paranoid Android.mp3", "b/Paranoid Android.mp3"]
        groups = find_duplicate_groups(paths)

        assert len(groups) == 2
        assert {"a/Yellow.mp3", "b/Yellow (1).mp3"} in _file_sets(groups)
        assert {"a/Paranoid Android.mp3", "b/Paranoid Android.mp3"} in _file_sets(groups)


class TestSimilarityMerge:
    """Approximate matching between distinct keys."""

    def test_typo_grouped_above_threshold(self):
        paths = ["Artist - Beautiful Song.mp3", "Artist - Beautifull Song.mp3"]
        groups = find_duplicate_groups(paths, 0.85)

        assert len(groups) == 1
        assert groups[0].similarity_score == pytest.approx(21 / 22)

    def test_threshold_is_inclusive(self):
        # similarity("abcdefghij", "abcdefghix") == 0.9 exactly
        paths = ["abcdefghij.mp3", "abcdefghix.mp3"]
        assert len(find_duplicate_groups(paths, 0.9)) == 1
        assert find_duplicate_groups(paths, 0.91) == []

    def test_transitive_chain_forms_one_group(self):
        # a~b and b~c at 0.9, a~c only at 0.8
        paths = ["abcdefghij.mp3", "abcdefghiz.mp3", "abcdefghyz.mp3"]
        groups = find_duplicate_groups(paths, 0.9)

        assert len(groups) == 1
        assert set(groups[0].files) == set(paths)
        assert groups[0].similarity_score == pytest.approx(0.9)

    def test_chain_result_independent_of_input_order(self):
        paths = ["abcdefghyz.mp3", "abcdefghij.mp3", "abcdefghiz.mp3"]
        forward = find_duplicate_groups(paths, 0.9)
        backward = find_duplicate_groups(list(reversed(paths)), 0.9)
        assert forward == backward

    def test_threshold_one_requires_exact_keys(self):
        paths = ["Song.mp3", "Song (1).mp3", "Songs.mp3"]
        groups = find_duplicate_groups(paths, 1.0)

        assert len(groups) == 1
        assert set(groups[0].files) == {"Song.mp3", "Song (1).mp3"}

    def test_groups_sorted_by_score_descending(self):
        paths = [
            "Artist - Beautiful Song.mp3", "Artist - Beautifull Song.mp3",
            "a/Exact Match.mp3", "b/Exact Match.mp3",
        ]
        groups = find_duplicate_groups(paths, 0.85)
        scores = [group.similarity_score for group in groups]
        assert scores == sorted(scores, reverse=True)
        assert scores[0] == 1.0

    def test_reason_uses_representative_key(self):
        groups = find_duplicate_groups(["Song (1).mp3", "Song.mp3"])
        assert groups[0].reason == REASON_TEMPLATE.format(key="song")


class TestMonotonicity:
    """Lowering the threshold only ever merges groups."""

    PATHS = [
        "abcdefghij.mp3", "abcdefghiz.mp3", "abcdefghyz.mp3", "abcdefgxyz.mp3",
        "Artist - Beautiful Song.mp3", "Artist - Beautifull Song.mp3",
        "Artist - Beautiful Songs.mp3", "Other Tune.mp3", "Other Tunes.mp3",
        "Mother Tune.mp3", "song.mp3", "song (1).mp3",
    ]

    def test_groups_contained_at_lower_threshold(self):
        thresholds = [1.0, 0.95, 0.9, 0.85, 0.8, 0.7, 0.6, 0.5]
        for high, low in zip(thresholds, thresholds[1:]):
            strict = _file_sets(find_duplicate_groups(self.PATHS, high))
            relaxed = _file_sets(find_duplicate_groups(self.PATHS, low))
            for group in strict:
                assert any(group <= bigger for bigger in relaxed), (high, low, group)


class TestExclusions:
    """Paths that can never take part in any group."""

    def test_empty_list(self):
        assert find_duplicate_groups([]) == []

    def test_single_path(self):
        assert find_duplicate_groups(["a/song.mp3"]) == []

    def test_files_without_extension_excluded(self):
        paths = ["a/song", "b/song", "c/song.mp3"]
        assert find_duplicate_groups(paths, 0.5) == []

    def test_empty_keys_excluded(self):
        paths = ["a/(Remix).mp3", "b/(Remix).mp3", "c/---.mp3", "d/.mp3", "e/"]
        for threshold in (0.5, 0.85, 1.0):
            assert find_duplicate_groups(paths, threshold) == []

    def test_excluded_paths_not_mixed_into_groups(self):
        paths = ["a/song.mp3", "b/song.mp3", "c/song", "d/(Live).mp3"]
        groups = find_duplicate_groups(paths, 0.5)

        assert len(groups) == 1
        assert groups[0].files == ("a/song.mp3", "b/song.mp3")

    def test_degenerate_strings_do_not_raise(self):
        paths = ["", "/", "\\", "...", ".", "a/b/", "ø.mp3", "  "]
        assert find_duplicate_groups(paths) == []


class TestVersionPolicy:

    def test_versions_grouped_by_default(self):
        paths = ["Song.mp3", "Song (Live).mp3"]
        assert len(find_duplicate_groups(paths, 1.0)) == 1

    def test_preserve_keeps_versions_apart(self):
        paths = ["Song.mp3", "Song (Live).mp3"]
        assert find_duplicate_groups(paths, 1.0, VersionPolicy.PRESERVE) == []


class TestNameGrouper:
    """Counters and helpers exposed for statistics."""

    def test_key_for(self):
        grouper = NameGrouper()
        assert grouper.key_for("a/Song (1).mp3") == "song"
        assert grouper.key_for("a/Song") == ""

    def test_group_by_key_keeps_singletons(self):
        grouper = NameGrouper()
        buckets = grouper.group_by_key(["a/Song.mp3", "b/Song.mp3", "c/Other.mp3", "d/noext"])
        assert buckets == {"song": ["a/Song.mp3", "b/Song.mp3"], "other": ["c/Other.mp3"]}

    def test_counters_reflect_distinct_keys(self):
        # 1000 files over 10 distinct names: comparisons bounded by 10*9/2
        paths = [f"dir{i}/Name {chr(ord('a') + i % 10)}x.mp3" for i in range(1000)]
        grouper = NameGrouper()
        groups = grouper.find_duplicate_groups(paths, 0.95)

        assert grouper.last_distinct_keys == 10
        assert grouper.last_files_compared == 1000
        assert grouper.last_comparisons <= 45
        assert len(groups) == 10
        assert all(group.duplicate_count == 100 for group in groups)

    def test_counters_reset_between_runs(self):
        grouper = NameGrouper()
        grouper.find_duplicate_groups(["a/x one.mp3", "b/x two.mp3", "c/x three.mp3"], 0.5)
        grouper.find_duplicate_groups(["a/song.mp3"], 0.5)
        assert grouper.last_comparisons == 0
        assert grouper.last_distinct_keys == 0

    def test_length_bound_skips_comparisons(self):
        grouper = NameGrouper()
        grouper.find_duplicate_groups(["ab.mp3", "abcdefghijklmnop.mp3"], 0.9)
        assert grouper.last_comparisons == 0

    def test_logs_summary(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="audiodedupe.core.grouper"):
            NameGrouper().find_duplicate_groups(["a/song.mp3", "b/song.mp3"])
        assert any("distinct names" in record.message for record in caplog.records)
