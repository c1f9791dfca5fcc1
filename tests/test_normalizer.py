"""
Unit tests for core/normalizer.py
Verifies how audio file names are reduced to comparison keys.
"""
from audiodedupe.core.normalizer import normalize, file_name, has_extension
from audiodedupe.core.models import VersionPolicy


class TestBasicNormalization:
    """File name extraction, lowercase, extension and punctuation handling."""

    def test_uses_only_last_path_segment(self):
        assert normalize("Music/Rock/Song.mp3") == "song"
        assert normalize("Song.mp3") == "song"
        assert normalize("a/b/c/d/Song.mp3") == normalize("x/Song.mp3")

    def test_backslash_is_part_of_the_name(self):
        # Only '/' separates segments; Windows paths are converted before they get here
        assert normalize("AC\\DC - Thunderstruck.mp3") == "ac dc thunderstruck"
        assert normalize("Music/AC\\DC - Thunderstruck.mp3") == "ac dc thunderstruck"

    def test_lowercase_conversion(self):
        assert normalize("SONG.MP3") == "song"
        assert normalize("SoNg.Mp3") == "song"

    def test_only_last_extension_stripped(self):
        assert normalize("my.song.name.mp3") == "my song name"

    def test_no_extension_keeps_name(self):
        assert normalize("README") == "readme"

    def test_punctuation_becomes_space(self):
        assert normalize("Artist - Song.mp3") == "artist song"
        assert normalize("Artist_-_Song!.mp3") == "artist_ _song"
        assert normalize("Rock & Roll.mp3") == "rock roll"

    def test_whitespace_collapsed_and_trimmed(self):
        assert normalize("  Big    Song  .mp3") == "big song"

    def test_tool_suffix_removed(self):
        assert normalize("Track_pn.mp3") == "track"
        assert normalize("Track_pn_2.mp3") == "track_pn_2"

    def test_deterministic(self):
        path = "8A - 124 - Artist - Title (Club Mix) [2019].mp3"
        assert normalize(path) == normalize(path)


class TestCopyMarkers:
    """Copies made by file managers and downloads must collapse onto the original."""

    def test_numbered_copy_in_parentheses(self):
        assert normalize("track (1).mp3") == "track"
        assert normalize("track (12).mp3") == "track"

    def test_copy_word(self):
        assert normalize("track copy.mp3") == "track"
        assert normalize("Track - Copy.mp3") == "track"
        assert normalize("track - copy 2.mp3") == "track"
        assert normalize("track_copy.mp3") == "track"

    def test_bracketed_copy(self):
        assert normalize("track (copy).mp3") == "track"
        assert normalize("track [Copy].mp3") == "track"
        assert normalize("track copy (2).mp3") == "track"

    def test_kopya_marker(self):
        assert normalize("track - kopya.mp3") == "track"
        assert normalize("track kopya 3.mp3") == "track"

    def test_repeated_copy_markers(self):
        assert normalize("track - copy - copy.mp3") == "track"

    def test_copy_inside_words_preserved(self):
        assert normalize("Copycat.mp3") == "copycat"
        assert normalize("Copy Machine.mp3") == "copy machine"

    def test_title_ending_in_copy_reads_as_finder_copy(self):
        # A bare trailing "copy" is the Finder copy suffix, even when it belongs to the title
        assert normalize("Carbon Copy.mp3") == normalize("Carbon.mp3") == "carbon"
        assert normalize("The Police - Copy.mp3") == "the police"


class TestDjPrefixes:
    """'[Camelot] - [BPM] - [Artist] - [Title]' names."""

    def test_camelot_and_bpm_removed(self):
        assert normalize("8A - 124 - Daft Punk - One More Time.mp3") == "daft punk one more time"

    def test_two_digit_camelot_key(self):
        assert normalize("12B - 098 - Artist - Title.mp3") == "artist title"

    def test_camelot_only(self):
        assert normalize("11B - Artist - Title.mp3") == "artist title"

    def test_camelot_and_bpm_with_only_three_parts(self):
        # Without a fourth part the BPM is kept as part of the name
        assert normalize("8A - 124 - Title.mp3") == "124 title"

    def test_no_camelot_key_keeps_all_parts(self):
        assert normalize("Artist - Album - Title.mp3") == "artist album title"
        assert normalize("Intro - 120 - Beat.mp3") == "intro 120 beat"

    def test_two_parts_untouched(self):
        assert normalize("8A - Title.mp3") == "8a title"

    def test_tagged_and_plain_names_match(self):
        assert normalize("8A - 124 - Daft Punk - One More Time.mp3") == \
               normalize("Daft Punk - One More Time.mp3")


class TestVersionMarkers:
    """Remix/live/edit markers are folded away by default."""

    def test_bracketed_markers_removed(self):
        assert normalize("Song (Remix).mp3") == "song"
        assert normalize("Song [Live at Wembley].mp3") == "song"
        assert normalize("Song (Radio Edit).mp3") == "song"
        assert normalize("Song (Extended Club Mix).mp3") == "song"

    def test_other_brackets_preserved(self):
        assert normalize("Song (feat. Someone).mp3") == "song feat someone"
        assert normalize("Song [1999].mp3") == "song 1999"

    def test_loose_marker_words_removed(self):
        assert normalize("Song Live.mp3") == "song"
        assert normalize("Song - Acoustic.mp3") == "song"
        assert normalize("Song Instrumental Version.mp3") == "song"

    def test_marker_inside_word_preserved(self):
        assert normalize("Oliver.mp3") == "oliver"
        assert normalize("Dubai Nights.mp3") == "dubai nights"

    def test_dj_pair_with_radio_edit(self):
        original = normalize("8A - 124 - Daft Punk - One More Time.mp3")
        radio_edit = normalize("8A - 124 - Daft Punk - One More Time (Radio Edit).mp3")
        assert original == radio_edit == "daft punk one more time"

    def test_preserve_policy_keeps_markers(self):
        assert normalize("Song (Remix).mp3", VersionPolicy.PRESERVE) == "song remix"
        assert normalize("Song Live.mp3", VersionPolicy.PRESERVE) == "song live"
        assert normalize("Song.mp3", VersionPolicy.PRESERVE) == "song"


class TestTrailingNumbers:
    """Leftover track numbers at the end of a name are dropped (1-3 digits only)."""

    def test_short_trailing_number_removed(self):
        assert normalize("Song - 03.mp3") == "song"
        assert normalize("Song 7.mp3") == "song"
        assert normalize("Song 123.mp3") == "song"

    def test_long_trailing_number_preserved(self):
        assert normalize("Song 1234.mp3") == "song 1234"

    def test_attached_number_preserved(self):
        assert normalize("Song2.mp3") == "song2"


class TestEdgeCases:
    """Degenerate input never raises and degrades to an empty key."""

    def test_empty_input(self):
        assert normalize("") == ""

    def test_trailing_separator(self):
        assert normalize("music/") == ""

    def test_dot_file(self):
        assert normalize(".mp3") == ""

    def test_only_noise(self):
        assert normalize("---.mp3") == ""
        assert normalize("(Remix).mp3") == ""
        assert normalize("  .mp3") == ""

    def test_unicode_names(self):
        assert normalize("Música/Canción (1).mp3") == "canción"
        assert normalize("Björk - Jóga.flac") == "björk jóga"
        assert normalize("Кино - Группа крови.mp3") == "кино группа крови"


class TestPathHelpers:

    def test_file_name(self):
        assert file_name("a/b/Song.mp3") == "Song.mp3"
        assert file_name("Song.mp3") == "Song.mp3"
        assert file_name("AC\\DC - Song.mp3") == "AC\\DC - Song.mp3"
        assert file_name("a/b/") == ""

    def test_has_extension(self):
        assert has_extension("a/Song.mp3")
        assert not has_extension("a/Song")
        assert not has_extension("a/.mp3")
        assert not has_extension("a/Song.")
        assert not has_extension("")
