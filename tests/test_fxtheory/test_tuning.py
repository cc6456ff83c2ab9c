"""Tests for the tuning model and Fretting parsing."""

import math

import pytest

from fxtheory.tuning import FACGCE, MAX_FRET, Fretting, Tuning, midi_to_freq, note_name, pitch_class


class TestTuning:
    """Open-string pitches and note lookup."""

    def test_open_strings_spell_facgce(self):
        """Test the default tuning names."""
        assert FACGCE.names == ("F", "A", "C", "G", "C", "E")
        assert FACGCE.open_pitch_classes == (5, 9, 0, 7, 0, 4)

    def test_note_for_string_wraps_octave(self):
        """Test (open + fret) mod 12."""
        assert FACGCE.note_for_string(3, 2) == 9  # G string fret 2 -> A
        assert FACGCE.note_for_string(5, 8) == 0  # E + 8 -> C
        assert FACGCE.note_for_string(0, 12) == 5

    def test_muted_string_has_no_note(self):
        """Test muted strings return None."""
        assert FACGCE.note_for_string(0, None) is None
        assert FACGCE.midi_for_string(0, None) is None
        assert FACGCE.frequency_for_string(0, None) is None

    def test_frequencies(self):
        """Test open-string frequencies in equal temperament."""
        assert math.isclose(FACGCE.frequency_for_string(1, 0), 110.0)
        assert math.isclose(FACGCE.frequency_for_string(5, 0), 329.6276, rel_tol=1e-5)
        assert math.isclose(midi_to_freq(69), 440.0)

    def test_string_labels_disambiguate_repeated_names(self):
        """Test the two C strings are labelled low and high."""
        assert FACGCE.string_label(0) == "F"
        assert FACGCE.string_label(2) == "low C"
        assert FACGCE.string_label(4) == "high C"

    def test_bass_note_is_lowest_played_string(self):
        """Test bass lookup skips muted strings."""
        fretting = Fretting.of(["x", "x", 0, 0, 0, 0])
        assert FACGCE.bass_note(fretting) == 0
        assert FACGCE.bass_note(Fretting.muted()) is None

    def test_unique_pitch_classes_keep_first_appearance(self):
        """Test dedupe order follows strings low to high."""
        assert FACGCE.unique_pitch_classes(Fretting.of([0] * 6)) == [5, 9, 0, 7, 4]

    def test_wrong_string_count(self):
        """Test tunings must have six strings."""
        with pytest.raises(ValueError):
            Tuning(name="short", open_midi=(40, 45, 50))


class TestNoteNames:
    def test_sharps_only(self):
        assert note_name(10) == "A#"
        assert note_name(13) == "C#"

    def test_flats_fold_to_sharps(self):
        assert pitch_class("Bb") == 10
        assert pitch_class("F#") == 6
        assert pitch_class("Cb") == 11

    def test_invalid_name(self):
        with pytest.raises(ValueError):
            pitch_class("H")


class TestFretting:
    """Fretting construction and validation."""

    def test_muted_markers(self):
        """Test every accepted muted marker."""
        fretting = Fretting.of([None, "x", "X", "-", "", -1])
        assert fretting.to_list() == [None] * 6
        assert not fretting.has_notes

    def test_digit_strings(self):
        """Test string input as used by forms and the CLI."""
        assert Fretting.of(["0", "3", " 2 ", "x", "1", "0"]).to_list() == [0, 3, 2, None, 1, 0]
        assert Fretting.of("x32010").to_list() == [None, 3, 2, 0, 1, 0]
        assert Fretting.of("x,10,12,0,0,0").to_list() == [None, 10, 12, 0, 0, 0]

    def test_out_of_range(self):
        """Test frets outside 0-24 are rejected."""
        with pytest.raises(ValueError, match="String 2"):
            Fretting.of([0, 0, MAX_FRET + 1, 0, 0, 0])
        with pytest.raises(ValueError):
            Fretting.of([0, 0, -2, 0, 0, 0])

    def test_bad_tokens(self):
        with pytest.raises(ValueError):
            Fretting.of([0, 0, "a", 0, 0, 0])
        with pytest.raises(ValueError):
            Fretting.of([0, 0, 1.5, 0, 0, 0])
        with pytest.raises(ValueError):
            Fretting.of([0, 0, True, 0, 0, 0])

    def test_length(self):
        with pytest.raises(ValueError):
            Fretting.of([0, 0, 0])

    def test_replace_is_a_copy(self):
        """Test replace leaves the original untouched."""
        original = Fretting.of([0] * 6)
        changed = original.replace(3, 2)
        assert original.to_list() == [0] * 6
        assert changed.to_list() == [0, 0, 0, 2, 0, 0]

    def test_played_and_str(self):
        fretting = Fretting.of(["x", 3, 2, 0, 12, "x"])
        assert fretting.played() == [1, 2, 3, 4]
        assert str(fretting) == "x320(12)x"

    def test_printed_shape_parses_back(self):
        """Test the compact printed form, two-digit frets included, reads back."""
        fretting = Fretting.of(["x", 10, 12, 0, 24, 3])
        assert str(fretting) == "x(10)(12)0(24)3"
        assert Fretting.of(str(fretting)) == fretting
        assert Fretting.of("x320(12)x").to_list() == [None, 3, 2, 0, 12, None]

    def test_unclosed_group_rejected(self):
        with pytest.raises(ValueError):
            Fretting.of("x320(12x")

    def test_equality_and_hash(self):
        assert Fretting.of([0] * 6) == Fretting.of(["0"] * 6)
        assert len({Fretting.of([0] * 6), Fretting.of([0] * 6)}) == 1
