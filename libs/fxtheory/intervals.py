"""Interval-set classification into chord quality labels.

Rules are checked top to bottom and the first match wins. Many sets satisfy
several of the weaker rules (a major triad with an added ninth also holds a
sus2 interval), so the order below decides the label.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


MAJOR_FAMILY = "major"
MINOR_FAMILY = "minor"
DIMINISHED_FAMILY = "diminished"
AUGMENTED_FAMILY = "augmented"
SUSPENDED_FAMILY = "suspended"
OTHER_FAMILY = "other"


def interval_set(pitch_classes: Iterable[int], root: int) -> List[int]:
    """Sorted unique semitone distances of each pitch class above root."""
    return sorted({(pc - root) % 12 for pc in pitch_classes})


def classify_intervals(intervals: Iterable[int]) -> Optional[str]:
    """Map an interval set to a quality label, or None if unrecognized.

    The empty string is a valid label (plain major triad).
    """
    s = set(intervals)
    if 0 not in s:
        return None

    has_major_third = 4 in s
    has_minor_third = 3 in s
    has_third = has_major_third or has_minor_third
    has_fifth = 7 in s

    if has_major_third and has_fifth:
        if 11 in s:
            return "maj9" if 2 in s else "maj7"
        if 10 in s:
            return "9" if 2 in s else "7"
        if 2 in s:
            return "add9"
        if 9 in s:
            return "add6"
        return ""

    if has_minor_third and has_fifth:
        if 10 in s:
            return "m9" if 2 in s else "m7"
        if 11 in s:
            return "mmaj7"
        if 2 in s:
            return "madd9"
        if 9 in s:
            return "m6"
        return "m"

    if not has_third and has_fifth:
        if 2 in s:
            if 10 in s:
                return "7sus2"
            if 9 in s:
                return "sus2add9"
            return "sus2"
        if 5 in s:
            if 10 in s:
                return "7sus4"
            if 2 in s or 9 in s:
                return "sus4add9"
            return "sus4"

    if has_minor_third and 6 in s:
        if 9 in s:
            return "dim7"
        if 10 in s:
            return "m7♭5"
        return "dim"

    if has_major_third and 8 in s:
        if 11 in s:
            return "augmaj7"
        if 10 in s:
            return "aug7"
        return "aug"

    if len(s) == 2 and has_fifth:
        return "5"

    # Partial voicings
    if has_major_third and not has_fifth:
        return "add9(no5)" if 2 in s else "(no5)"
    if has_minor_third and not has_fifth:
        return "madd9(no5)" if 2 in s else "m(no5)"

    # Stacked fourths
    if 5 in s and 10 in s:
        return "quartal"

    if len(s) >= 3:
        if 2 in s and has_fifth:
            return "sus2"
        if has_major_third and not has_fifth:
            return "maj(no5)"
        if has_minor_third and not has_fifth:
            return "min(no5)"

    return None


def quality_family(quality: Optional[str]) -> str:
    """Coarse family of a quality label, used for scale-degree lookup."""
    if quality is None:
        return OTHER_FAMILY
    if quality.startswith("dim") or quality == "m7♭5":
        return DIMINISHED_FAMILY
    if quality.startswith("aug"):
        return AUGMENTED_FAMILY
    if quality.startswith("m") and not quality.startswith("maj"):
        return MINOR_FAMILY
    if "sus" in quality or quality in ("5", "quartal"):
        return SUSPENDED_FAMILY
    return MAJOR_FAMILY


def has_complete_triad(intervals: Iterable[int]) -> bool:
    s = set(intervals)
    return (3 in s or 4 in s) and 7 in s


__all__ = [
    "MAJOR_FAMILY",
    "MINOR_FAMILY",
    "DIMINISHED_FAMILY",
    "AUGMENTED_FAMILY",
    "SUSPENDED_FAMILY",
    "OTHER_FAMILY",
    "interval_set",
    "classify_intervals",
    "quality_family",
    "has_complete_triad",
]
