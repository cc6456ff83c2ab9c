"""Chord identification from a fretting.

Every unique played pitch class is tried as a root; recognized candidates
are scored with a fixed heuristic table and the best one is named, as a
slash chord when its root is not the bass note.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from .intervals import classify_intervals, has_complete_triad, interval_set
from .tuning import FACGCE, Fretting, Tuning, note_name, pitch_class


NO_NOTES = "No notes selected"
CUSTOM_PREFIX = "Custom ("

_ROOT_RE = re.compile(r"^([A-G])([#b]?)")


@dataclass(frozen=True)
class ScoringTable:
    """Weights used to rank candidate roots."""

    version: int
    base: int = 100
    tonal_center: int = 0  # C
    scale_bonus: int = 20
    common_root_bonus: int = 10
    simple_quality_bonus: int = 15
    complete_triad_bonus: int = 25
    root_in_bass_bonus: int = 30
    scale: FrozenSet[int] = frozenset({0, 2, 4, 5, 7, 9, 11})
    common_roots: FrozenSet[int] = frozenset({0, 5, 7, 9, 2, 4})  # C F G A D E
    simple_qualities: FrozenSet[str] = frozenset({"", "m", "sus2", "sus4", "add9", "madd9"})

    def score(self, root: int, quality: str, intervals: List[int], bass: Optional[int]) -> int:
        total = self.base
        if (root - self.tonal_center) % 12 in self.scale:
            total += self.scale_bonus
        if root in self.common_roots:
            total += self.common_root_bonus
        if quality in self.simple_qualities:
            total += self.simple_quality_bonus
        if len(intervals) >= 3 and has_complete_triad(intervals):
            total += self.complete_triad_bonus
        if root == bass:
            total += self.root_in_bass_bonus
        return total


SCORING_V1 = ScoringTable(version=1)


@dataclass
class ChordCandidate:
    root: int
    quality: str
    intervals: List[int]
    score: int

    @property
    def root_name(self) -> str:
        return note_name(self.root)

    def display_name(self, bass: Optional[int] = None) -> str:
        name = f"{self.root_name}{self.quality}"
        if bass is not None and bass != self.root:
            name = f"{name}/{note_name(bass)}"
        return name


def rank_candidates(
    fretting: Fretting,
    tuning: Tuning = FACGCE,
    scoring: ScoringTable = SCORING_V1,
) -> List[ChordCandidate]:
    """Score every recognizable root, best first.

    Ties keep the order in which pitch classes first appear (low string first).
    """
    unique = tuning.unique_pitch_classes(fretting)
    bass = tuning.bass_note(fretting)

    candidates: List[ChordCandidate] = []
    for root in unique:
        intervals = interval_set(unique, root)
        quality = classify_intervals(intervals)
        if quality is None:
            continue
        candidates.append(
            ChordCandidate(
                root=root,
                quality=quality,
                intervals=intervals,
                score=scoring.score(root, quality, intervals, bass),
            )
        )
    # list.sort is stable
    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates


def identify_chord(
    fretting: Fretting,
    tuning: Tuning = FACGCE,
    scoring: ScoringTable = SCORING_V1,
) -> str:
    """Name the chord a fretting sounds. Never raises for a valid Fretting."""
    unique = tuning.unique_pitch_classes(fretting)
    if not unique:
        return NO_NOTES

    names = [note_name(pc) for pc in unique]
    if len(unique) == 1:
        return f"{names[0]} power chord"
    if len(unique) == 2:
        return f"{names[0]}/{names[1]} (interval)"

    candidates = rank_candidates(fretting, tuning, scoring)
    if not candidates:
        return f"Custom ({', '.join(names)})"

    return candidates[0].display_name(tuning.bass_note(fretting))


def is_identified(chord_name: str) -> bool:
    """False for the no-notes sentinel and the raw-note fallback."""
    return chord_name != NO_NOTES and not chord_name.startswith(CUSTOM_PREFIX)


def parse_root(chord_name: str) -> Optional[int]:
    """Leading root pitch class of a chord name, flats folded to sharps."""
    match = _ROOT_RE.match(chord_name)
    if not match:
        return None
    return pitch_class(match.group(1) + match.group(2))


def parse_quality(chord_name: str) -> Optional[str]:
    """Quality label between the root and any slash bass.

    Interval and power-chord names have no quality and return None.
    """
    match = _ROOT_RE.match(chord_name)
    if not match or not is_identified(chord_name):
        return None
    rest = chord_name[match.end():]
    if rest.startswith(" power chord") or rest.endswith("(interval)"):
        return None
    return rest.split("/", 1)[0]


__all__ = [
    "NO_NOTES",
    "ScoringTable",
    "SCORING_V1",
    "ChordCandidate",
    "rank_candidates",
    "identify_chord",
    "is_identified",
    "parse_root",
    "parse_quality",
]
