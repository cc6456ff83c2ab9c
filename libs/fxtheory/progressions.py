"""Progression generation around the user's current chord.

Picks a library progression that contains the chord's scale degree, favoring
smooth voice leading into the following step, then rotates it so the user's
chord comes first.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .identify import identify_chord, is_identified, parse_quality, parse_root
from .intervals import (
    AUGMENTED_FAMILY,
    DIMINISHED_FAMILY,
    MAJOR_FAMILY,
    MINOR_FAMILY,
    quality_family,
)
from .library import PROGRESSIONS, LibraryProgression
from .tuning import FACGCE, Fretting, Tuning, note_name
from .voice_leading import voice_leading_hints, voice_leading_score


logger = logging.getLogger(__name__)

TOP_CHOICES = 3

# Diatonic triads of C major
DEGREE_TABLE = {
    "C": "I",
    "Dm": "ii",
    "Em": "iii",
    "F": "IV",
    "G": "V",
    "Am": "vi",
    "Bdim": "vii°",
}


@dataclass
class ProgressionStep:
    degree: str
    name: str
    fretting: Fretting
    is_user: bool = False
    hints: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "degree": self.degree,
            "name": self.name,
            "frets": self.fretting.to_list(),
            "is_user": self.is_user,
            "hints": list(self.hints),
        }


@dataclass
class Progression:
    name: str
    key: str
    steps: List[ProgressionStep]

    @classmethod
    def from_library(cls, entry: LibraryProgression) -> "Progression":
        return cls(
            name=entry.name,
            key=entry.key,
            steps=[ProgressionStep(s.degree, s.name, s.fretting) for s in entry.steps],
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "key": self.key,
            "steps": [s.to_dict() for s in self.steps],
        }


def chord_degree(chord_name: str) -> Optional[str]:
    """Nashville degree of a chord name in C major, or None."""
    if not is_identified(chord_name):
        return None
    root = parse_root(chord_name)
    if root is None:
        return None
    letter = note_name(root)
    family = quality_family(parse_quality(chord_name))

    if family == MAJOR_FAMILY:
        spellings = [letter]
    elif family == MINOR_FAMILY:
        spellings = [letter + "m"]
    elif family == DIMINISHED_FAMILY:
        spellings = [letter + "dim"]
    elif family == AUGMENTED_FAMILY:
        spellings = []
    else:
        # No third: the root alone decides
        spellings = [letter, letter + "m"]

    for spelling in spellings:
        if spelling in DEGREE_TABLE:
            return DEGREE_TABLE[spelling]
    return None


def _first_step_index(entry: LibraryProgression, degree: str) -> int:
    return entry.degrees().index(degree)


class ProgressionEngine:
    """Builds progressions from a read-only library.

    Randomness comes only from ``rng`` so a seeded engine is deterministic.
    """

    def __init__(
        self,
        library: Sequence[LibraryProgression] = PROGRESSIONS,
        tuning: Tuning = FACGCE,
        rng: Optional[random.Random] = None,
    ):
        if not library:
            raise ValueError("Progression library is empty")
        self.library = tuple(library)
        self.tuning = tuning
        self.rng = rng or random.Random()

    def random_progression(self) -> Progression:
        return Progression.from_library(self.rng.choice(self.library))

    def rank(self, fretting: Fretting, degree: str) -> List[Tuple[int, LibraryProgression]]:
        """Candidates containing ``degree``, smoothest transition first."""
        ranked = []
        for entry in self.library:
            if degree not in entry.degrees():
                continue
            idx = _first_step_index(entry, degree)
            following = entry.steps[(idx + 1) % len(entry.steps)]
            ranked.append((voice_leading_score(fretting, following.fretting), entry))
        ranked.sort(key=lambda item: item[0], reverse=True)
        return ranked

    def generate(self, fretting: Fretting) -> Progression:
        if not fretting.has_notes:
            return self.random_progression()

        chord_name = identify_chord(fretting, self.tuning)
        degree = chord_degree(chord_name)
        ranked = self.rank(fretting, degree) if degree else []
        if not ranked:
            logger.debug(f"No progression contains {chord_name} ({degree}); picking at random")
            return self.random_progression()

        _, chosen = self.rng.choice(ranked[:TOP_CHOICES])
        idx = _first_step_index(chosen, degree)
        progression = Progression.from_library(chosen)
        progression.steps = progression.steps[idx:] + progression.steps[:idx]

        first = progression.steps[0]
        first.name = chord_name
        first.fretting = fretting
        first.is_user = True

        for prev, step in zip(progression.steps, progression.steps[1:]):
            step.hints = voice_leading_hints(prev.fretting, step.fretting)
        return progression


def generate_progression(fretting: Fretting, seed: Optional[int] = None) -> Progression:
    """Convenience wrapper over a fresh engine with the default library."""
    return ProgressionEngine(rng=random.Random(seed)).generate(fretting)


__all__ = [
    "DEGREE_TABLE",
    "ProgressionStep",
    "Progression",
    "ProgressionEngine",
    "chord_degree",
    "generate_progression",
]
