"""Reference chord shapes and progressions for FACGCE tuning.

All progressions are in C major. Tables are read-only; callers that need to
annotate a progression get copies from the progression engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .intervals import MAJOR_FAMILY, MINOR_FAMILY, SUSPENDED_FAMILY
from .tuning import Fretting


@dataclass(frozen=True)
class ChordShape:
    fretting: Fretting
    family: str
    description: str


@dataclass(frozen=True)
class LibraryStep:
    degree: str
    name: str
    fretting: Fretting


@dataclass(frozen=True)
class LibraryProgression:
    name: str
    key: str
    steps: Tuple[LibraryStep, ...]

    def degrees(self) -> Tuple[str, ...]:
        return tuple(step.degree for step in self.steps)


def _shape(frets, family: str, description: str) -> ChordShape:
    return ChordShape(Fretting.of(frets), family, description)


def _progression(name: str, *steps) -> LibraryProgression:
    return LibraryProgression(
        name=name,
        key="C",
        steps=tuple(LibraryStep(degree, chord, Fretting.of(frets)) for degree, chord, frets in steps),
    )


CHORD_LIBRARY: Mapping[str, ChordShape] = MappingProxyType({
    "Fmaj9": _shape([0, 0, 0, 0, 0, 0], MAJOR_FAMILY, "Open strings - the natural voicing"),
    "Fmaj7": _shape([0, 0, 0, 0, 0, 0], MAJOR_FAMILY, "Same as Fmaj9, emphasize different notes"),
    "C": _shape([5, 7, 0, 0, 0, 7], MAJOR_FAMILY, "C major with open strings"),
    "Cmaj7": _shape([5, 7, 0, 0, 0, 0], MAJOR_FAMILY, "C major 7 using open E"),
    "Am": _shape([0, 0, 0, 2, 0, 0], MINOR_FAMILY, "A minor with resonant open strings"),
    "Am7": _shape([0, 0, 0, 2, 0, 7], MINOR_FAMILY, "A minor 7"),
    "Dm": _shape([3, 5, 2, 0, 0, 0], MINOR_FAMILY, "D minor"),
    "Dm7": _shape([3, 5, 2, 0, 0, 5], MINOR_FAMILY, "D minor 7"),
    "G": _shape([2, 4, 0, 0, 0, 0], MAJOR_FAMILY, "G major with open strings"),
    "Gmaj7": _shape([2, 4, 0, 0, 0, 7], MAJOR_FAMILY, "G major 7"),
    "Em": _shape([0, 2, 0, 0, 0, 0], MINOR_FAMILY, "E minor"),
    "Em7": _shape([0, 2, 0, 5, 0, 0], MINOR_FAMILY, "E minor 7"),
    "Cadd9": _shape([5, 7, 0, 2, 0, 7], MAJOR_FAMILY, "C add 9"),
    "Asus2": _shape([0, 0, 2, 2, 0, 0], SUSPENDED_FAMILY, "A suspended 2"),
    "Dsus2": _shape([3, 5, 0, 0, 0, 0], SUSPENDED_FAMILY, "D suspended 2"),
    "Gsus4": _shape([2, 4, 0, 0, 5, 0], SUSPENDED_FAMILY, "G suspended 4"),
    "Bb": _shape([0, 3, 0, 3, 3, 0], MAJOR_FAMILY, "Bb major"),
    "Bbmaj7": _shape([0, 3, 0, 3, 3, 5], MAJOR_FAMILY, "Bb major 7"),
})


PROGRESSIONS: Tuple[LibraryProgression, ...] = (
    _progression(
        "I - V - vi - IV",
        ("I", "Cadd9", [7, 9, 0, 2, 0, 0]),
        ("V", "Gadd11", [2, 4, 0, 0, 5, 0]),
        ("vi", "Am7", [0, 0, 0, 2, 3, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
    ),
    _progression(
        "I - IV - V",
        ("I", "Cmaj7", [5, 7, 0, 0, 0, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
        ("V", "Gsus4", [2, 4, 0, 0, 5, 0]),
    ),
    _progression(
        "vi - IV - I - V",
        ("vi", "Am11", [0, 0, 0, 2, 5, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
        ("I", "Cadd9", [7, 9, 0, 2, 0, 0]),
        ("V", "G6", [2, 4, 0, 0, 0, 0]),
    ),
    _progression(
        "I - vi - ii - V",
        ("I", "Cmaj7", [5, 7, 0, 0, 0, 0]),
        ("vi", "Am7", [0, 0, 0, 2, 3, 0]),
        ("ii", "Dm9", [3, 5, 2, 0, 3, 0]),
        ("V", "Gadd11", [2, 4, 0, 0, 5, 0]),
    ),
    _progression(
        "ii - V - I",
        ("ii", "Dm7", [3, 5, 2, 0, 3, 0]),
        ("V", "G6", [2, 4, 0, 0, 0, 0]),
        ("I", "Cmaj9", [5, 7, 0, 2, 0, 0]),
    ),
    _progression(
        "I - iii - vi - IV",
        ("I", "Cadd9", [7, 9, 0, 2, 0, 0]),
        ("iii", "Em7", [0, 2, 0, 0, 3, 0]),
        ("vi", "Am7", [0, 0, 0, 2, 3, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
    ),
    _progression(
        "vi - V - IV - V",
        ("vi", "Am7", [0, 0, 0, 2, 3, 0]),
        ("V", "Gsus4", [2, 4, 0, 0, 5, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
        ("V", "G6", [2, 4, 0, 0, 0, 0]),
    ),
    _progression(
        "I - iii - IV - V",
        ("I", "Cmaj7", [5, 7, 0, 0, 0, 0]),
        ("iii", "Em11", [0, 2, 0, 0, 5, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
        ("V", "Gadd11", [2, 4, 0, 0, 5, 0]),
    ),
    _progression(
        "IV - V - iii - vi (Royal Road)",
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
        ("V", "Gsus4", [2, 4, 0, 0, 5, 0]),
        ("iii", "Em7", [0, 2, 0, 0, 3, 0]),
        ("vi", "Am11", [0, 0, 0, 2, 5, 0]),
    ),
    _progression(
        "vi - ii - V - I",
        ("vi", "Am7", [0, 0, 0, 2, 3, 0]),
        ("ii", "Dm9", [3, 5, 2, 0, 3, 0]),
        ("V", "G6", [2, 4, 0, 0, 0, 0]),
        ("I", "Cmaj9", [5, 7, 0, 2, 0, 0]),
    ),
    _progression(
        "I - ii - iii - IV",
        ("I", "Cmaj9", [5, 7, 0, 2, 0, 0]),
        ("ii", "Dm7", [3, 5, 2, 0, 3, 0]),
        ("iii", "Em7", [0, 2, 0, 0, 3, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
    ),
    _progression(
        "I - V - vi - iii - IV",
        ("I", "Cadd9", [7, 9, 0, 2, 0, 0]),
        ("V", "G6", [2, 4, 0, 0, 0, 0]),
        ("vi", "Am11", [0, 0, 0, 2, 5, 0]),
        ("iii", "Em7", [0, 2, 0, 0, 3, 0]),
        ("IV", "Fmaj9", [0, 0, 0, 0, 0, 0]),
    ),
)


__all__ = [
    "ChordShape",
    "LibraryStep",
    "LibraryProgression",
    "CHORD_LIBRARY",
    "PROGRESSIONS",
]
