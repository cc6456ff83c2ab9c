"""Tuning model and fretting value type.

Strings are indexed low to high (0 = lowest). Open strings are stored as
MIDI numbers so both pitch class and frequency can be derived.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union


NUM_STRINGS = 6
MAX_FRET = 24

# Sharps-only spelling used for every displayed note
NOTE_NAMES: Tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

_NATURALS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_MUTED_TOKENS = {"", "x", "-"}
# One character per string; a parenthesised group holds a two-digit fret
_SHAPE_TOKEN = re.compile(r"\((\d+)\)|(\S)")


def note_name(pitch_class: int) -> str:
    return NOTE_NAMES[pitch_class % 12]


def pitch_class(name: str) -> int:
    """Parse a note name such as 'F', 'C#' or 'Bb' into a pitch class."""
    name = name.strip()
    if not name or name[0].upper() not in _NATURALS:
        raise ValueError(f"Invalid note name: {name!r}")
    pc = _NATURALS[name[0].upper()]
    for accidental in name[1:]:
        if accidental == "#":
            pc += 1
        elif accidental == "b":
            pc -= 1
        else:
            raise ValueError(f"Invalid note name: {name!r}")
    return pc % 12


def midi_to_freq(midi: float) -> float:
    """Convert MIDI pitch to frequency in Hz (A4 = 440 Hz)."""
    return 440.0 * (2.0 ** ((midi - 69) / 12.0))


FretValue = Optional[int]


def _parse_fret(value, string_index: int) -> FretValue:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"String {string_index}: invalid fret {value!r}")
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _MUTED_TOKENS:
            return None
        try:
            value = int(token)
        except ValueError:
            raise ValueError(f"String {string_index}: invalid fret {value!r}") from None
    if not isinstance(value, int):
        raise ValueError(f"String {string_index}: invalid fret {value!r}")
    # Legacy wire form used -1 for a muted string
    if value == -1:
        return None
    if value < 0 or value > MAX_FRET:
        raise ValueError(f"String {string_index}: fret {value} out of range 0-{MAX_FRET}")
    return value


@dataclass(frozen=True)
class Fretting:
    """Six string positions, each a fret number or None for a muted string."""

    frets: Tuple[FretValue, ...]

    def __post_init__(self):
        if len(self.frets) != NUM_STRINGS:
            raise ValueError(f"Fretting needs {NUM_STRINGS} strings, got {len(self.frets)}")
        for i, fret in enumerate(self.frets):
            if fret is not None and not (0 <= fret <= MAX_FRET):
                raise ValueError(f"String {i}: fret {fret} out of range 0-{MAX_FRET}")

    @classmethod
    def of(cls, values: Union["Fretting", Iterable]) -> "Fretting":
        """Build a Fretting from user or wire input.

        Accepts ints, digit strings, and the muted markers None, "x", "-",
        "" or -1. A single string is split on commas, or else read in the
        compact form printed by ``str()``, e.g. "x32(10)(12)0".
        """
        if isinstance(values, Fretting):
            return values
        if isinstance(values, str):
            if "," in values:
                values = values.split(",")
            else:
                values = [m.group(1) or m.group(2) for m in _SHAPE_TOKEN.finditer(values)]
        parsed = tuple(_parse_fret(v, i) for i, v in enumerate(values))
        return cls(parsed)

    @classmethod
    def muted(cls) -> "Fretting":
        return cls((None,) * NUM_STRINGS)

    def __iter__(self):
        return iter(self.frets)

    def __getitem__(self, index: int) -> FretValue:
        return self.frets[index]

    def __len__(self) -> int:
        return NUM_STRINGS

    def is_muted(self, string_index: int) -> bool:
        return self.frets[string_index] is None

    def played(self) -> List[int]:
        """Indices of strings that sound."""
        return [i for i, f in enumerate(self.frets) if f is not None]

    @property
    def has_notes(self) -> bool:
        return any(f is not None for f in self.frets)

    def replace(self, string_index: int, fret: FretValue) -> "Fretting":
        frets = list(self.frets)
        frets[string_index] = fret
        return Fretting(tuple(frets))

    def to_list(self) -> List[FretValue]:
        return list(self.frets)

    def __str__(self) -> str:
        return "".join("x" if f is None else (str(f) if f < 10 else f"({f})") for f in self.frets)


@dataclass(frozen=True)
class Tuning:
    """Open-string pitches, low to high, as MIDI numbers."""

    name: str
    open_midi: Tuple[int, ...]

    def __post_init__(self):
        if len(self.open_midi) != NUM_STRINGS:
            raise ValueError(f"Tuning needs {NUM_STRINGS} strings, got {len(self.open_midi)}")

    @property
    def open_pitch_classes(self) -> Tuple[int, ...]:
        return tuple(m % 12 for m in self.open_midi)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(note_name(m) for m in self.open_midi)

    def string_label(self, string_index: int) -> str:
        """Human label such as 'low F' or 'high E' used in suggestions."""
        names = self.names
        label = names[string_index]
        if names.count(label) > 1:
            first = names.index(label)
            return f"{'low' if string_index == first else 'high'} {label}"
        return label

    def note_for_string(self, string_index: int, fret: FretValue) -> Optional[int]:
        """Pitch class sounding on a string, or None when muted."""
        if fret is None:
            return None
        return (self.open_midi[string_index] + fret) % 12

    def midi_for_string(self, string_index: int, fret: FretValue) -> Optional[int]:
        if fret is None:
            return None
        return self.open_midi[string_index] + fret

    def frequency_for_string(self, string_index: int, fret: FretValue) -> Optional[float]:
        midi = self.midi_for_string(string_index, fret)
        return None if midi is None else midi_to_freq(midi)

    def played_notes(self, fretting: Fretting) -> List[Optional[int]]:
        """Per-string pitch classes, None for muted strings."""
        return [self.note_for_string(i, f) for i, f in enumerate(fretting)]

    def unique_pitch_classes(self, fretting: Fretting) -> List[int]:
        """Played pitch classes deduplicated in order of first appearance."""
        seen: List[int] = []
        for pc in self.played_notes(fretting):
            if pc is not None and pc not in seen:
                seen.append(pc)
        return seen

    def bass_note(self, fretting: Fretting) -> Optional[int]:
        """Pitch class of the lowest played string."""
        for pc in self.played_notes(fretting):
            if pc is not None:
                return pc
        return None


# F2 A2 C3 G3 C4 E4
FACGCE = Tuning(name="FACGCE", open_midi=(41, 45, 48, 55, 60, 64))


__all__ = [
    "NUM_STRINGS",
    "MAX_FRET",
    "NOTE_NAMES",
    "note_name",
    "pitch_class",
    "midi_to_freq",
    "Fretting",
    "Tuning",
    "FACGCE",
]
