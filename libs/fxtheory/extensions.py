"""Extension suggestions: one-string changes that add a new chord tone."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .identify import identify_chord, is_identified, parse_root
from .intervals import interval_set
from .tuning import FACGCE, MAX_FRET, Fretting, Tuning


logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5

# Order matters: suggestions are emitted in catalog order per candidate fret.
# Distances 2 and 5 carry two names each and both are offered.
EXTENSION_CATALOG: Tuple[Tuple[str, int], ...] = (
    ("add9", 2),
    ("sus2", 2),
    ("sus4", 5),
    ("maj7", 11),
    ("min7", 10),
    ("6", 9),
    ("add11", 5),
)


@dataclass(frozen=True)
class ExtensionSuggestion:
    description: str
    fretting: Fretting
    chord_name: str
    extension: str
    interval: int
    string_index: int

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "frets": self.fretting.to_list(),
            "chord": self.chord_name,
            "extension": self.extension,
            "interval": self.interval,
            "string": self.string_index,
        }


def candidate_frets(current: Optional[int]) -> List[int]:
    """Nearby frets to try on one string, in search order."""
    if current is None:
        return [0, 1, 2, 3]
    frets = [f for f in (current - 1, current + 1, current - 2, current + 2) if 0 <= f <= MAX_FRET]
    if current > 0 and 0 not in frets:
        frets.append(0)
    return frets


def describe_change(label: str, current: Optional[int], new: int) -> str:
    if current is None:
        if new == 0:
            return f"play the open {label} string"
        return f"play the muted {label} string at fret {new}"
    if new == 0:
        return f"open the {label} string"
    if current == 0:
        return f"fret the {label} string at {new}"
    return f"move the {label} string to fret {new}"


def suggest_extensions(
    fretting: Fretting,
    chord_name: str,
    tuning: Tuning = FACGCE,
    limit: int = MAX_SUGGESTIONS,
) -> List[ExtensionSuggestion]:
    """Search single-string changes that add a catalogued extension.

    Returns suggestions in discovery order (string, then fret, then catalog
    entry), capped at ``limit``. Only changes that still identify as a
    named chord are kept.
    """
    if not is_identified(chord_name):
        return []
    root = parse_root(chord_name)
    if root is None:
        return []

    present = set(interval_set(tuning.unique_pitch_classes(fretting), root))
    seen = set()
    suggestions: List[ExtensionSuggestion] = []

    for string_index, current in enumerate(fretting):
        for fret in candidate_frets(current):
            interval = (tuning.note_for_string(string_index, fret) - root) % 12
            if interval in present:
                continue
            for name, distance in EXTENSION_CATALOG:
                if distance != interval or (name, distance) in seen:
                    continue
                changed = fretting.replace(string_index, fret)
                new_name = identify_chord(changed, tuning)
                if not is_identified(new_name):
                    continue
                seen.add((name, distance))
                action = describe_change(tuning.string_label(string_index), current, fret)
                suggestions.append(
                    ExtensionSuggestion(
                        description=f"{name}: {action}",
                        fretting=changed,
                        chord_name=new_name,
                        extension=name,
                        interval=interval,
                        string_index=string_index,
                    )
                )
                if len(suggestions) >= limit:
                    return suggestions

    logger.debug(f"{len(suggestions)} extension(s) for {chord_name}")
    return suggestions


__all__ = [
    "MAX_SUGGESTIONS",
    "EXTENSION_CATALOG",
    "ExtensionSuggestion",
    "candidate_frets",
    "describe_change",
    "suggest_extensions",
]
