"""FACGCE chord theory

Chord naming, extension search and progression building for open
F-A-C-G-C-E tuning.
"""

__version__ = "0.1.0"

from .tuning import (
    FACGCE,
    MAX_FRET,
    NOTE_NAMES,
    Fretting,
    Tuning,
    midi_to_freq,
    note_name,
    pitch_class,
)
from .intervals import classify_intervals, interval_set, quality_family
from .identify import (
    NO_NOTES,
    SCORING_V1,
    ChordCandidate,
    ScoringTable,
    identify_chord,
    is_identified,
    parse_root,
    rank_candidates,
)
from .extensions import ExtensionSuggestion, suggest_extensions
from .voice_leading import voice_leading_hints, voice_leading_score
from .library import CHORD_LIBRARY, PROGRESSIONS, ChordShape
from .progressions import (
    Progression,
    ProgressionEngine,
    ProgressionStep,
    chord_degree,
    generate_progression,
)

__all__ = [
    # Tuning
    "FACGCE",
    "MAX_FRET",
    "NOTE_NAMES",
    "Fretting",
    "Tuning",
    "midi_to_freq",
    "note_name",
    "pitch_class",
    # Identification
    "classify_intervals",
    "interval_set",
    "quality_family",
    "NO_NOTES",
    "SCORING_V1",
    "ChordCandidate",
    "ScoringTable",
    "identify_chord",
    "is_identified",
    "parse_root",
    "rank_candidates",
    # Suggestions and progressions
    "ExtensionSuggestion",
    "suggest_extensions",
    "voice_leading_hints",
    "voice_leading_score",
    "CHORD_LIBRARY",
    "PROGRESSIONS",
    "ChordShape",
    "Progression",
    "ProgressionEngine",
    "ProgressionStep",
    "chord_degree",
    "generate_progression",
]
