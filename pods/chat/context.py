"""System prompt describing the user's current shape to the assistant."""

from fxtheory.extensions import suggest_extensions
from fxtheory.identify import NO_NOTES, identify_chord
from fxtheory.tuning import FACGCE, Fretting, Tuning, note_name

PREAMBLE = (
    "You are a friendly guitar teacher who specializes in open {tuning} tuning "
    "(open strings spell {open_chord}). Answer briefly and concretely, "
    "using fret numbers low string to high string with x for muted strings."
)


def build_system_prompt(fretting: Fretting, tuning: Tuning = FACGCE) -> str:
    chord = identify_chord(fretting, tuning)
    lines = [
        PREAMBLE.format(
            tuning="-".join(tuning.names),
            open_chord=identify_chord(Fretting((0,) * len(tuning.open_midi)), tuning),
        )
    ]
    if chord == NO_NOTES:
        lines.append("The student has not entered a chord shape yet.")
        return "\n".join(lines)

    notes = ", ".join(
        f"{tuning.string_label(i)} string fret {f} = {note_name(tuning.note_for_string(i, f))}"
        for i, f in enumerate(fretting)
        if f is not None
    )
    lines.append(f"Current shape: {fretting} ({chord}).")
    lines.append(f"Sounding notes: {notes}.")

    suggestions = suggest_extensions(fretting, chord, tuning)
    if suggestions:
        lines.append("Nearby extensions the student can reach:")
        lines.extend(f"- {s.description} -> {s.chord_name} ({s.fretting})" for s in suggestions)
    return "\n".join(lines)


__all__ = ["build_system_prompt"]
