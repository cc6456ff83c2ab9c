"""Voice-leading score and hints between two frettings."""

from __future__ import annotations

from typing import List

from .tuning import Fretting


def string_movement_score(a, b) -> int:
    if a is None and b is None:
        return 0
    if a is None or b is None:
        return -3
    if a == b:
        # Shared open strings ring through the change
        return 15 if a == 0 else 10
    d = abs(a - b)
    if d <= 2:
        return 6 - 2 * d
    return -d


def voice_leading_score(source: Fretting, target: Fretting) -> int:
    """Higher is smoother. Identical frettings score 10 per played string plus 5 per open one."""
    return sum(string_movement_score(a, b) for a, b in zip(source, target))


def _phrase(count: int, verb: str) -> str:
    if count == 1:
        return f"1 string {verb}s"
    return f"{count} strings {verb}"


def voice_leading_hints(source: Fretting, target: Fretting) -> List[str]:
    stay = 0
    move = 0
    for a, b in zip(source, target):
        if a is None or b is None:
            continue
        if a == b:
            stay += 1
        else:
            move += 1

    hints = []
    if stay:
        hints.append(_phrase(stay, "stay"))
    if move:
        hints.append(_phrase(move, "move"))
    return hints


__all__ = ["voice_leading_score", "voice_leading_hints", "string_movement_score"]
