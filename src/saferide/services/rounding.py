"""Rounding helpers shared by route synthesis and playback."""

from __future__ import annotations


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (``round()`` uses banker's rounding)."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
