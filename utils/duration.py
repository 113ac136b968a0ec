"""
Parse human-friendly durations such as ``"7d"``, ``"15m"`` or ``"3600"``.

A bare number is read as seconds.
"""

from __future__ import annotations

import re
from datetime import timedelta

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    "": 1,
    "ms": 0.001,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "week": 604800,
    "weeks": 604800,
    "y": 31557600,
}


def parse_duration(value: str | int) -> timedelta:
    """Return a positive ``timedelta`` for *value*; raise ``ValueError`` otherwise."""
    if isinstance(value, int):
        seconds = float(value)
    else:
        match = _DURATION_RE.match(value)
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        unit = unit.lower()
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"Unknown duration unit {unit!r} in {value!r}")
        seconds = float(amount) * _UNIT_SECONDS[unit]

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return timedelta(seconds=seconds)
