"""Parsing of human-friendly durations such as ``5d`` or ``6h 30m``."""

from __future__ import annotations

import re
from datetime import timedelta

_SEC = 1_000_000_000  # nanoseconds

_UNITS = {
    name: size
    for names, size in (
        ("nanos nsec ns", 1),
        ("usec us µs", 1_000),
        ("millis msec ms", 1_000_000),
        ("seconds second secs sec s", _SEC),
        ("minutes minute mins min m", 60 * _SEC),
        ("hours hour hrs hr h", 3_600 * _SEC),
        ("days day d", 86_400 * _SEC),
        ("weeks week wks wk w", 604_800 * _SEC),
        ("months month M", 2_630_016 * _SEC),  # 30.44 days
        ("years year yrs yr y", 31_557_600 * _SEC),  # 365.25 days
    )
    for name in names.split()
}

_COMPONENT = re.compile(r"(\d+)\s*([A-Za-zµ]*)\s*")


def parse_duration(text: str) -> timedelta:
    """Parse a duration like ``1y``, ``5M 1w`` or ``6h30m`` into a timedelta.

    Raises ValueError when the text is empty, malformed, uses an unknown
    unit, or is too large to represent.
    """
    body = text.strip()
    if not body:
        raise ValueError("value was empty")
    offset = len(text) - len(text.lstrip())
    pos = total = 0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None:
            raise ValueError(f"invalid character at {pos + offset}")
        number, unit = match.groups()
        if not unit:
            raise ValueError(f"expected unit after {number!r}")
        if unit not in _UNITS:
            raise ValueError(f"unknown time unit {unit!r}")
        total += int(number) * _UNITS[unit]
        pos = match.end()
    try:
        return timedelta(microseconds=total // 1_000)
    except OverflowError as exc:
        raise ValueError("number is too large") from exc