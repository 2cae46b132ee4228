"""Runtime settings read from the environment."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from fractions import Fraction

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_MAX_NANOSECONDS = (1 << 63) - 1
_COMPONENT = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1

DEFAULT_AUCTION_INTERVAL = timedelta(minutes=5)
DEFAULT_BATCH_INSERT_INTERVAL = timedelta(minutes=3)
DEFAULT_MAX_BATCH_SIZE = 5


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "300ms", "1.5h" or "2h45m".

    Raises ValueError on malformed input.
    """
    rest = text
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        whole, frac, unit = match["whole"], match["frac"] or "", match["unit"]
        if not whole and not frac:
            raise ValueError(f"invalid duration {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        if unit not in _UNIT_NANOSECONDS:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")
        value = Fraction(int(whole or "0"))
        if frac:
            value += Fraction(int(frac), 10 ** len(frac))
        total += value * _UNIT_NANOSECONDS[unit]
        if total > _MAX_NANOSECONDS:
            raise ValueError(f"invalid duration {text!r}")
        pos = match.end()

    nanoseconds = int(total)
    if negative:
        nanoseconds = -nanoseconds
    return timedelta(microseconds=round(Fraction(nanoseconds, 1000)))


def _duration_from_env(name: str, default: timedelta) -> timedelta:
    try:
        return parse_duration(os.environ.get(name, ""))
    except ValueError:
        return default


def auction_interval() -> timedelta:
    """How long an auction stays open (AUCTION_INTERVAL, default 5 minutes)."""
    return _duration_from_env("AUCTION_INTERVAL", DEFAULT_AUCTION_INTERVAL)


def batch_insert_interval() -> timedelta:
    """Longest wait before flushing pending bids (BATCH_INSERT_INTERVAL, default 3 minutes)."""
    return _duration_from_env("BATCH_INSERT_INTERVAL", DEFAULT_BATCH_INSERT_INTERVAL)


def max_batch_size() -> int:
    """Number of bids that triggers a flush (MAX_BATCH_SIZE, default 5)."""
    raw = os.environ.get("MAX_BATCH_SIZE", "")
    if not _INTEGER.fullmatch(raw):
        return DEFAULT_MAX_BATCH_SIZE
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return DEFAULT_MAX_BATCH_SIZE
    return value