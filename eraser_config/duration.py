"""Durations in nanoseconds, written and read in the ``72h3m0.5s`` notation."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "\u00b5s": MICROSECOND,  # micro sign
    "\u03bcs": MICROSECOND,  # greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_DIGITS = "0123456789"
_LIMIT = 1 << 63


def _invalid(orig: str) -> ValueError:
    return ValueError(f'time: invalid duration "{orig}"')


def _leading_int(s: str, orig: str) -> tuple[int, str]:
    value = 0
    index = 0
    while index < len(s) and s[index] in _DIGITS:
        if value > _LIMIT // 10:
            raise _invalid(orig)
        value = value * 10 + int(s[index])
        if value > _LIMIT:
            raise _invalid(orig)
        index += 1
    return value, s[index:]


def _leading_fraction(s: str) -> tuple[int, float, str]:
    value = 0
    scale = 1.0
    overflow = False
    index = 0
    while index < len(s) and s[index] in _DIGITS:
        if not overflow:
            if value > (_LIMIT - 1) // 10:
                overflow = True
            else:
                candidate = value * 10 + int(s[index])
                if candidate > _LIMIT:
                    overflow = True
                else:
                    value = candidate
                    scale *= 10
        index += 1
    return value, scale, s[index:]


def parse_duration(text: str) -> int:
    """Parse a duration such as ``"1h30m"`` or ``"-1.5ms"`` into nanoseconds."""
    orig = text
    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return 0
    if not s:
        raise _invalid(orig)

    total = 0
    while s:
        if not (s[0] == "." or s[0] in _DIGITS):
            raise _invalid(orig)

        before = len(s)
        whole, s = _leading_int(s, orig)
        has_whole = before != len(s)

        fraction, scale, has_fraction = 0, 1.0, False
        if s.startswith("."):
            s = s[1:]
            before = len(s)
            fraction, scale, s = _leading_fraction(s)
            has_fraction = before != len(s)
        if not has_whole and not has_fraction:
            raise _invalid(orig)

        end = 0
        while end < len(s) and s[end] != "." and s[end] not in _DIGITS:
            end += 1
        if end == 0:
            raise ValueError(f'time: missing unit in duration "{orig}"')
        unit_name, s = s[:end], s[end:]
        unit = _UNITS.get(unit_name)
        if unit is None:
            raise ValueError(f'time: unknown unit "{unit_name}" in duration "{orig}"')

        if whole > _LIMIT // unit:
            raise _invalid(orig)
        value = whole * unit
        if fraction > 0:
            value += int(float(fraction) * (float(unit) / scale))
            if value > _LIMIT:
                raise _invalid(orig)
        total += value
        if total > _LIMIT:
            raise _invalid(orig)

    if negative:
        return -total
    if total > _LIMIT - 1:
        raise _invalid(orig)
    return total


def _split(value: int, precision: int) -> tuple[int, str]:
    """Split ``value`` into its whole part and a trimmed fractional suffix."""
    divisor = 10**precision
    digits = f"{value % divisor:0{precision}d}".rstrip("0")
    return value // divisor, f".{digits}" if digits else ""


def format_duration(nanoseconds: int) -> str:
    """Render nanoseconds in the ``72h3m0.5s`` notation; zero is ``"0s"``."""
    n = int(nanoseconds)
    negative = n < 0
    u = -n if negative else n

    if u < SECOND:
        if u == 0:
            return "0s"
        if u < MICROSECOND:
            body = f"{u}ns"
        elif u < MILLISECOND:
            whole, frac = _split(u, 3)
            body = f"{whole}{frac}\u00b5s"
        else:
            whole, frac = _split(u, 6)
            body = f"{whole}{frac}ms"
    else:
        seconds, frac = _split(u, 9)
        body = f"{seconds % 60}{frac}s"
        minutes = seconds // 60
        if minutes > 0:
            body = f"{minutes % 60}m{body}"
            hours = minutes // 60
            if hours > 0:
                body = f"{hours}h{body}"

    return f"-{body}" if negative else body


@dataclass(frozen=True, order=True)
class Duration:
    """A span of time held as whole nanoseconds."""

    nanoseconds: int = 0

    @classmethod
    def from_json(cls, value: object) -> Duration:
        """Build from a decoded JSON value, which must be a duration string."""
        if not isinstance(value, str):
            raise ValueError(f"duration must be a JSON string, got {type(value).__name__}")
        return cls(parse_duration(value))

    def to_json(self) -> str:
        """Return the duration string that stands for this value in JSON."""
        return format_duration(self.nanoseconds)

    def to_timedelta(self) -> datetime.timedelta:
        return datetime.timedelta(microseconds=self.nanoseconds / MICROSECOND)

    def __str__(self) -> str:
        return format_duration(self.nanoseconds)