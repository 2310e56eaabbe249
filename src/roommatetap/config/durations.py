"""
Duration values as written in config documents.

Documents use compact unit strings such as ``10s``, ``15m``, ``720h`` or ``1h30m``.
Bare numbers are read as seconds.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def _seconds(seconds: float, raw: Any) -> timedelta:
    try:
        return timedelta(seconds=seconds)
    except OverflowError as e:
        raise ValueError(f"Duration out of range: {raw!r}") from e


def parse_duration(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return _seconds(value, value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid duration: {value!r}")

    raw = value.strip()
    sign = 1
    if raw[:1] in ("+", "-"):
        sign = -1 if raw[0] == "-" else 1
        raw = raw[1:]
    if raw == "0":
        return timedelta(0)
    if not raw:
        raise ValueError(f"Invalid duration: {value!r}")

    seconds = 0.0
    pos = 0
    while pos < len(raw):
        match = _PART.match(raw, pos)
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()
    return _seconds(sign * seconds, value)


def format_duration(value: timedelta) -> str:
    total_us = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if total_us == 0:
        return "0s"

    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)
    hours, rem = divmod(total_us, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    seconds, micros = divmod(rem, 1_000_000)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    if micros:
        millis, micros = divmod(micros, 1000)
        if millis:
            parts.append(f"{millis}ms")
        if micros:
            parts.append(f"{micros}us")
    return sign + "".join(parts)


Duration = Annotated[
    timedelta,
    BeforeValidator(parse_duration),
    PlainSerializer(format_duration, return_type=str, when_used="json"),
]
