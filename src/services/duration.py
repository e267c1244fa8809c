"""Duration shorthand parsing for token lifetimes ("24h", "7d", "30 mins")."""

import re
from datetime import timedelta

from domain.model.errors import ConfigurationError

_DURATION_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?|\.\d+)\s*([a-z]*)\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    'ms': 0.001, 'msec': 0.001, 'msecs': 0.001,
    'millisecond': 0.001, 'milliseconds': 0.001,
    's': 1, 'sec': 1, 'secs': 1, 'second': 1, 'seconds': 1,
    'm': 60, 'min': 60, 'mins': 60, 'minute': 60, 'minutes': 60,
    'h': 3600, 'hr': 3600, 'hrs': 3600, 'hour': 3600, 'hours': 3600,
    'd': 86400, 'day': 86400, 'days': 86400,
    'w': 604800, 'week': 604800, 'weeks': 604800,
    'y': 31557600, 'yr': 31557600, 'yrs': 31557600, 'year': 31557600, 'years': 31557600,
}


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Convert a TTL setting into a positive timedelta.

    Numbers are seconds. Strings take an optional unit; a bare numeric
    string is milliseconds.

    Examples:
        parse_duration("24h")     → 1 day
        parse_duration("2 days")  → 2 days
        parse_duration("1500")    → 1.5 seconds
        parse_duration(3600)      → 1 hour

    Raises:
        ConfigurationError: unparseable, unknown unit, too large, or not positive
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    elif isinstance(value, (int, float)):
        duration = _seconds(value, value)
    elif isinstance(value, str):
        match = _DURATION_RE.match(value)
        if not match:
            raise ConfigurationError(f"Invalid duration: {value!r}")
        amount, unit = float(match.group(1)), match.group(2).lower()
        if not unit:
            unit = 'ms'
        if unit not in _UNIT_SECONDS:
            raise ConfigurationError(f"Unknown duration unit {unit!r} in {value!r}")
        duration = _seconds(amount * _UNIT_SECONDS[unit], value)
    else:
        raise ConfigurationError(f"Invalid duration: {value!r}")

    if duration <= timedelta(0):
        raise ConfigurationError(f"Duration must be positive: {value!r}")
    return duration


def _seconds(seconds: int | float, value) -> timedelta:
    try:
        return timedelta(seconds=seconds)
    except (OverflowError, ValueError) as e:
        raise ConfigurationError(f"Duration out of range: {value!r}") from e
