"""Grid geometry: the hour axis and the slot-key scheme over (date, hour).

A slot key is ``"<YYYY-MM-DD>:<hour>"`` with the hour written without zero
padding, e.g. ``"2024-03-01:9"``. Keys are ordered by ``(date, hour)``, not
lexically, so ``":9"`` sorts before ``":10"``.
"""

import re
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Final, NamedTuple

HOURS: Final[tuple[int, ...]] = tuple(range(9, 23))
SLOT_SEPARATOR: Final[str] = ":"

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SLOT_RE = re.compile(r"^(\d{4}-\d{2}-\d{2}):(\d{1,2})$")


class Slot(NamedTuple):
    date: str
    hour: int

    @property
    def key(self) -> str:
        return slot_key(self.date, self.hour)

    @classmethod
    def from_key(cls, key: str) -> "Slot":
        return parse_slot_key(key)


def _check_date(value: str) -> None:
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise ValueError(f"invalid date format: {value!r}")
    date.fromisoformat(value)


def _check_hour(hour: int) -> None:
    if isinstance(hour, bool) or not isinstance(hour, int) or hour not in HOURS:
        raise ValueError(f"hour {hour!r} is outside the permitted hours {HOURS[0]}-{HOURS[-1]}")


def slot_key(date_str: str, hour: int) -> str:
    """Build the composite key for ``(date_str, hour)``.

    Raises:
        ValueError: If the date is not ``YYYY-MM-DD`` or the hour is not in ``HOURS``.
    """
    _check_date(date_str)
    _check_hour(hour)
    return f"{date_str}{SLOT_SEPARATOR}{hour}"


def parse_slot_key(key: str) -> Slot:
    """Recover ``(date, hour)`` from a key built by :func:`slot_key`."""
    match = SLOT_RE.match(key) if isinstance(key, str) else None
    if not match:
        raise ValueError(f"invalid slot key: {key!r}")
    date_str, hour_str = match.groups()
    if hour_str != str(int(hour_str)):
        raise ValueError(f"invalid slot key: {key!r}")
    hour = int(hour_str)
    _check_date(date_str)
    _check_hour(hour)
    return Slot(date_str, hour)


def is_slot_key(key: str) -> bool:
    try:
        parse_slot_key(key)
    except ValueError:
        return False
    return True


def format_hour(hour: int) -> str:
    """Render a 24-hour value as a 12-hour label, e.g. ``13 -> "1 PM"``."""
    suffix = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display} {suffix}"


def sort_slots(slots: Iterable[str]) -> list[str]:
    """Deduplicate keys and sort them ascending by ``(date, hour)``."""
    return [s.key for s in sorted({parse_slot_key(k) for k in slots})]


def date_range(slots: Iterable[str]) -> list[str]:
    """Distinct dates referenced by ``slots``, ascending."""
    return sorted({parse_slot_key(k).date for k in slots})


def dates_between(start: str, end: str) -> list[str]:
    """Every calendar day from ``start`` to ``end`` inclusive."""
    first = date.fromisoformat(start)
    last = date.fromisoformat(end)
    days = (last - first).days
    return [(first + timedelta(days=i)).isoformat() for i in range(days + 1)]


def column_slots(date_str: str, active: Iterable[str] | None = None) -> list[str]:
    """Keys of one date column in hour order, optionally limited to ``active``."""
    keys = [slot_key(date_str, h) for h in HOURS]
    if active is None:
        return keys
    allowed = set(active)
    return [k for k in keys if k in allowed]


def full_grid(dates: Iterable[str]) -> list[str]:
    return [slot_key(d, h) for d in dates for h in HOURS]
