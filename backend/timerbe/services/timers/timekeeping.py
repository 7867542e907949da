"""Wall-clock arithmetic for timer deadlines.

Timers store absolute instants, never remaining durations. ``set`` anchors
the deadline at ``now + duration``; ``pause`` records when the pause
happened; ``start`` pushes the deadline forward by the time spent since that
anchor, which leaves the remaining time unchanged however many times the
timer is paused and resumed.

Instants are ISO-8601 UTC strings at millisecond resolution
(``2026-10-17T12:00:00.000Z``) and every value is truncated to the
millisecond before arithmetic, so stored values round-trip exactly.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping

from .errors import InvalidInput

Clock = Callable[[], datetime]

# Upper bounds per field; days are unbounded
MAX_HOURS = 24
MAX_MINUTES = 60
MAX_SECONDS = 60

_ISO_FORMAT = '%Y-%m-%dT%H:%M:%S'


def utcnow() -> datetime:
    return truncate(datetime.now(timezone.utc))


def truncate(moment: datetime) -> datetime:
    """Normalise to UTC and drop sub-millisecond precision.

    Naive values are taken to already be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


def to_iso(moment: datetime) -> str:
    moment = truncate(moment)
    return f"{moment.strftime(_ISO_FORMAT)}.{moment.microsecond // 1000:03d}Z"


def from_iso(value: str) -> datetime:
    if not value:
        raise ValueError('empty timestamp')
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return truncate(datetime.fromisoformat(value))


@dataclass(frozen=True)
class Duration:
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> 'Duration':
        """Build a duration from a ``{d, h, m, s}`` mapping.

        Missing fields count as zero. Fields must be non-negative integers
        and ``h``/``m``/``s`` are each checked against their own bound.
        """
        if not isinstance(payload, Mapping):
            raise InvalidInput(detail='duration must be an object')
        values = {}
        for key in ('d', 'h', 'm', 's'):
            raw = payload.get(key, 0)
            if raw is None:
                raw = 0
            # bool is an int subclass; reject it explicitly
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise InvalidInput(detail=f"duration.{key} must be an integer")
            if isinstance(raw, float) and not raw.is_integer():
                raise InvalidInput(detail=f"duration.{key} must be an integer")
            if raw < 0:
                raise InvalidInput(detail=f"duration.{key} must not be negative")
            values[key] = int(raw)
        if values['h'] > MAX_HOURS or values['m'] > MAX_MINUTES or values['s'] > MAX_SECONDS:
            raise InvalidInput(detail='duration out of bounds')
        return cls(days=values['d'], hours=values['h'], minutes=values['m'], seconds=values['s'])

    def to_timedelta(self) -> timedelta:
        return timedelta(days=self.days, hours=self.hours, minutes=self.minutes, seconds=self.seconds)

    def __str__(self):
        return f"{self.days}d{self.hours}h{self.minutes}m{self.seconds}s"


def deadline_from(now: datetime, duration: Duration) -> datetime:
    try:
        return truncate(now) + duration.to_timedelta()
    except OverflowError as exc:
        raise InvalidInput(detail='duration out of range') from exc


def shift_deadline(end_date: str, anchor: str, now: datetime) -> str:
    """Move ``end_date`` forward by the time elapsed since ``anchor``."""
    end = from_iso(end_date)
    elapsed = truncate(now) - from_iso(anchor)
    try:
        return to_iso(end + elapsed)
    except OverflowError as exc:
        raise InvalidInput(detail='deadline out of range') from exc


def remaining(end_date: str, now: datetime) -> timedelta:
    return from_iso(end_date) - truncate(now)
