import logging
from typing import Any, Dict, Mapping, Optional

from .errors import CONFLICTS, InvalidInput, NotFound
from .locks import KeyedLock
from .state import RESULTING_STATE, Operation, TimerState, is_allowed
from .store import Record, TimerStore
from .timekeeping import Clock, Duration, deadline_from, remaining, shift_deadline, to_iso, utcnow

logger = logging.getLogger(__name__)


def notification(record: Record) -> Dict[str, str]:
    """The payload sent out on the ``timer`` channel."""
    return {'state': record['state'], 'endDate': record['endDate']}


def _event_name(event: Any) -> str:
    if not isinstance(event, str) or not event.strip():
        raise InvalidInput(detail='event name is required')
    return event


class TimerEngine:
    """Validates timer requests against the state table and applies them.

    The engine keeps no timer state of its own: every call reads the record
    from ``store``, decides, and performs at most one write. Mutating calls
    for the same event name are serialized so the read-decide-write step
    cannot interleave.
    """

    def __init__(self, store: TimerStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or utcnow
        self._locks = KeyedLock()

    def handle(self, operation, payload) -> Dict[str, str]:
        """Route an inbound request to the matching operation."""
        op = Operation(operation)
        if op is Operation.SET:
            if not isinstance(payload, Mapping):
                raise InvalidInput(detail='set expects {eventName, duration}')
            return self.set(payload.get('eventName'), payload.get('duration'))
        return getattr(self, op.value)(payload)

    def get(self, event) -> Dict[str, str]:
        event = _event_name(event)
        record = self._require(event)
        return notification(record)

    def set(self, event, duration) -> Dict[str, str]:
        event = _event_name(event)
        # Bounds and deadline range are checked before the store is touched
        duration = Duration.from_payload(duration)
        now = self.clock()
        end_date = to_iso(deadline_from(now, duration))
        with self._locks.hold(event):
            record = self.store.find_by_key(event)
            state = TimerState(record['state']) if record else TimerState.UNDEFINED
            self._check(Operation.SET, event, state)
            written = self.store.upsert(event, {
                'state': RESULTING_STATE[Operation.SET].value,
                'endDate': end_date,
                'pausedDate': to_iso(now),
            })
        logger.info(f"[timer-set] event={event} duration={duration} endDate={written['endDate']}")
        return notification(written)

    def start(self, event) -> Dict[str, str]:
        event = _event_name(event)
        with self._locks.hold(event):
            record = self._require(event)
            self._check(Operation.START, event, TimerState(record['state']))
            end_date = shift_deadline(record['endDate'], record['pausedDate'], self.clock())
            written = self.store.update_fields(event, {
                'state': RESULTING_STATE[Operation.START].value,
                'endDate': end_date,
            })
        logger.info(f"[timer-start] event={event} endDate={written['endDate']}")
        return notification(written)

    def pause(self, event) -> Dict[str, str]:
        event = _event_name(event)
        with self._locks.hold(event):
            record = self._require(event)
            self._check(Operation.PAUSE, event, TimerState(record['state']))
            now = self.clock()
            written = self.store.update_fields(event, {
                'state': RESULTING_STATE[Operation.PAUSE].value,
                'pausedDate': to_iso(now),
            })
        logger.info(
            f"[timer-pause] event={event} pausedDate={written['pausedDate']} "
            f"remaining={remaining(written['endDate'], now)}"
        )
        return notification(written)

    def stop(self, event) -> Dict[str, str]:
        event = _event_name(event)
        with self._locks.hold(event):
            record = self._require(event)
            self._check(Operation.STOP, event, TimerState(record['state']))
            written = self.store.update_fields(event, {
                'state': RESULTING_STATE[Operation.STOP].value,
                'endDate': '',
                'pausedDate': '',
            })
        logger.info(f"[timer-stop] event={event}")
        return notification(written)

    def _require(self, event: str) -> Record:
        record = self.store.find_by_key(event)
        if record is None:
            raise NotFound(event)
        return record

    @staticmethod
    def _check(operation: Operation, event: str, state: TimerState) -> None:
        if not is_allowed(operation, state):
            raise CONFLICTS[operation](event, state)

