"""Persistence port for timer records and its two adapters.

Records cross this boundary as plain dicts keyed like the wire format:
``event``, ``state``, ``endDate`` and ``pausedDate``.
"""
import copy
import threading
from typing import Any, Dict, Mapping, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from .errors import StoreFailure

Record = Dict[str, Any]

# record key -> Timer column
_COLUMNS = {
    'state': 'state',
    'endDate': 'end_date',
    'pausedDate': 'paused_date',
}


class TimerStore(Protocol):
    def find_by_key(self, event: str) -> Optional[Record]:
        ...

    def upsert(self, event: str, record: Mapping[str, Any]) -> Record:
        ...

    def update_fields(self, event: str, fields: Mapping[str, Any]) -> Record:
        ...


def _check_fields(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - set(_COLUMNS) - {'event'}
    if unknown:
        raise ValueError(f"Unknown timer fields: {sorted(unknown)}")


class SqlAlchemyTimerStore:
    """Timer records in the ``timer`` table through a Flask-SQLAlchemy session."""

    def __init__(self, session):
        self._session = session

    def _row(self, event):
        from timerbe.models import Timer
        return self._session.query(Timer).filter_by(event=event).first()

    def find_by_key(self, event):
        try:
            row = self._row(event)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreFailure(event, detail=str(exc)) from exc
        return row.to_dict() if row else None

    def upsert(self, event, record):
        from timerbe.models import Timer
        _check_fields(record)
        try:
            row = self._row(event)
            if row is None:
                row = Timer(event=event)
            for key, column in _COLUMNS.items():
                setattr(row, column, record.get(key, ''))
            self._session.add(row)
            self._session.commit()
            return row.to_dict()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreFailure(event, detail=str(exc)) from exc

    def update_fields(self, event, fields):
        _check_fields(fields)
        try:
            row = self._row(event)
            if row is None:
                raise StoreFailure(event, detail='record vanished before update')
            for key, value in fields.items():
                if key in _COLUMNS:
                    setattr(row, _COLUMNS[key], value)
            self._session.add(row)
            self._session.commit()
            return row.to_dict()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreFailure(event, detail=str(exc)) from exc


class InMemoryTimerStore:
    """Dict-backed store, for tests and single-process throwaway deployments."""

    def __init__(self):
        self._records: Dict[str, Record] = {}
        self._lock = threading.Lock()

    def find_by_key(self, event):
        with self._lock:
            record = self._records.get(event)
            return copy.deepcopy(record) if record is not None else None

    def upsert(self, event, record):
        _check_fields(record)
        stored = {'event': event}
        stored.update({key: record.get(key, '') for key in _COLUMNS})
        with self._lock:
            self._records[event] = stored
            return copy.deepcopy(stored)

    def update_fields(self, event, fields):
        _check_fields(fields)
        with self._lock:
            record = self._records.get(event)
            if record is None:
                raise StoreFailure(event, detail='record vanished before update')
            record.update({k: v for k, v in fields.items() if k in _COLUMNS})
            return copy.deepcopy(record)

    def __len__(self):
        with self._lock:
            return len(self._records)
