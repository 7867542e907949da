"""Timer domain: state table, deadline arithmetic and the request engine.

Socket handlers call into ``TimerEngine``; nothing in this package knows
about Flask or Socket.IO, only about the ``TimerStore`` port.
"""
from .engine import TimerEngine, notification
from .errors import (
    InvalidInput,
    NotFound,
    PauseConflict,
    SetConflict,
    StartConflict,
    StopConflict,
    StoreFailure,
    TimerError,
)
from .state import Operation, TimerState
from .store import InMemoryTimerStore, SqlAlchemyTimerStore, TimerStore
