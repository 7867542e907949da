from enum import Enum
from typing import Dict, FrozenSet


class TimerState(str, Enum):
    UNDEFINED = 'undefined'
    INACTIVE = 'inactive'
    ACTIVE = 'active'
    PAUSED = 'paused'


class Operation(str, Enum):
    GET = 'get'
    SET = 'set'
    START = 'start'
    PAUSE = 'pause'
    STOP = 'stop'


# States each operation may be applied from. A missing record counts as
# UNDEFINED for `set` only; every other operation needs a record to exist.
ALLOWED_FROM: Dict[Operation, FrozenSet[TimerState]] = {
    Operation.GET: frozenset(TimerState),
    Operation.SET: frozenset({TimerState.UNDEFINED, TimerState.INACTIVE}),
    Operation.START: frozenset({TimerState.INACTIVE, TimerState.PAUSED}),
    Operation.PAUSE: frozenset({TimerState.ACTIVE}),
    Operation.STOP: frozenset({TimerState.INACTIVE, TimerState.ACTIVE, TimerState.PAUSED}),
}

RESULTING_STATE: Dict[Operation, TimerState] = {
    Operation.SET: TimerState.INACTIVE,
    Operation.START: TimerState.ACTIVE,
    Operation.PAUSE: TimerState.PAUSED,
    Operation.STOP: TimerState.UNDEFINED,
}


def is_allowed(operation: Operation, state: TimerState) -> bool:
    return state in ALLOWED_FROM[operation]
