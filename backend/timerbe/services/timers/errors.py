"""Per-request failures raised by the timer engine.

Every error is terminal for the request that raised it: nothing has been
written when one of these escapes the engine. ``reason`` is the message
sent back to the client on the ``err`` channel.
"""
from .state import Operation


class TimerError(Exception):
    kind = 'TimerError'
    reason = 'Timer request failed.'

    def __init__(self, event=None, detail=None):
        self.event = event
        self.detail = detail
        super().__init__(self.reason if detail is None else f"{self.reason} ({detail})")


class NotFound(TimerError):
    kind = 'NotFound'
    reason = 'Timer not found.'


class StoreFailure(TimerError):
    kind = 'StoreFailure'
    reason = 'Database query failed.'


class InvalidInput(TimerError):
    kind = 'InvalidInput'
    reason = 'Invalid timer set input.'


class TransitionConflict(TimerError):
    kind = 'TransitionConflict'

    def __init__(self, event=None, state=None):
        self.state = state
        super().__init__(event, detail=f"state={state.value}" if state is not None else None)


class SetConflict(TransitionConflict):
    kind = 'SetConflict'
    reason = 'Cannot set a timer when active or paused.'


class StartConflict(TransitionConflict):
    kind = 'StartConflict'
    reason = 'Cannot start an undefined or active timer.'


class PauseConflict(TransitionConflict):
    kind = 'PauseConflict'
    reason = 'Cannot pause a stopped, undefined or already paused timer.'


class StopConflict(TransitionConflict):
    kind = 'StopConflict'
    reason = 'Cannot stop an undefined timer.'


CONFLICTS = {
    Operation.SET: SetConflict,
    Operation.START: StartConflict,
    Operation.PAUSE: PauseConflict,
    Operation.STOP: StopConflict,
}
