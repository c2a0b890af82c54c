from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Callable

from situpcounter.analysis.repetition_counter import CounterSnapshot, Phase, RepetitionCounter

STATUS_READY = "Position yourself in front of the camera"
STATUS_COUNTING = "Counting sit-ups..."
STATUS_PAUSED = "Paused"

StateListener = Callable[["SessionState"], None]


@dataclass(frozen=True)
class SessionState:
    count: int = 0
    phase: Phase = Phase.IDLE
    is_counting: bool = False
    status_text: str = STATUS_READY

    def as_dict(self) -> dict[str, object]:
        return {
            "count": self.count,
            "phase": self.phase.value,
            "is_counting": self.is_counting,
            "status_text": self.status_text,
        }


class SessionController:
    """Map the start/pause/reset user actions onto a counter.

    Holds the UI-facing ``SessionState`` and notifies subscribers after every
    change. The counter knows nothing about the controller; counter output
    arrives through ``update``, typically wired as a ``CounterWorker``
    ``on_update`` callback. A new session is not counting until ``start``.
    """

    def __init__(self, counter: RepetitionCounter) -> None:
        self._counter = counter
        self._lock = threading.Lock()
        self._listeners: list[StateListener] = []
        self._counter.pause()
        self._state = SessionState()

    @property
    def counter(self) -> RepetitionCounter:
        return self._counter

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    def subscribe(self, listener: StateListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def start(self) -> SessionState:
        with self._lock:
            self._counter.resume()
            state = self._apply(is_counting=True, status_text=STATUS_COUNTING)
        return self._notify(state)

    def pause(self) -> SessionState:
        with self._lock:
            self._counter.pause()
            state = self._apply(is_counting=False, status_text=STATUS_PAUSED)
        return self._notify(state)

    def reset(self) -> SessionState:
        with self._lock:
            self._counter.reset()
            self._counter.pause()
            state = self._apply(
                count=0,
                phase=Phase.IDLE,
                is_counting=False,
                status_text=STATUS_READY,
            )
        return self._notify(state)

    def update(self, snapshot: CounterSnapshot | None = None) -> SessionState:
        """Refresh count and phase from the counter.

        ``snapshot`` is accepted so this can be wired as an ``on_update``
        callback, but the counter is re-read under the controller lock; a
        snapshot taken before a concurrent ``reset`` is never published.
        """
        with self._lock:
            current = self._counter.snapshot()
            state = self._apply(count=current.count, phase=current.phase)
        return self._notify(state)

    # Callers hold self._lock.
    def _apply(self, **changes: object) -> SessionState:
        self._state = replace(self._state, **changes)
        return self._state

    def _notify(self, state: SessionState) -> SessionState:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state)
        return state
