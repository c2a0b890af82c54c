"""Sit-up repetition state machine.

The counter is fed one landmark sample per video frame and tracks a
five-phase cycle over the hip-shoulder separation metric::

    IDLE -> DOWN -> RISING_TO_UP -> UP -> DESCENDING_TO_DOWN -> DOWN (+1)

Directional phases are only entered once the metric leaves the hysteresis
band around ``rest_threshold``; they complete when the metric crosses
``rest_threshold`` itself. A repetition is counted when the subject is back
in the lying position, not when they reach the top.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum

from situpcounter.config import CounterConfig, build_counter_config
from situpcounter.landmarks.sample import LandmarkSample

logger = logging.getLogger(__name__)

METRIC_LIMIT = 1.0


class Phase(str, Enum):
    IDLE = "IDLE"
    DOWN = "DOWN"
    RISING_TO_UP = "RISING_TO_UP"
    UP = "UP"
    DESCENDING_TO_DOWN = "DESCENDING_TO_DOWN"


@dataclass(frozen=True)
class CounterSnapshot:
    count: int
    phase: Phase
    paused: bool

    def as_dict(self) -> dict[str, object]:
        return {"count": self.count, "phase": self.phase.value, "paused": self.paused}


class RepetitionCounter:
    """Count sit-ups from a stream of ``LandmarkSample`` values.

    All public methods share one lock, so ``pause``/``resume``/``reset`` and
    the getters may run on a UI thread while a single worker calls
    ``process``. Concurrent ``process`` calls from several threads are not
    meaningful: callers deliver frames in order from one context.
    """

    def __init__(
        self,
        config: CounterConfig | None = None,
        *,
        rest_threshold: float | None = None,
        hysteresis: float | None = None,
    ) -> None:
        if config is None:
            config = build_counter_config(rest_threshold=rest_threshold, hysteresis=hysteresis)
        elif rest_threshold is not None or hysteresis is not None:
            raise TypeError("Pass either config or threshold keywords, not both")
        self._config = config
        self._lock = threading.Lock()
        self._phase = Phase.IDLE
        self._count = 0
        self._paused = False

    @property
    def config(self) -> CounterConfig:
        return self._config

    @property
    def count(self) -> int:
        return self.get_count()

    @property
    def phase(self) -> Phase:
        return self.get_phase()

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._paused

    def get_count(self) -> int:
        with self._lock:
            return self._count

    def get_phase(self) -> Phase:
        with self._lock:
            return self._phase

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(count=self._count, phase=self._phase, paused=self._paused)

    def process(self, sample: LandmarkSample | None) -> int:
        """Advance the machine with one frame and return the current count.

        ``None`` or a sample with any landmark absent leaves the state as it is.
        """
        metric = sample.metric if sample is not None else None
        return self.process_metric(metric)

    def process_metric(self, metric: float | None) -> int:
        with self._lock:
            if metric is None or self._paused:
                return self._count
            if not math.isfinite(metric) or abs(metric) > METRIC_LIMIT:
                logger.debug("Ignoring out-of-range metric %r", metric)
                return self._count
            self._advance(metric)
            return self._count

    def reset(self) -> None:
        with self._lock:
            self._phase = Phase.IDLE
            self._count = 0
            self._paused = False
        logger.debug("Counter reset")

    def pause(self) -> None:
        with self._lock:
            self._paused = True

    def resume(self) -> None:
        with self._lock:
            self._paused = False

    def _advance(self, metric: float) -> None:
        threshold = self._config.rest_threshold
        previous = self._phase
        next_phase = previous

        if previous is Phase.IDLE:
            next_phase = Phase.DOWN if metric > threshold else Phase.UP
        elif previous is Phase.DOWN:
            if metric < self._config.lower_bound:
                next_phase = Phase.RISING_TO_UP
        elif previous is Phase.RISING_TO_UP:
            if metric < threshold:
                next_phase = Phase.UP
        elif previous is Phase.UP:
            if metric > self._config.upper_bound:
                next_phase = Phase.DESCENDING_TO_DOWN
        elif previous is Phase.DESCENDING_TO_DOWN:
            if metric > threshold:
                next_phase = Phase.DOWN
                self._count += 1
                logger.info("Repetition %d completed", self._count)

        if next_phase is not previous:
            logger.debug("Phase %s -> %s (metric=%.4f)", previous.value, next_phase.value, metric)
            self._phase = next_phase
