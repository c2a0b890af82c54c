"""Background thread that feeds landmark samples into a ``RepetitionCounter``."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Mapping

from situpcounter.analysis.repetition_counter import CounterSnapshot, RepetitionCounter
from situpcounter.landmarks.provider_base import PoseLandmarkProvider
from situpcounter.landmarks.sample import LandmarkSample, sample_from_landmarks
from situpcounter.pipeline.latest_slot import LatestSlot, SlotClosed

logger = logging.getLogger(__name__)

DEFAULT_JOIN_TIMEOUT = 2.0


class CounterWorker(threading.Thread):
    """Own the counter's input and output for a live session.

    Producers (a capture/detection loop) call ``submit``; only the latest
    pending sample is kept. The worker thread takes it, calls
    ``counter.process`` and publishes the resulting ``CounterSnapshot``.

    Outputs
    -------
    on_update(snapshot)
        Called on the worker thread after each processed sample.
    on_error(exc)
        Called when processing a sample or ``on_update`` raised; the worker
        keeps running.
    output_queue
        Optional bounded queue receiving snapshots; the oldest entry is
        discarded when it is full.
    """

    def __init__(
        self,
        counter: RepetitionCounter,
        *,
        provider: PoseLandmarkProvider | None = None,
        on_update: Callable[[CounterSnapshot], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        output_queue: queue.Queue[CounterSnapshot] | None = None,
        name: str = "counter-worker",
    ) -> None:
        super().__init__(name=name, daemon=True)
        self._counter = counter
        self._provider = provider
        self._on_update = on_update
        self._on_error = on_error
        self._output_queue = output_queue
        self._slot: LatestSlot[LandmarkSample] = LatestSlot()
        self.processed = 0
        self.failed = 0
        self.last_snapshot: CounterSnapshot | None = None

    @property
    def counter(self) -> RepetitionCounter:
        return self._counter

    @property
    def dropped(self) -> int:
        return self._slot.dropped

    # ------------------------------------------------------------------
    def submit(self, sample: LandmarkSample | None) -> bool:
        """Queue one frame's sample; ``None`` stands for "no sample"."""
        if sample is None:
            sample = LandmarkSample.missing()
        return self._slot.put(sample)

    def submit_landmarks(self, landmarks: Mapping[Any, Any] | None) -> bool:
        return self.submit(sample_from_landmarks(landmarks))

    def submit_frame(self, frame: Any) -> bool:
        """Run the configured provider on ``frame`` and queue the result.

        Detection errors are logged and submitted as a missing sample.
        """
        if self._provider is None:
            raise RuntimeError("CounterWorker has no landmark provider configured")
        try:
            landmarks = self._provider.extract(frame)
        except Exception:
            logger.warning("Pose detection failed; frame treated as missing", exc_info=True)
            landmarks = None
        return self.submit_landmarks(landmarks)

    # ------------------------------------------------------------------
    def run(self) -> None:
        logger.debug("%s started", self.name)
        while True:
            try:
                sample = self._slot.get()
            except SlotClosed:
                break
            try:
                self._counter.process(sample)
                self._publish(self._counter.snapshot())
            except Exception as exc:
                logger.exception("Failed to process sample %r", sample)
                self.failed += 1
                self._report(exc)
        logger.debug(
            "%s stopped (processed=%d, dropped=%d)",
            self.name,
            self.processed,
            self._slot.dropped,
        )

    def _publish(self, snapshot: CounterSnapshot) -> None:
        self.processed += 1
        self.last_snapshot = snapshot

        if self._output_queue is not None:
            try:
                self._output_queue.put_nowait(snapshot)
            except queue.Full:
                try:
                    self._output_queue.get_nowait()
                except queue.Empty:
                    pass
                self._output_queue.put_nowait(snapshot)

        if self._on_update is None:
            return
        try:
            self._on_update(snapshot)
        except Exception as exc:
            logger.exception("Snapshot listener failed")
            self._report(exc)

    def _report(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("Error listener failed")

    def stop(self, timeout: float | None = DEFAULT_JOIN_TIMEOUT) -> None:
        """Close the input slot and wait for the thread to finish."""
        self._slot.close()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout)

    def __enter__(self) -> "CounterWorker":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
