from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

Landmarks = Mapping[Any, Any]


class PoseLandmarkProvider(ABC):
    """Interface for frame-level body landmark detection.

    Implementations wrap an external pose model. ``extract`` returns ``None``
    when the frame is unusable, no person is visible or detection failed; the
    caller turns that into the missing sample instead of raising.
    """

    @abstractmethod
    def extract(self, frame: Any) -> Landmarks | None:
        """Return landmarks keyed by body-part identifier for a single frame."""

    def close(self) -> None:
        """Release model resources. Default is a no-op."""
