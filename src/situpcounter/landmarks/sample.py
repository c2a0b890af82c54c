from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from situpcounter.landmarks.pose_indices import REQUIRED_LANDMARKS, PoseLandmark, key_candidates

logger = logging.getLogger(__name__)

SAMPLE_FIELDS = ("left_shoulder_y", "right_shoulder_y", "left_hip_y", "right_hip_y")


@dataclass(frozen=True)
class LandmarkSample:
    """Vertical coordinates of the four tracked landmarks for one frame.

    Coordinates are normalized image y values (0 at the top, 1 at the bottom);
    ``None`` marks a landmark the detector did not report for this frame.
    """

    left_shoulder_y: float | None = None
    right_shoulder_y: float | None = None
    left_hip_y: float | None = None
    right_hip_y: float | None = None

    @classmethod
    def missing(cls) -> "LandmarkSample":
        return cls()

    @classmethod
    def from_values(cls, values: Sequence[float | None]) -> "LandmarkSample":
        if len(values) != len(SAMPLE_FIELDS):
            raise ValueError(f"Expected {len(SAMPLE_FIELDS)} values, got {len(values)}")
        return cls(*values)

    def values(self) -> tuple[float | None, ...]:
        return (self.left_shoulder_y, self.right_shoulder_y, self.left_hip_y, self.right_hip_y)

    @property
    def is_complete(self) -> bool:
        return all(
            isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)
            for value in self.values()
        )

    @property
    def metric(self) -> float | None:
        """Mean hip y minus mean shoulder y, or ``None`` when any landmark is absent."""
        if not self.is_complete:
            return None
        coords = np.asarray(self.values(), dtype=np.float64)
        shoulder_y = coords[:2].mean()
        hip_y = coords[2:].mean()
        return float(hip_y - shoulder_y)


def _coerce_y(value: Any, min_visibility: float | None) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if min_visibility is not None:
        visibility = getattr(value, "visibility", None)
        if visibility is None:
            visibility = getattr(value, "in_frame_likelihood", None)
        try:
            if visibility is not None and float(visibility) < min_visibility:
                return None
        except (TypeError, ValueError):
            return None

    position = getattr(value, "position", None)
    if position is not None and hasattr(position, "y"):
        raw = position.y
    elif hasattr(value, "y"):
        raw = value.y
    elif isinstance(value, numbers.Real):
        raw = value
    elif isinstance(value, (Sequence, np.ndarray)) and not isinstance(value, (str, bytes)):
        if len(value) < 2:
            return None
        raw = value[1]
    else:
        return None

    try:
        y = float(raw)
    except (TypeError, ValueError):
        return None
    return y if math.isfinite(y) else None


def _lookup(landmarks: Mapping[Any, Any], landmark: PoseLandmark) -> Any:
    for key in key_candidates(landmark):
        if key in landmarks:
            return landmarks[key]
    return None


def sample_from_landmarks(
    landmarks: Mapping[Any, Any] | None,
    *,
    min_visibility: float | None = None,
) -> LandmarkSample:
    """Pick the shoulder and hip y coordinates out of a detector landmark set.

    ``landmarks`` may be keyed by BlazePose index, ``PoseLandmark`` member or
    lowercase name. Values may be bare y floats, ``(x, y[, z])`` sequences or
    landmark objects exposing ``y`` or ``position.y``. Anything that cannot be
    read becomes an absent coordinate; this function never raises on bad data.
    """
    if not landmarks:
        return LandmarkSample.missing()
    values = [_coerce_y(_lookup(landmarks, landmark), min_visibility) for landmark in REQUIRED_LANDMARKS]
    return LandmarkSample(*values)


def _first_person(landmarks: Any) -> Any:
    if isinstance(landmarks, np.ndarray):
        if landmarks.ndim == 3:
            return landmarks[0] if landmarks.shape[0] else None
        return landmarks if landmarks.ndim == 2 else None
    if hasattr(landmarks, "landmark"):
        return landmarks.landmark
    if isinstance(landmarks, Sequence) and landmarks:
        first = landmarks[0]
        if isinstance(first, Sequence) and first and not isinstance(first[0], numbers.Real):
            return first
    return landmarks


def sample_from_pose_result(result: Any, *, min_visibility: float | None = None) -> LandmarkSample:
    """Convert a MediaPipe-style pose result into a sample.

    Accepts a ``PoseLandmarkerResult`` (``pose_landmarks`` is a list per
    person), a legacy ``solutions.pose`` result (``pose_landmarks.landmark``),
    a bare landmark list or a ``(33, 3)`` array. Only the first person is
    tracked. A missing result or an undetected person yields the missing sample.
    """
    if result is None:
        return LandmarkSample.missing()
    landmarks = getattr(result, "pose_landmarks", result)
    if landmarks is None:
        return LandmarkSample.missing()

    person = _first_person(landmarks)
    if person is None or len(person) == 0:
        return LandmarkSample.missing()

    keyed = {int(idx): person[int(idx)] for idx in REQUIRED_LANDMARKS if int(idx) < len(person)}
    if len(keyed) < len(REQUIRED_LANDMARKS):
        logger.debug("Pose result has %d landmarks; required indices are missing", len(person))
    return sample_from_landmarks(keyed, min_visibility=min_visibility)
