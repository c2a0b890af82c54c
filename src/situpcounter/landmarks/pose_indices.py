from __future__ import annotations

from enum import IntEnum
from typing import Any

POSE_LANDMARK_COUNT = 33


class PoseLandmark(IntEnum):
    """BlazePose (MediaPipe Pose / ML Kit) indices used by the counter."""

    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_HIP = 23
    RIGHT_HIP = 24


SHOULDERS = (PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER)
HIPS = (PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP)
REQUIRED_LANDMARKS = SHOULDERS + HIPS

LANDMARK_NAMES = {member: member.name.lower() for member in PoseLandmark}


def key_candidates(landmark: PoseLandmark) -> list[Any]:
    """Keys under which a detector may report ``landmark``.

    IntEnum members hash like their integer value, so the integer key also
    matches mappings keyed by ``PoseLandmark`` members.
    """
    name = LANDMARK_NAMES[landmark]
    return [int(landmark), name, name.upper()]
