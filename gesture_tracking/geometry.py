"""
Geometry helpers over the 21 MediaPipe hand landmarks.

All tests are relative (ratios of distances), so they hold regardless of
how far the hand is from the camera or what resolution the frame has.
"""

import numpy as np
from typing import Any, Dict, Sequence

# MediaPipe hand landmark indices
WRIST = 0
THUMB_MCP = 2
THUMB_IP = 3
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_TIP = 12
RING_PIP = 14
RING_TIP = 16
PINKY_PIP = 18
PINKY_TIP = 20

# (tip, pip) pairs for the four long fingers
FINGERS = {
    'index': (INDEX_TIP, INDEX_PIP),
    'middle': (MIDDLE_TIP, MIDDLE_PIP),
    'ring': (RING_TIP, RING_PIP),
    'pinky': (PINKY_TIP, PINKY_PIP),
}

FINGER_EXTENSION_RATIO = 1.1
THUMB_EXTENSION_RATIO = 0.8


def point_to_array(point: Any) -> np.ndarray:
    """
    Convert a landmark into a (3,) float array.

    Accepts LandmarkPoint / MediaPipe landmarks (``.x .y .z`` attributes),
    ``{'x', 'y', 'z'}`` dictionaries and plain ``(x, y[, z])`` sequences.
    A missing z coordinate is treated as 0.
    """
    if isinstance(point, dict):
        return np.array([point['x'], point['y'], point.get('z', 0.0) or 0.0], dtype=float)
    if hasattr(point, 'x'):
        return np.array([point.x, point.y, getattr(point, 'z', 0.0) or 0.0], dtype=float)
    values = [float(v) for v in point]
    if len(values) == 2:
        values.append(0.0)
    return np.array(values[:3], dtype=float)


def landmarks_to_array(landmarks: Sequence[Any]) -> np.ndarray:
    """Convert a landmark sequence into an (N, 3) array."""
    if isinstance(landmarks, np.ndarray):
        arr = np.asarray(landmarks, dtype=float)
        if arr.ndim == 2 and arr.shape[1] == 2:
            arr = np.hstack([arr, np.zeros((arr.shape[0], 1))])
        return arr
    if len(landmarks) == 0:
        return np.zeros((0, 3), dtype=float)
    return np.vstack([point_to_array(p) for p in landmarks])


def distance(a: Any, b: Any) -> float:
    """Euclidean distance between two landmarks in 3D."""
    return float(np.linalg.norm(point_to_array(a) - point_to_array(b)))


def is_finger_extended(landmarks: Sequence[Any], tip: int, pip: int, wrist: int = WRIST) -> bool:
    """
    Check whether a long finger is extended.

    The tip must be farther from the wrist than the PIP joint by more
    than 10%.
    """
    tip_to_wrist = distance(landmarks[tip], landmarks[wrist])
    pip_to_wrist = distance(landmarks[pip], landmarks[wrist])
    return tip_to_wrist > pip_to_wrist * FINGER_EXTENSION_RATIO


def is_thumb_extended(landmarks: Sequence[Any]) -> bool:
    """
    Check whether the thumb is extended.

    The thumb swings across the palm, so it is measured against the index
    MCP joint instead of the wrist.
    """
    index_mcp = landmarks[INDEX_MCP]
    tip_to_index = distance(landmarks[THUMB_TIP], index_mcp)
    mcp_to_index = distance(landmarks[THUMB_MCP], index_mcp)
    return tip_to_index > mcp_to_index * THUMB_EXTENSION_RATIO


def finger_states(landmarks: Sequence[Any]) -> Dict[str, bool]:
    """Extension flags for all five fingers, keyed by finger name."""
    states = {'thumb': is_thumb_extended(landmarks)}
    for name, (tip, pip) in FINGERS.items():
        states[name] = is_finger_extended(landmarks, tip, pip, WRIST)
    return states


def hand_size(landmarks: Sequence[Any]) -> float:
    """Wrist to middle-finger MCP distance, used to normalize thresholds."""
    return distance(landmarks[WRIST], landmarks[MIDDLE_MCP])
