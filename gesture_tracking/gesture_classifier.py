"""
Gesture classification module for recognizing static hand poses.
"""

from typing import Any, NamedTuple, Sequence

from .geometry import (
    INDEX_MCP,
    INDEX_TIP,
    MIDDLE_TIP,
    THUMB_TIP,
    WRIST,
    distance,
    finger_states,
    hand_size,
    landmarks_to_array,
)
from .types import HAND_LANDMARK_COUNT, ClassificationResult, GestureType

DEFAULT_VARIANT = "default"
EXTENDED_VARIANT = "extended"
VARIANTS = (DEFAULT_VARIANT, EXTENDED_VARIANT)

GESTURE_LABELS = {
    GestureType.UNKNOWN: "Unknown",
    GestureType.OPEN_PALM: "Open Palm",
    GestureType.FIST: "Fist",
    GestureType.PINCH: "Pinch",
    GestureType.POINTING: "Pointing",
    GestureType.THUMBS_UP: "Thumbs Up",
    GestureType.THUMBS_DOWN: "Thumbs Down",
    GestureType.PEACE: "Peace",
    GestureType.OK_SIGN: "OK Sign",
}


class HandPose(NamedTuple):
    """Per-hand measurements every rule of the cascade reads from."""
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool
    extended_count: int
    hand_size: float
    pinch_distance: float
    thumb_tip_y: float
    wrist_y: float
    index_mcp_y: float
    index_middle_distance: float


def measure_pose(landmarks: Sequence[Any]) -> HandPose:
    """Compute finger flags and normalizing distances for a 21-point hand."""
    points = landmarks_to_array(landmarks)
    states = finger_states(points)
    return HandPose(
        thumb=states['thumb'],
        index=states['index'],
        middle=states['middle'],
        ring=states['ring'],
        pinky=states['pinky'],
        extended_count=sum(states.values()),
        hand_size=hand_size(points),
        pinch_distance=distance(points[THUMB_TIP], points[INDEX_TIP]),
        thumb_tip_y=float(points[THUMB_TIP][1]),
        wrist_y=float(points[WRIST][1]),
        index_mcp_y=float(points[INDEX_MCP][1]),
        index_middle_distance=distance(points[INDEX_TIP], points[MIDDLE_TIP]),
    )


def _result(gesture: GestureType, confidence: float) -> ClassificationResult:
    return ClassificationResult(gesture, min(1.0, max(0.0, float(confidence))))


def _classify_default(pose: HandPose) -> ClassificationResult:
    # First matching rule wins; the order is the tie-break policy.
    if (pose.pinch_distance < pose.hand_size * 0.25
            and not pose.middle and not pose.ring and not pose.pinky):
        return _result(GestureType.PINCH, 0.85)

    if pose.thumb and not (pose.index or pose.middle or pose.ring or pose.pinky):
        # Image y grows downward
        if pose.thumb_tip_y < pose.wrist_y:
            return _result(GestureType.THUMBS_UP, 0.88)
        return _result(GestureType.THUMBS_DOWN, 0.88)

    if pose.index and pose.middle and not pose.ring and not pose.pinky:
        return _result(GestureType.PEACE, 0.85)

    if pose.index and not pose.middle and not pose.ring and not pose.pinky:
        return _result(GestureType.POINTING, 0.9)

    if pose.extended_count >= 4:
        return _result(GestureType.OPEN_PALM, 0.9)

    if pose.extended_count <= 1 and not pose.thumb:
        return _result(GestureType.FIST, 0.88)

    if pose.pinch_distance < pose.hand_size * 0.3 and pose.middle and pose.ring:
        return _result(GestureType.OK_SIGN, 0.82)

    return _result(GestureType.UNKNOWN, 0.5)


def _classify_extended(pose: HandPose) -> ClassificationResult:
    if (pose.pinch_distance < pose.hand_size * 0.25
            and not pose.middle and not pose.ring and not pose.pinky):
        return _result(GestureType.PINCH, 0.85)

    # Thumb plus index: judged against the index MCP with a 0.05 dead band,
    # falling through to the later rules inside the band.
    if pose.thumb and pose.index and not pose.middle and not pose.ring and not pose.pinky:
        if pose.thumb_tip_y < pose.index_mcp_y - 0.05:
            return _result(GestureType.THUMBS_UP, 0.9)
        if pose.thumb_tip_y > pose.index_mcp_y + 0.05:
            return _result(GestureType.THUMBS_DOWN, 0.9)

    if pose.thumb and not (pose.index or pose.middle or pose.ring or pose.pinky):
        if pose.thumb_tip_y < pose.wrist_y:
            return _result(GestureType.THUMBS_UP, 0.85)
        return _result(GestureType.THUMBS_DOWN, 0.85)

    if pose.index and pose.middle and not pose.ring and not pose.pinky:
        if pose.index_middle_distance < pose.hand_size * 0.3:
            return _result(GestureType.PEACE, 0.88)
        return _result(GestureType.PEACE, 0.82)

    if pose.index and not pose.middle and not pose.ring and not pose.pinky:
        return _result(GestureType.POINTING, 0.9)

    if pose.extended_count == 5:
        return _result(GestureType.OPEN_PALM, 0.92)

    if pose.extended_count >= 4:
        return _result(GestureType.OPEN_PALM, 0.85)

    if pose.extended_count <= 1 and not pose.thumb:
        return _result(GestureType.FIST, 0.88)

    if pose.pinch_distance < pose.hand_size * 0.3 and pose.index and pose.middle and pose.ring:
        return _result(GestureType.OK_SIGN, 0.85)

    return _result(GestureType.UNKNOWN, 0.5)


_CASCADES = {
    DEFAULT_VARIANT: _classify_default,
    EXTENDED_VARIANT: _classify_extended,
}


def classify_gesture(landmarks: Sequence[Any], variant: str = DEFAULT_VARIANT) -> ClassificationResult:
    """
    Classify a single hand pose.

    Args:
        landmarks: 21 hand landmarks (LandmarkPoint, dicts, tuples or an array)
        variant: rule cascade to use, ``"default"`` or ``"extended"``

    Returns:
        ClassificationResult; ``(UNKNOWN, 0.0)`` when fewer than 21 points
        are given.
    """
    if variant not in _CASCADES:
        raise ValueError(f"Unknown classifier variant: {variant!r}")
    if landmarks is None or len(landmarks) < HAND_LANDMARK_COUNT:
        return ClassificationResult(GestureType.UNKNOWN, 0.0)
    return _CASCADES[variant](measure_pose(landmarks))


class GestureClassifier:
    """Classifier for the static hand gestures of the tracking pipeline."""

    def __init__(self, variant: str = DEFAULT_VARIANT):
        """
        Initialize the gesture classifier.

        Args:
            variant: Rule cascade to use (see ``VARIANTS``)
        """
        if variant not in VARIANTS:
            raise ValueError(f"Unknown classifier variant: {variant!r}")
        self.variant = variant

    def classify_gesture(self, landmarks: Sequence[Any]) -> ClassificationResult:
        """Classify a gesture based on hand landmarks."""
        return classify_gesture(landmarks, self.variant)


def get_gesture_label(gesture_type: GestureType) -> str:
    """Short display name of a gesture."""
    return GESTURE_LABELS.get(gesture_type, "Unknown")


def get_gesture_description(gesture_type: GestureType) -> str:
    """
    Get a human-readable description of the gesture.

    Args:
        gesture_type: The gesture type enum

    Returns:
        Description string
    """
    descriptions = {
        GestureType.UNKNOWN: "No gesture detected",
        GestureType.POINTING: "Pointing - Use to select or indicate direction",
        GestureType.OPEN_PALM: "Open palm - Stop or show command",
        GestureType.FIST: "Fist - Grab or power gesture",
        GestureType.THUMBS_UP: "Thumbs up - Approval or confirmation",
        GestureType.THUMBS_DOWN: "Thumbs down - Rejection or cancel",
        GestureType.PEACE: "Peace sign - Victory or two items",
        GestureType.OK_SIGN: "OK sign - Confirmation or perfect",
        GestureType.PINCH: "Pinch - Precise selection or zoom",
    }

    return descriptions.get(gesture_type, "Unknown gesture")
