"""
Data types shared by the classification, stabilization and session layers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence


HAND_LANDMARK_COUNT = 21


class GestureType(Enum):
    """Enumeration of supported gesture types."""
    UNKNOWN = "unknown"
    OPEN_PALM = "open_palm"
    FIST = "fist"
    PINCH = "pinch"
    POINTING = "pointing"
    THUMBS_UP = "thumbs_up"
    THUMBS_DOWN = "thumbs_down"
    PEACE = "peace"
    OK_SIGN = "ok_sign"


@dataclass(frozen=True)
class LandmarkPoint:
    """One normalized hand landmark (x, y in [0, 1], z relative depth)."""
    x: float
    y: float
    z: float = 0.0


@dataclass
class HandFrame:
    """The landmarks and handedness of one hand detected in one frame."""
    landmarks: Sequence[LandmarkPoint]
    handedness: str = "Right"
    handedness_confidence: float = 1.0


@dataclass(frozen=True)
class ClassificationResult:
    """Raw per-frame classification of a single hand."""
    gesture: GestureType
    confidence: float


@dataclass(frozen=True)
class DetectedGesture:
    """A stabilized gesture, emitted when a hand track changes its lock."""
    gesture: GestureType
    confidence: float
    hand: str
    timestamp: float  # seconds since the epoch


@dataclass
class FrameAnalysis:
    """Everything a single classification pass produced for one frame."""
    frame_number: int
    timestamp: float
    hands: List[HandFrame] = field(default_factory=list)
    gestures: List[DetectedGesture] = field(default_factory=list)
    cleared: List[str] = field(default_factory=list)
    current: Dict[str, DetectedGesture] = field(default_factory=dict)
    processing_time_ms: float = 0.0

    @property
    def hand_count(self) -> int:
        return len(self.hands)

    def current_gesture(self) -> Optional[DetectedGesture]:
        """Most recently refreshed stable gesture across all hands, if any."""
        if not self.current:
            return None
        return max(self.current.values(), key=lambda g: g.timestamp)
