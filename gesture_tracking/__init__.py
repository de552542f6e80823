"""
Gesture Tracking

Classifies MediaPipe hand landmarks into static gestures and stabilizes the
per-frame results over time with a sliding-window majority vote.
"""

from .types import (
    ClassificationResult,
    DetectedGesture,
    FrameAnalysis,
    GestureType,
    HandFrame,
    LandmarkPoint,
)
from .gesture_classifier import GestureClassifier, classify_gesture
from .stabilizer import GestureStabilizer, StabilizationState, stabilize
from .session import SessionAggregator, SessionStats, PerformanceMetrics
from .storage import GestureHistoryStore
from .pipeline import GestureSession
from .errors import GestureTrackingError, ModelUnavailable, PermissionDenied, VideoSourceError

__version__ = "1.0.0"
__all__ = [
    "ClassificationResult",
    "DetectedGesture",
    "FrameAnalysis",
    "GestureType",
    "HandFrame",
    "LandmarkPoint",
    "GestureClassifier",
    "classify_gesture",
    "GestureStabilizer",
    "StabilizationState",
    "stabilize",
    "SessionAggregator",
    "SessionStats",
    "PerformanceMetrics",
    "GestureHistoryStore",
    "GestureSession",
    "GestureTrackingError",
    "ModelUnavailable",
    "PermissionDenied",
    "VideoSourceError",
]
