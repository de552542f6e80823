#!/usr/bin/env python3
"""
Basic smoke tests: the package imports and a synthetic hand flows through
classification, stabilization and aggregation.
"""

import importlib
import os
import sys

# Add the current directory to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import gesture_tracking
from gesture_tracking import GestureSession, GestureType, HandFrame, LandmarkPoint, classify_gesture


def test_package_exports():
    """Everything listed in __all__ is importable."""
    for name in gesture_tracking.__all__:
        assert hasattr(gesture_tracking, name), name


def test_dependencies():
    """Runtime dependencies of the core are available."""
    for module in ('numpy',):
        assert importlib.import_module(module)


def test_gesture_classifier_with_mock_data():
    """A flat hand of 21 identical points is not a recognizable gesture."""
    mock_landmarks = [LandmarkPoint(0.5, 0.5, 0.0) for _ in range(21)]
    result = classify_gesture(mock_landmarks)
    assert result.gesture in GestureType
    assert 0.0 <= result.confidence <= 1.0


def test_session_with_mock_frames():
    """Frames without hands never produce gestures."""
    session = GestureSession()
    for i in range(20):
        analysis = session.process_hands([], float(i))
        assert analysis.gestures == []
    assert session.metrics().frames_processed == 20


def test_incomplete_hand_is_ignored():
    session = GestureSession()
    short_hand = HandFrame([LandmarkPoint(0.5, 0.5)] * 5, 'Left', 0.9)
    for i in range(10):
        session.process_hands([short_hand], float(i))
    assert session.stabilizer.buffer('Left') == []
