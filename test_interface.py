"""
Tests for the frame-source front end, with the capture and landmark model
replaced by in-memory stand-ins.
"""

import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")

import demo
from gesture_tracking import DetectedGesture, GestureSession, GestureType
from gesture_tracking.gesture_interface import GestureInterface


class StaticTracker:
    """Reports the same hands for every frame."""

    def __init__(self, hands):
        self.hands = hands

    def detect_hands(self, frame, draw=True):
        return frame, list(self.hands)


class RecordedVideo:
    """Capture of a fixed number of frames at a constant frame rate."""

    def __init__(self, frame_count, fps=20.0):
        self.frame_count = frame_count
        self.fps = fps
        self.position = 0
        self.released = False

    def read(self):
        if self.position >= self.frame_count:
            return False, None
        self.position += 1
        return True, np.zeros((4, 4, 3), dtype=np.uint8)

    def get(self, prop):
        if prop == cv2.CAP_PROP_POS_MSEC:
            return (self.position - 1) * 1000.0 / self.fps
        return 0.0

    def release(self):
        self.released = True


def video_interface(hands, frame_count):
    interface = GestureInterface(source='clip.mp4', session=GestureSession(),
                                 hand_tracker=StaticTracker(hands))
    interface.set_display_options(show_landmarks=False, show_gesture_info=False)
    interface.cap = RecordedVideo(frame_count)
    interface.is_running = True
    return interface


def test_video_frames_use_media_time(hand_frame):
    interface = video_interface([hand_frame('fist')], 6)
    capture = interface.cap
    analyses = [analysis for _, analysis in interface.frames()]

    assert [a.timestamp for a in analyses] == pytest.approx([0.0, 0.05, 0.1, 0.15, 0.2, 0.25])
    event = analyses[4].gestures[0]
    assert event.gesture is GestureType.FIST
    assert event.timestamp == pytest.approx(0.2)
    assert capture.released
    assert interface.cap is None


def test_camera_frames_use_wall_clock(hand_frame):
    interface = GestureInterface(source=0, session=GestureSession(),
                                 hand_tracker=StaticTracker([hand_frame('peace')]))
    interface.set_display_options(show_landmarks=False, show_gesture_info=False)
    interface.cap = RecordedVideo(1)

    _, analysis = interface.process_frame(np.zeros((4, 4, 3), dtype=np.uint8))
    assert analysis.timestamp > 1e9


def test_gesture_printout_includes_description(capsys):
    demo.on_gesture(DetectedGesture(GestureType.FIST, 0.93, 'Left', 1.0))
    out = capsys.readouterr().out
    assert out.startswith("[Left] Fist (confidence: 0.93)")
    assert "Grab or power gesture" in out
