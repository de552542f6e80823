"""
Camera and video-file front end for the gesture tracking pipeline.
"""

import logging
import time

import cv2
import numpy as np
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import CAMERA_CONFIG, DISPLAY_CONFIG
from .errors import PermissionDenied, VideoSourceError
from .gesture_classifier import get_gesture_label
from .hand_tracker import HandTracker
from .pipeline import GestureCallback, GestureSession
from .types import FrameAnalysis, GestureType

logger = logging.getLogger(__name__)


class GestureInterface:
    """Feeds frames from a camera or video file through a GestureSession."""

    def __init__(self,
                 source: Union[int, str] = CAMERA_CONFIG['default_camera_index'],
                 frame_width: int = CAMERA_CONFIG['default_frame_width'],
                 frame_height: int = CAMERA_CONFIG['default_frame_height'],
                 session: Optional[GestureSession] = None,
                 hand_tracker: Optional[HandTracker] = None):
        """
        Initialize the interface.

        Args:
            source: Camera device index, or path of a video file
            frame_width: Camera frame width
            frame_height: Camera frame height
            session: Gesture session receiving the detected hands
            hand_tracker: Landmark model adapter, created on first use if omitted
        """
        self.source = source
        self.frame_width = frame_width
        self.frame_height = frame_height

        self.session = session or GestureSession()
        self.hand_tracker = hand_tracker

        self.cap = None
        self.is_running = False

        self.show_landmarks = DISPLAY_CONFIG['show_landmarks']
        self.show_gesture_info = DISPLAY_CONFIG['show_gesture_info']
        self.show_performance = DISPLAY_CONFIG['show_performance']
        self.flip_horizontal = CAMERA_CONFIG['flip_horizontal'] and self.is_camera

    @property
    def is_camera(self) -> bool:
        return isinstance(self.source, int)

    def start(self):
        """
        Open the frame source.

        Raises:
            PermissionDenied: if the camera cannot be opened
            VideoSourceError: if the video file cannot be opened
        """
        if self.hand_tracker is None:
            self.hand_tracker = HandTracker()

        self.cap = cv2.VideoCapture(self.source)
        if self.is_camera:
            self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.frame_width)
            self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.frame_height)

        if not self.cap.isOpened():
            self.cap.release()
            self.cap = None
            if self.is_camera:
                raise PermissionDenied(f"Cannot open camera {self.source}")
            raise VideoSourceError(f"Cannot open video {self.source}")

        self.is_running = True
        logger.info("Started frame source %s", self.source)

    def stop(self):
        """
        Stop reading frames.

        Stabilization state and session counters are kept, so a later
        ``start()`` resumes where this left off.
        """
        self.is_running = False
        if self.cap:
            self.cap.release()
            self.cap = None
            logger.info("Stopped frame source %s", self.source)

    def register_gesture_callback(self, gesture_type: Optional[GestureType], callback: GestureCallback):
        """
        Register a callback function for a specific gesture.

        Args:
            gesture_type: The gesture type to respond to (None for any)
            callback: Function to call when the gesture becomes stable
        """
        self.session.register_gesture_callback(gesture_type, callback)

    def process_frame(self, frame: np.ndarray) -> Tuple[np.ndarray, Optional[FrameAnalysis]]:
        """
        Process a single frame for gesture recognition.

        Args:
            frame: Input frame (BGR)

        Returns:
            Tuple of (processed_frame, analysis); analysis is None when the
            frame was dropped
        """
        if self.hand_tracker is None:
            self.hand_tracker = HandTracker()

        annotated_frame, hands = self.hand_tracker.detect_hands(frame, draw=self.show_landmarks)
        analysis = self.session.process_hands(hands, self._frame_timestamp())

        if analysis is not None and self.show_gesture_info:
            annotated_frame = self._add_gesture_overlay(annotated_frame, analysis)

        return annotated_frame, analysis

    def _frame_timestamp(self) -> Optional[float]:
        """Media position in seconds for video files; None lets cameras use wall-clock time."""
        if self.is_camera or self.cap is None:
            return None
        return self.cap.get(cv2.CAP_PROP_POS_MSEC) / 1000.0

    def frames(self):
        """Yield ``(processed_frame, analysis)`` until the source ends or ``stop()`` is called."""
        if not self.is_running:
            self.start()

        while self.is_running:
            ret, frame = self.cap.read()
            if not ret:
                logger.info("Frame source %s ended", self.source)
                break

            if self.flip_horizontal:
                frame = cv2.flip(frame, 1)

            yield self.process_frame(frame)

        self.stop()

    def run_realtime(self, window_name: str = "Gesture Tracking"):
        """
        Run real-time gesture recognition with a display window.

        Args:
            window_name: Name of the display window
        """
        print("Starting gesture recognition. Press 'q' to quit, 'r' to reset.")

        try:
            for processed_frame, _ in self.frames():
                cv2.imshow(window_name, processed_frame)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                if key == ord('r'):
                    self.session.reset()

        except KeyboardInterrupt:
            print("Interrupted by user")
        finally:
            self.stop()
            cv2.destroyAllWindows()

    def _add_gesture_overlay(self, frame: np.ndarray, analysis: FrameAnalysis) -> np.ndarray:
        """
        Add gesture information overlay to the frame.

        Args:
            frame: Input frame
            analysis: Analysis of the frame

        Returns:
            Frame with overlay
        """
        overlay_frame = frame.copy()
        text_color = DISPLAY_CONFIG['overlay_color']
        scale = DISPLAY_CONFIG['text_scale']
        thickness = DISPLAY_CONFIG['text_thickness']

        cv2.rectangle(overlay_frame, (10, 10), (400, 120), DISPLAY_CONFIG['overlay_background'], -1)
        cv2.rectangle(overlay_frame, (10, 10), (400, 120), text_color, 2)

        current = analysis.current_gesture()
        gesture_name = get_gesture_label(current.gesture) if current else "None"
        confidence = current.confidence if current else 0.0

        text_lines = [
            f"Gesture: {gesture_name}" + (f" ({current.hand})" if current else ""),
            f"Confidence: {confidence:.2f}",
            f"Hands: {analysis.hand_count}",
        ]
        if self.show_performance:
            metrics = self.session.metrics()
            text_lines.append(f"FPS: {metrics.average_fps:.1f}  "
                              f"Proc: {metrics.average_processing_time_ms:.1f}ms")

        for i, line in enumerate(text_lines):
            y_pos = 30 + i * 20
            cv2.putText(overlay_frame, line, (15, y_pos),
                        cv2.FONT_HERSHEY_SIMPLEX, scale, text_color, thickness)

        if confidence > 0:
            bar_width = int(300 * confidence)
            if confidence > DISPLAY_CONFIG['confidence_high_threshold']:
                bar_color = DISPLAY_CONFIG['confidence_high_color']
            else:
                bar_color = DISPLAY_CONFIG['confidence_low_color']
            cv2.rectangle(overlay_frame, (15, 105), (15 + bar_width, 112), bar_color, -1)
            cv2.rectangle(overlay_frame, (15, 105), (315, 112), text_color, 1)

        return overlay_frame

    def set_display_options(self, show_landmarks: bool = True, show_gesture_info: bool = True,
                            show_performance: bool = True):
        """Configure display options."""
        self.show_landmarks = show_landmarks
        self.show_gesture_info = show_gesture_info
        self.show_performance = show_performance

    def capture_gesture_data(self, duration_seconds: float = 5) -> List[Dict[str, Any]]:
        """
        Capture stabilized gesture events for a specified duration.

        Args:
            duration_seconds: Duration to capture data

        Returns:
            List of ``{'timestamp', 'analysis'}`` records, one per processed frame
        """
        start_time = time.time()
        first_timestamp = None
        gesture_data = []

        for _, analysis in self.frames():
            if analysis is not None:
                if first_timestamp is None:
                    first_timestamp = analysis.timestamp
                gesture_data.append({
                    'timestamp': analysis.timestamp - first_timestamp,
                    'analysis': analysis
                })
            if time.time() - start_time >= duration_seconds:
                break

        self.stop()
        return gesture_data

    def reset(self):
        """Clear stabilization state and session statistics."""
        self.session.reset()

    def cleanup(self):
        """Clean up resources."""
        self.stop()
        if self.hand_tracker:
            self.hand_tracker.close()
            self.hand_tracker = None
