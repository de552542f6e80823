"""
Per-frame classification, stabilization and aggregation.

A GestureSession owns all mutable state of one frame source. Sources that
run side by side each need their own session.
"""

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from .config import CLASSIFIER_CONFIG
from .gesture_classifier import GestureClassifier
from .session import PerformanceMetrics, SessionAggregator
from .stabilizer import GestureStabilizer
from .types import DetectedGesture, FrameAnalysis, GestureType, HandFrame

logger = logging.getLogger(__name__)

GestureCallback = Callable[[DetectedGesture], None]


class GestureSession:
    """Runs one classification pass per frame over a stream of detected hands."""

    def __init__(self,
                 classifier: Optional[GestureClassifier] = None,
                 stabilizer: Optional[GestureStabilizer] = None,
                 aggregator: Optional[SessionAggregator] = None):
        self.classifier = classifier or GestureClassifier(CLASSIFIER_CONFIG['variant'])
        self.stabilizer = stabilizer or GestureStabilizer()
        self.aggregator = aggregator or SessionAggregator()

        self.frame_number = 0
        self.last_analysis: Optional[FrameAnalysis] = None

        self._in_flight = threading.Lock()
        self._gesture_callbacks: Dict[Optional[GestureType], List[GestureCallback]] = {}
        self._clear_callbacks: List[Callable[[str], None]] = []

    def register_gesture_callback(self, gesture_type: Optional[GestureType], callback: GestureCallback):
        """
        Register a callback run whenever a hand locks onto a gesture.

        Args:
            gesture_type: The gesture to respond to, or None for every gesture
            callback: Function called with the DetectedGesture
        """
        self._gesture_callbacks.setdefault(gesture_type, []).append(callback)

    def register_clear_callback(self, callback: Callable[[str], None]):
        """Register a callback run with the hand label when a hand's gesture clears."""
        self._clear_callbacks.append(callback)

    def process_hands(self, hands: List[HandFrame], timestamp: Optional[float] = None) -> Optional[FrameAnalysis]:
        """
        Classify and stabilize the hands detected in one frame.

        Args:
            hands: Hands reported by the landmark model for this frame
            timestamp: Frame time in seconds, defaults to now

        Returns:
            FrameAnalysis for the frame, or None when a previous frame is
            still being processed and this one was dropped
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Frame dropped, previous frame still in flight")
            return None
        try:
            analysis = self._process(hands, time.time() if timestamp is None else timestamp)
        finally:
            self._in_flight.release()

        # Listeners run outside the guard so they may call reset()
        for event in analysis.gestures:
            self._notify(event)
        for hand in analysis.cleared:
            for callback in self._clear_callbacks:
                callback(hand)

        return analysis

    def _process(self, hands: List[HandFrame], timestamp: float) -> FrameAnalysis:
        start = time.perf_counter()
        self.frame_number += 1

        classified = [(hand.handedness, self.classifier.classify_gesture(hand.landmarks))
                      for hand in hands]
        update = self.stabilizer.update(classified, timestamp)

        for event in update.events:
            self.aggregator.add_gesture(event)

        processing_time_ms = (time.perf_counter() - start) * 1000.0
        self.aggregator.record_frame(timestamp, processing_time_ms)

        analysis = FrameAnalysis(
            frame_number=self.frame_number,
            timestamp=timestamp,
            hands=list(hands),
            gestures=update.events,
            cleared=update.cleared,
            current=update.current,
            processing_time_ms=processing_time_ms,
        )
        self.last_analysis = analysis
        return analysis

    def _notify(self, event: DetectedGesture):
        for key in (event.gesture, None):
            for callback in self._gesture_callbacks.get(key, []):
                callback(event)

    def current_gesture(self) -> Optional[DetectedGesture]:
        """Latest stable gesture of any hand, if one is locked."""
        if self.last_analysis is None:
            return None
        return self.last_analysis.current_gesture()

    def recent_gestures(self) -> List[DetectedGesture]:
        return self.aggregator.recent_gestures()

    def metrics(self) -> PerformanceMetrics:
        return self.aggregator.metrics()

    def configure_thresholds(self, **thresholds):
        """See GestureStabilizer.configure_thresholds."""
        self.stabilizer.configure_thresholds(**thresholds)

    def reset(self):
        """Clear stabilization state, recent history and counters."""
        with self._in_flight:
            self.stabilizer.reset()
            self.aggregator.reset()
            self.frame_number = 0
            self.last_analysis = None
        logger.info("Gesture session reset")
