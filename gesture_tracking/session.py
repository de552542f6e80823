"""
Session-level aggregation of stabilized gestures and frame timings.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from .config import SESSION_CONFIG
from .storage import GestureHistoryStore, StoredGesture
from .types import DetectedGesture, GestureType

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    """Running totals of one session."""
    total_gestures: int = 0
    gestures_by_type: Dict[GestureType, int] = field(default_factory=dict)
    average_confidence: float = 0.0
    frames_processed: int = 0

    def add(self, confidence: float, gesture: GestureType):
        self.total_gestures += 1
        self.gestures_by_type[gesture] = self.gestures_by_type.get(gesture, 0) + 1
        n = self.total_gestures
        # Incremental, so it stays correct when the history is trimmed
        self.average_confidence = (self.average_confidence * (n - 1) + confidence) / n


@dataclass
class PerformanceMetrics:
    average_fps: float = 0.0
    average_processing_time_ms: float = 0.0
    frames_processed: int = 0
    gestures_detected: int = 0


class SessionAggregator:
    """
    Collects stabilized gesture events of one session.

    Keeps two histories with different retention: a short in-memory list of
    recent gestures (newest first) for live display, and the persisted
    history of the optional store for analytics export.
    """

    def __init__(self,
                 store: Optional[GestureHistoryStore] = None,
                 session_id: Optional[str] = None,
                 recent_limit: int = SESSION_CONFIG['recent_limit'],
                 metrics_window: int = SESSION_CONFIG['metrics_window']):
        self.store = store
        if session_id is None and store is not None:
            session_id = store.get_or_create_session_id()
        self.session_id = session_id
        self.started_at = time.time()

        self.recent: Deque[DetectedGesture] = deque(maxlen=recent_limit)
        self.stats = SessionStats()
        self._fps_history: Deque[float] = deque(maxlen=metrics_window)
        self._processing_history: Deque[float] = deque(maxlen=metrics_window)
        self._last_frame_time: Optional[float] = None

    def add_gesture(self, gesture: DetectedGesture):
        """Record one stability transition."""
        self.recent.appendleft(gesture)
        self.stats.add(gesture.confidence, gesture.gesture)

        if self.store is not None:
            stored = StoredGesture(
                type=gesture.gesture.value,
                confidence=gesture.confidence,
                timestamp=int(gesture.timestamp * 1000),
                session_id=self.session_id,
            )
            self.store.save_gesture(stored)
            self.store.update_analytics(stored)

    def record_frame(self, timestamp: float, processing_time_ms: float):
        """Record timing of one processed frame (``timestamp`` in seconds)."""
        self.stats.frames_processed += 1
        self._processing_history.append(processing_time_ms)
        if self._last_frame_time is not None:
            elapsed = timestamp - self._last_frame_time
            if elapsed > 0:
                self._fps_history.append(1.0 / elapsed)
        self._last_frame_time = timestamp

    def recent_gestures(self) -> List[DetectedGesture]:
        return list(self.recent)

    def metrics(self) -> PerformanceMetrics:
        fps = list(self._fps_history)
        times = list(self._processing_history)
        return PerformanceMetrics(
            average_fps=sum(fps) / len(fps) if fps else 0.0,
            average_processing_time_ms=sum(times) / len(times) if times else 0.0,
            frames_processed=self.stats.frames_processed,
            gestures_detected=self.stats.total_gestures,
        )

    def reset(self):
        """
        Clear recent history, counters and timings.

        The persisted history and long-term analytics are left alone; use
        ``store.clear_all()`` for that.
        """
        self.recent.clear()
        self.stats = SessionStats()
        self._fps_history.clear()
        self._processing_history.clear()
        self._last_frame_time = None

    def end_session(self):
        """Add this session's runtime to the long-term analytics."""
        if self.store is None:
            return
        runtime = time.time() - self.started_at
        self.store.record_session(runtime)
        logger.info("Session %s ended after %.1fs with %d gestures",
                    self.session_id, runtime, self.stats.total_gestures)
