"""
Persisted gesture history, long-term analytics and user preferences.

The store is a small key/value document: ``gesture_history``,
``user_preferences``, ``analytics`` and ``session_data``. It lives in a
JSON file, or only in memory when no path is given. Storage failures are
logged and answered with defaults; they never reach the tracking pipeline.
"""

import copy
import json
import logging
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import SESSION_CONFIG

logger = logging.getLogger(__name__)

GESTURE_HISTORY = 'gesture_history'
USER_PREFERENCES = 'user_preferences'
ANALYTICS = 'analytics'
SESSION_DATA = 'session_data'

DEFAULT_PREFERENCES = {
    'showPerformanceHUD': True,
    'showLandmarks': True,
    'cameraIndex': 0,
    'theme': 'dark',
}


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class StoredGesture:
    """One entry of the persisted gesture history."""
    type: str
    confidence: float
    timestamp: int  # milliseconds since the epoch
    session_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'confidence': self.confidence,
            'timestamp': self.timestamp,
            'sessionId': self.session_id,
        }


@dataclass
class AnalyticsData:
    """Long-term totals across every session."""
    total_gestures: int = 0
    gestures_by_type: Dict[str, int] = field(default_factory=dict)
    average_confidence: float = 0.0
    session_count: int = 0
    total_runtime: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Persisted form, keyed the way exported documents are."""
        return {
            'totalGestures': self.total_gestures,
            'gesturesByType': dict(self.gestures_by_type),
            'averageConfidence': self.average_confidence,
            'sessionCount': self.session_count,
            'totalRuntime': self.total_runtime,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyticsData":
        return cls(
            total_gestures=int(data.get('totalGestures', 0)),
            gestures_by_type=dict(data.get('gesturesByType', {})),
            average_confidence=float(data.get('averageConfidence', 0.0)),
            session_count=int(data.get('sessionCount', 0)),
            total_runtime=float(data.get('totalRuntime', 0.0)),
        )


def create_session_id() -> str:
    """Opaque session identifier: ``session_<epoch ms>_<random>``."""
    return f"session_{_now_ms()}_{secrets.token_hex(6)}"


class GestureHistoryStore:
    """Key/value store backing the persisted history and analytics."""

    def __init__(self, path: Optional[Union[str, Path]] = None,
                 history_limit: int = SESSION_CONFIG['history_limit']):
        """
        Args:
            path: JSON file to persist to; ``None`` keeps everything in memory
            history_limit: Most recent history entries to retain
        """
        self.path = Path(path) if path is not None else None
        self.history_limit = history_limit
        self._data: Dict[str, Any] = {}
        self._load()

    def _load(self):
        if self.path is None or not self.path.exists():
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if isinstance(data, dict):
                self._data = data
            else:
                logger.warning("Ignoring malformed history file %s", self.path)
        except (OSError, ValueError):
            logger.exception("Failed to load gesture history from %s", self.path)

    def _get(self, key: str) -> Any:
        return copy.deepcopy(self._data.get(key))

    def _set(self, key: str, value: Any):
        self._data[key] = value
        self._flush()

    def _remove(self, key: str):
        self._data.pop(key, None)
        self._flush()

    def _flush(self):
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(self._data, f, indent=2)
            tmp_path.replace(self.path)
        except OSError:
            logger.exception("Failed to write gesture history to %s", self.path)

    # Gesture history

    def save_gesture(self, gesture: StoredGesture):
        history = self.get_history()
        history.append(gesture.to_dict())
        self._set(GESTURE_HISTORY, history[-self.history_limit:])

    def get_history(self) -> List[Dict[str, Any]]:
        history = self._get(GESTURE_HISTORY)
        return history if isinstance(history, list) else []

    def get_gestures_by_session(self, session_id: str) -> List[Dict[str, Any]]:
        return [g for g in self.get_history() if g.get('sessionId') == session_id]

    def clear_history(self):
        self._remove(GESTURE_HISTORY)

    # Analytics

    def update_analytics(self, gesture: StoredGesture):
        """Fold one gesture into the long-term totals."""
        analytics = self.get_analytics()
        analytics.total_gestures += 1
        by_type = analytics.gestures_by_type
        by_type[gesture.type] = by_type.get(gesture.type, 0) + 1
        n = analytics.total_gestures
        analytics.average_confidence = (analytics.average_confidence * (n - 1) + gesture.confidence) / n
        self._set(ANALYTICS, analytics.to_dict())

    def record_session(self, runtime_seconds: float = 0.0):
        """Count a finished session and its runtime."""
        analytics = self.get_analytics()
        analytics.session_count += 1
        analytics.total_runtime += max(0.0, runtime_seconds)
        self._set(ANALYTICS, analytics.to_dict())

    def get_analytics(self) -> AnalyticsData:
        data = self._get(ANALYTICS)
        if not isinstance(data, dict):
            return AnalyticsData()
        try:
            return AnalyticsData.from_dict(data)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed analytics record")
            return AnalyticsData()

    def clear_analytics(self):
        self._remove(ANALYTICS)

    # Session

    def save_session(self, session_id: str, start_time: Optional[int] = None):
        self._set(SESSION_DATA, {
            'sessionId': session_id,
            'startTime': start_time if start_time is not None else _now_ms(),
            'lastActivity': _now_ms(),
        })

    def get_session(self) -> Optional[Dict[str, Any]]:
        session = self._get(SESSION_DATA)
        return session if isinstance(session, dict) and 'sessionId' in session else None

    def get_or_create_session_id(self) -> str:
        """Resume the stored session, or start and store a new one."""
        session = self.get_session()
        if session:
            return session['sessionId']
        session_id = create_session_id()
        self.save_session(session_id)
        return session_id

    # Preferences

    def get_preferences(self) -> Dict[str, Any]:
        prefs = dict(DEFAULT_PREFERENCES)
        stored = self._get(USER_PREFERENCES)
        if isinstance(stored, dict):
            prefs.update(stored)
        return prefs

    def save_preferences(self, **preferences: Any):
        current = self.get_preferences()
        current.update(preferences)
        self._set(USER_PREFERENCES, current)

    # Bulk operations

    def clear_all(self):
        """Remove history, analytics and session data (preferences stay)."""
        for key in (GESTURE_HISTORY, ANALYTICS, SESSION_DATA):
            self._data.pop(key, None)
        self._flush()

    def export_json(self) -> str:
        return json.dumps({
            'history': self.get_history(),
            'analytics': self.get_analytics().to_dict(),
            'exportedAt': datetime.now(timezone.utc).isoformat(),
        }, indent=2)

    def import_json(self, json_data: str) -> bool:
        """
        Replace history and analytics with a previous export.

        Returns:
            False when the document cannot be parsed
        """
        try:
            data = json.loads(json_data)
        except (TypeError, ValueError):
            logger.warning("Failed to import gesture history: invalid JSON")
            return False
        if not isinstance(data, dict):
            logger.warning("Failed to import gesture history: expected an object")
            return False

        history = data.get('history')
        if isinstance(history, list):
            self._data[GESTURE_HISTORY] = history[-self.history_limit:]
        analytics = data.get('analytics')
        if isinstance(analytics, dict):
            self._data[ANALYTICS] = analytics
        self._flush()
        return True
