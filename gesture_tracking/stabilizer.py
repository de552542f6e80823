"""
Temporal stabilization of per-frame gesture classifications.

Each hand track keeps a sliding window of its last raw (non-unknown)
classifications. A gesture becomes the track's locked gesture once it holds
a majority of at least ``vote_threshold`` entries in the window, and the
lock is dropped only after ``no_hand_threshold`` consecutive frames without
that hand.
"""

import logging
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from .config import STABILIZER_CONFIG
from .types import ClassificationResult, DetectedGesture, GestureType

logger = logging.getLogger(__name__)

WINDOW_SIZE = STABILIZER_CONFIG['window_size']
VOTE_THRESHOLD = STABILIZER_CONFIG['vote_threshold']
NO_HAND_THRESHOLD = STABILIZER_CONFIG['no_hand_threshold']
CONFIDENCE_CAP = STABILIZER_CONFIG['confidence_cap']
CONFIDENCE_BOOST = STABILIZER_CONFIG['confidence_boost']


def majority_vote(buffer: Iterable[GestureType]) -> Tuple[Optional[GestureType], int]:
    """
    Most common gesture in the buffer and its count.

    Ties go to the gesture that appears first in the buffer.
    """
    counts = Counter(buffer)
    if not counts:
        return None, 0
    # most_common() is a stable sort, so first-seen wins on equal counts
    gesture, count = counts.most_common(1)[0]
    return gesture, count


def boosted_confidence(raw_confidence: float, votes: int, window_size: int = WINDOW_SIZE) -> float:
    """Raw confidence plus a bonus for sustained agreement, capped."""
    return min(CONFIDENCE_CAP, raw_confidence + (votes / window_size) * CONFIDENCE_BOOST)


@dataclass
class HandTrack:
    """Stabilization state of one hand (keyed by handedness)."""
    buffer: Deque[GestureType] = field(default_factory=lambda: deque(maxlen=WINDOW_SIZE))
    locked: Optional[GestureType] = None
    current: Optional[DetectedGesture] = None
    missing_frames: int = 0

    def clear(self):
        self.buffer.clear()
        self.locked = None
        self.current = None


@dataclass
class StabilizationState:
    """All stabilization state of one tracking session."""
    tracks: Dict[str, HandTrack] = field(default_factory=dict)
    no_hand_count: int = 0

    def track(self, hand: str, window_size: int = WINDOW_SIZE) -> HandTrack:
        if hand not in self.tracks:
            self.tracks[hand] = HandTrack(buffer=deque(maxlen=window_size))
        return self.tracks[hand]

    def current_gestures(self) -> Dict[str, DetectedGesture]:
        return {hand: track.current for hand, track in self.tracks.items() if track.current is not None}


@dataclass
class StabilizerUpdate:
    """What changed during one stabilization step."""
    events: List[DetectedGesture] = field(default_factory=list)
    cleared: List[str] = field(default_factory=list)
    current: Dict[str, DetectedGesture] = field(default_factory=dict)


class GestureStabilizer:
    """Turns a noisy per-frame classification stream into stable gestures."""

    def __init__(self,
                 window_size: int = WINDOW_SIZE,
                 vote_threshold: int = VOTE_THRESHOLD,
                 no_hand_threshold: int = NO_HAND_THRESHOLD,
                 state: Optional[StabilizationState] = None):
        self.state = state if state is not None else StabilizationState()
        self.window_size = WINDOW_SIZE
        self.vote_threshold = VOTE_THRESHOLD
        self.no_hand_threshold = NO_HAND_THRESHOLD
        self.configure_thresholds(window_size, vote_threshold, no_hand_threshold)

    def configure_thresholds(self,
                             window_size: Optional[int] = None,
                             vote_threshold: Optional[int] = None,
                             no_hand_threshold: Optional[int] = None):
        """
        Change the stabilization thresholds.

        Args:
            window_size: Number of recent classifications kept per hand
            vote_threshold: Votes a gesture needs within the window to lock
            no_hand_threshold: Consecutive frames without a hand before its
                lock is cleared

        Raises:
            ValueError: if a value is not positive or the vote threshold
                exceeds the window size
        """
        window_size = self.window_size if window_size is None else window_size
        vote_threshold = self.vote_threshold if vote_threshold is None else vote_threshold
        no_hand_threshold = self.no_hand_threshold if no_hand_threshold is None else no_hand_threshold

        for name, value in (('window_size', window_size),
                            ('vote_threshold', vote_threshold),
                            ('no_hand_threshold', no_hand_threshold)):
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if vote_threshold > window_size:
            raise ValueError(
                f"vote_threshold ({vote_threshold}) cannot exceed window_size ({window_size})")

        if window_size != self.window_size:
            for track in self.state.tracks.values():
                track.buffer = deque(track.buffer, maxlen=window_size)

        self.window_size = window_size
        self.vote_threshold = vote_threshold
        self.no_hand_threshold = no_hand_threshold

    def update(self,
               classified: List[Tuple[str, ClassificationResult]],
               timestamp: float) -> StabilizerUpdate:
        """
        Advance the state by one frame.

        Args:
            classified: ``(handedness, classification)`` for every hand
                detected in the frame; an empty list means no hands
            timestamp: Frame time in seconds

        Returns:
            StabilizerUpdate with transition events and cleared hands
        """
        update = StabilizerUpdate()
        seen = set()

        if classified:
            self.state.no_hand_count = 0
        else:
            self.state.no_hand_count += 1

        for hand, result in classified:
            if hand in seen:
                logger.debug("Ignoring second %s hand in the same frame", hand)
                continue
            seen.add(hand)

            track = self.state.track(hand, self.window_size)
            track.missing_frames = 0
            event = self._vote(track, hand, result, timestamp)
            if event is not None:
                update.events.append(event)

        for hand, track in self.state.tracks.items():
            if hand in seen:
                continue
            track.missing_frames += 1
            if track.missing_frames >= self.no_hand_threshold and (track.locked is not None or track.buffer):
                logger.info("%s hand lost for %d frames, clearing %s",
                            hand, track.missing_frames,
                            track.locked.value if track.locked else "buffer")
                track.clear()
                update.cleared.append(hand)

        update.current = self.state.current_gestures()
        return update

    def _vote(self,
              track: HandTrack,
              hand: str,
              result: ClassificationResult,
              timestamp: float) -> Optional[DetectedGesture]:
        if result.gesture is GestureType.UNKNOWN:
            return None

        track.buffer.append(result.gesture)
        gesture, votes = majority_vote(track.buffer)
        if votes < self.vote_threshold:
            return None

        detected = DetectedGesture(
            gesture=gesture,
            confidence=boosted_confidence(result.confidence, votes, self.window_size),
            hand=hand,
            timestamp=timestamp,
        )
        track.current = detected

        if gesture is track.locked:
            return None

        logger.info("%s hand gesture: %s -> %s (%d/%d votes)",
                    hand, track.locked.value if track.locked else "none",
                    gesture.value, votes, len(track.buffer))
        track.locked = gesture
        return detected

    def locked_gesture(self, hand: str) -> Optional[GestureType]:
        track = self.state.tracks.get(hand)
        return track.locked if track else None

    def buffer(self, hand: str) -> List[GestureType]:
        track = self.state.tracks.get(hand)
        return list(track.buffer) if track else []

    def reset(self):
        """Drop all tracks and counters, keeping the same state object."""
        self.state.tracks.clear()
        self.state.no_hand_count = 0


def stabilize(state: StabilizationState,
              classified: List[Tuple[str, ClassificationResult]],
              timestamp: float) -> StabilizerUpdate:
    """Advance ``state`` by one frame using the default thresholds."""
    return GestureStabilizer(state=state).update(classified, timestamp)
