"""
Hand tracking module using MediaPipe for real-time hand detection and landmark extraction.
"""

import logging

import cv2
import numpy as np
from typing import Any, List, Tuple

from .config import HAND_TRACKING_CONFIG
from .errors import ModelUnavailable
from .types import HandFrame, LandmarkPoint

logger = logging.getLogger(__name__)


class HandTracker:
    """Real-time hand tracking using MediaPipe."""

    def __init__(self,
                 static_image_mode: bool = HAND_TRACKING_CONFIG['static_image_mode'],
                 max_num_hands: int = HAND_TRACKING_CONFIG['max_num_hands'],
                 model_complexity: int = HAND_TRACKING_CONFIG['model_complexity'],
                 min_detection_confidence: float = HAND_TRACKING_CONFIG['min_detection_confidence'],
                 min_tracking_confidence: float = HAND_TRACKING_CONFIG['min_tracking_confidence']):
        """
        Initialize the hand tracker.

        Args:
            static_image_mode: Whether to treat input as static images
            max_num_hands: Maximum number of hands to detect
            model_complexity: Complexity of the hand landmark model (0-1)
            min_detection_confidence: Minimum confidence for hand detection
            min_tracking_confidence: Minimum confidence for hand tracking

        Raises:
            ModelUnavailable: if MediaPipe Hands cannot be loaded
        """
        try:
            import mediapipe as mp
            self.mp_hands = mp.solutions.hands
            self.mp_drawing = mp.solutions.drawing_utils
            self.mp_drawing_styles = mp.solutions.drawing_styles

            self.hands = self.mp_hands.Hands(
                static_image_mode=static_image_mode,
                max_num_hands=max_num_hands,
                model_complexity=model_complexity,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence
            )
        except (ImportError, AttributeError, RuntimeError) as e:
            raise ModelUnavailable(f"MediaPipe Hands is not available: {e}") from e

        logger.info("MediaPipe Hands initialized (max_num_hands=%d)", max_num_hands)

    def detect_hands(self, image: np.ndarray, draw: bool = True) -> Tuple[np.ndarray, List[HandFrame]]:
        """
        Detect hands in the input image.

        Args:
            image: Input image as numpy array (BGR format)
            draw: Whether to draw the landmarks onto the returned image

        Returns:
            Tuple of (annotated_image, hands)
        """
        # Convert BGR to RGB
        rgb_image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        rgb_image.flags.writeable = False

        results = self.hands.process(rgb_image)

        rgb_image.flags.writeable = True
        annotated_image = cv2.cvtColor(rgb_image, cv2.COLOR_RGB2BGR)

        hands = []
        if results.multi_hand_landmarks:
            handedness_list = results.multi_handedness or []
            for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
                if draw:
                    self.mp_drawing.draw_landmarks(
                        annotated_image,
                        hand_landmarks,
                        self.mp_hands.HAND_CONNECTIONS,
                        self.mp_drawing_styles.get_default_hand_landmarks_style(),
                        self.mp_drawing_styles.get_default_hand_connections_style()
                    )
                label, score = _handedness(handedness_list[i] if i < len(handedness_list) else None)
                hands.append(hand_frame_from_landmarks(hand_landmarks.landmark, label, score))

        return annotated_image, hands

    def close(self):
        """Clean up resources."""
        if self.hands:
            self.hands.close()
            self.hands = None


def _handedness(classification: Any) -> Tuple[str, float]:
    if classification is None or not classification.classification:
        return "Right", 0.0
    best = classification.classification[0]
    return best.label, float(best.score)


def hand_frame_from_landmarks(landmarks: Any, handedness: str = "Right", score: float = 1.0) -> HandFrame:
    """Build a HandFrame from MediaPipe-style landmarks (``.x .y .z``)."""
    points = [LandmarkPoint(float(lm.x), float(lm.y), float(getattr(lm, 'z', 0.0) or 0.0))
              for lm in landmarks]
    return HandFrame(points, handedness, min(1.0, max(0.0, score)))
