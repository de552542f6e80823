#!/usr/bin/env python3
"""
Gesture Tracking Demo
Live camera gesture recognition with temporal stabilization.
"""

import argparse
import logging

from gesture_tracking import GestureHistoryStore, GestureSession, GestureType, SessionAggregator
from gesture_tracking.config import STORAGE_CONFIG
from gesture_tracking.errors import GestureTrackingError
from gesture_tracking.gesture_classifier import GestureClassifier, get_gesture_description, get_gesture_label
from gesture_tracking.gesture_interface import GestureInterface


def on_gesture(gesture):
    """Callback for every stable gesture change."""
    print(f"[{gesture.hand}] {get_gesture_label(gesture.gesture)} "
          f"(confidence: {gesture.confidence:.2f}) - {get_gesture_description(gesture.gesture)}")


def on_thumbs_up_gesture(gesture):
    """Callback for thumbs up gesture."""
    print(f"👍 Thumbs up! Confidence: {gesture.confidence:.2f}")


def on_cleared(hand):
    print(f"[{hand}] hand lost, gesture cleared")


def parse_args():
    parser = argparse.ArgumentParser(description="Live hand gesture recognition")
    parser.add_argument("--camera", type=int, default=0, help="Camera device index")
    parser.add_argument("--history", default=STORAGE_CONFIG['history_path'],
                        help="JSON file for persisted gesture history")
    parser.add_argument("--variant", choices=["default", "extended"], default="default",
                        help="Classifier rule cascade")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main():
    """Main demonstration function."""
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("GESTURE TRACKING")
    print("=" * 60)
    print("Supported gestures: " + ", ".join(
        get_gesture_label(g) for g in GestureType if g is not GestureType.UNKNOWN))
    print()

    store = GestureHistoryStore(args.history)
    session = GestureSession(classifier=GestureClassifier(args.variant),
                             aggregator=SessionAggregator(store=store))
    session.register_gesture_callback(None, on_gesture)
    session.register_gesture_callback(GestureType.THUMBS_UP, on_thumbs_up_gesture)
    session.register_clear_callback(on_cleared)

    interface = GestureInterface(source=args.camera, session=session)

    try:
        interface.run_realtime("Gesture Tracking Demo")
    except GestureTrackingError as e:
        print(f"Error running demo: {e}")
    finally:
        interface.cleanup()
        session.aggregator.end_session()

    stats = session.aggregator.stats
    print(f"\n{stats.total_gestures} gestures in {stats.frames_processed} frames, "
          f"average confidence {stats.average_confidence:.2f}")


if __name__ == "__main__":
    main()
