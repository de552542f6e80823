#!/usr/bin/env python3
"""
Analyze a recorded video and report the stable gestures it contains.
"""

import json
import logging
import sys

from gesture_tracking.errors import GestureTrackingError
from gesture_tracking.gesture_classifier import get_gesture_label
from gesture_tracking.gesture_interface import GestureInterface


def analyze_video(path):
    """Run every frame of the video through a fresh gesture session."""
    interface = GestureInterface(source=path)
    interface.set_display_options(show_landmarks=False, show_gesture_info=False,
                                  show_performance=False)

    timeline = []
    try:
        for _, analysis in interface.frames():
            if analysis is None:
                continue
            for gesture in analysis.gestures:
                timeline.append({
                    'frame': analysis.frame_number,
                    'hand': gesture.hand,
                    'gesture': gesture.gesture.value,
                    'confidence': round(gesture.confidence, 3),
                })
                print(f"frame {analysis.frame_number:5d}  {gesture.hand:<5}  "
                      f"{get_gesture_label(gesture.gesture)} ({gesture.confidence:.2f})")
    finally:
        interface.cleanup()

    metrics = interface.session.metrics()
    return {
        'video': path,
        'frames_processed': metrics.frames_processed,
        'gestures_detected': metrics.gestures_detected,
        'average_processing_time_ms': round(metrics.average_processing_time_ms, 2),
        'timeline': timeline,
    }


def main():
    if len(sys.argv) != 2:
        print("Usage: python video_example.py <video file>")
        sys.exit(2)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        report = analyze_video(sys.argv[1])
    except GestureTrackingError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
