"""
Shared fixtures: synthetic 21-point hands in normalized image coordinates.

The wrist sits at (0.5, 0.9) and the middle-finger MCP 0.22 above it, so
the hand size is 0.22 for every generated pose.
"""

import pytest

from gesture_tracking.types import HandFrame, LandmarkPoint

WRIST = (0.5, 0.9)
MCPS = {
    'index': (0.42, 0.7),
    'middle': (0.5, 0.68),
    'ring': (0.57, 0.7),
    'pinky': (0.63, 0.73),
}
THUMB_TIPS = {
    'curled': (0.47, 0.66),   # folded across the palm
    'out': (0.22, 0.72),      # spread sideways
    'up': (0.30, 0.50),
    'down': (0.30, 1.00),
}


def _finger(mcp, extended):
    mx, my = mcp
    if extended:
        return [(mx, my), (mx, my - 0.1), (mx, my - 0.15), (mx, my - 0.2)]
    return [(mx, my), (mx, my - 0.08), (mx, my - 0.04), (mx, my + 0.04)]


def build_landmarks(thumb='curled', index=False, middle=False, ring=False, pinky=False, scale=1.0):
    """
    Build 21 LandmarkPoints for a pose.

    ``thumb`` is one of THUMB_TIPS, or ``'touch'`` to put the thumb tip
    against the index fingertip.
    """
    fingers = {
        'index': _finger(MCPS['index'], index),
        'middle': _finger(MCPS['middle'], middle),
        'ring': _finger(MCPS['ring'], ring),
        'pinky': _finger(MCPS['pinky'], pinky),
    }
    if thumb == 'touch':
        ix, iy = fingers['index'][3]
        thumb_tip = (ix + 0.01, iy + 0.02)
    else:
        thumb_tip = THUMB_TIPS[thumb]
    thumb_mcp = (0.36, 0.8)
    thumb_ip = ((thumb_mcp[0] + thumb_tip[0]) / 2, (thumb_mcp[1] + thumb_tip[1]) / 2)

    points = [WRIST, (0.42, 0.86), thumb_mcp, thumb_ip, thumb_tip]
    for name in ('index', 'middle', 'ring', 'pinky'):
        points.extend(fingers[name])
    return [LandmarkPoint(x * scale, y * scale, 0.0) for x, y in points]


POSES = {
    'fist': dict(thumb='curled'),
    'open_palm': dict(thumb='out', index=True, middle=True, ring=True, pinky=True),
    'pointing': dict(thumb='curled', index=True),
    'peace': dict(thumb='curled', index=True, middle=True),
    'pinch': dict(thumb='touch', index=True),
    'thumbs_up': dict(thumb='up'),
    'thumbs_down': dict(thumb='down'),
    'ok_sign': dict(thumb='touch', middle=True, ring=True, pinky=True),
    'unknown': dict(thumb='curled', middle=True, ring=True),
}


@pytest.fixture
def landmarks_for():
    """Factory: pose name (see POSES) -> 21 landmarks."""
    def factory(pose, scale=1.0):
        return build_landmarks(scale=scale, **POSES[pose])
    return factory


@pytest.fixture
def hand_frame():
    """Factory: pose name and handedness -> HandFrame."""
    def factory(pose, handedness='Right'):
        return HandFrame(build_landmarks(**POSES[pose]), handedness, 0.98)
    return factory
