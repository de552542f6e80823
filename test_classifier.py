"""
Tests for the geometry helpers and the rule-cascade gesture classifier.
"""

import numpy as np
import pytest

from conftest import POSES, build_landmarks
from gesture_tracking.geometry import (
    distance,
    finger_states,
    hand_size,
    is_finger_extended,
    is_thumb_extended,
)
from gesture_tracking.gesture_classifier import (
    GestureClassifier,
    classify_gesture,
    get_gesture_description,
    get_gesture_label,
)
from gesture_tracking.types import GestureType, LandmarkPoint


def test_distance_is_euclidean_in_3d():
    assert distance(LandmarkPoint(0, 0, 0), LandmarkPoint(3, 4, 12)) == pytest.approx(13.0)
    assert distance({'x': 1, 'y': 1, 'z': 0}, (1, 1)) == 0.0


def test_finger_extension_uses_ten_percent_margin():
    landmarks = [LandmarkPoint(0.0, 0.0)] * 21
    landmarks[6] = LandmarkPoint(0.0, 1.0)
    landmarks[8] = LandmarkPoint(0.0, 1.1)
    # Exactly 1.1x is not enough
    assert not is_finger_extended(landmarks, 8, 6, 0)
    landmarks[8] = LandmarkPoint(0.0, 1.11)
    assert is_finger_extended(landmarks, 8, 6, 0)


def test_thumb_extension_measured_from_index_mcp(landmarks_for):
    assert is_thumb_extended(landmarks_for('thumbs_up'))
    assert not is_thumb_extended(landmarks_for('fist'))


def test_finger_states_and_hand_size(landmarks_for):
    states = finger_states(landmarks_for('peace'))
    assert states == {'thumb': False, 'index': True, 'middle': True, 'ring': False, 'pinky': False}
    assert hand_size(landmarks_for('peace')) == pytest.approx(0.22)


@pytest.mark.parametrize("pose, expected, confidence", [
    ('pinch', GestureType.PINCH, 0.85),
    ('thumbs_up', GestureType.THUMBS_UP, 0.88),
    ('thumbs_down', GestureType.THUMBS_DOWN, 0.88),
    ('peace', GestureType.PEACE, 0.85),
    ('pointing', GestureType.POINTING, 0.9),
    ('open_palm', GestureType.OPEN_PALM, 0.9),
    ('fist', GestureType.FIST, 0.88),
    ('ok_sign', GestureType.OK_SIGN, 0.82),
    ('unknown', GestureType.UNKNOWN, 0.5),
])
def test_classifies_each_pose(landmarks_for, pose, expected, confidence):
    result = classify_gesture(landmarks_for(pose))
    assert result.gesture is expected
    assert result.confidence == pytest.approx(confidence)


def test_short_input_is_unknown_with_zero_confidence(landmarks_for):
    result = classify_gesture(landmarks_for('fist')[:20])
    assert result.gesture is GestureType.UNKNOWN
    assert result.confidence == 0.0
    assert classify_gesture([]).confidence == 0.0


def test_classification_is_deterministic(landmarks_for):
    landmarks = landmarks_for('peace')
    results = {classify_gesture(landmarks) for _ in range(5)}
    assert len(results) == 1


@pytest.mark.parametrize("scale", [0.5, 2.0, 0.25])
@pytest.mark.parametrize("pose", sorted(POSES))
def test_classification_is_scale_invariant(landmarks_for, pose, scale):
    assert classify_gesture(landmarks_for(pose, scale=scale)).gesture is \
        classify_gesture(landmarks_for(pose)).gesture


def test_pinch_takes_priority_over_pointing(landmarks_for):
    landmarks = landmarks_for('pinch')
    states = finger_states(landmarks)
    # Also satisfies the pointing rule: index out, middle/ring/pinky folded
    assert states['index'] and not (states['middle'] or states['ring'] or states['pinky'])
    assert classify_gesture(landmarks).gesture is GestureType.PINCH


def test_touching_thumb_with_open_fingers_is_not_pinch():
    landmarks = build_landmarks(thumb='touch', index=True, middle=True, ring=True, pinky=True)
    assert classify_gesture(landmarks).gesture is GestureType.OPEN_PALM


def test_accepts_dicts_tuples_and_arrays(landmarks_for):
    landmarks = landmarks_for('pointing')
    as_dicts = [{'x': p.x, 'y': p.y, 'z': p.z} for p in landmarks]
    as_tuples = [(p.x, p.y) for p in landmarks]
    as_array = np.array([[p.x, p.y, p.z] for p in landmarks])
    for variant in (as_dicts, as_tuples, as_array):
        assert classify_gesture(variant).gesture is GestureType.POINTING


def test_confidence_always_within_unit_interval(landmarks_for):
    for pose in POSES:
        for variant in ('default', 'extended'):
            confidence = classify_gesture(landmarks_for(pose), variant).confidence
            assert 0.0 <= confidence <= 1.0


def test_extended_variant_thumb_and_index():
    landmarks = build_landmarks(thumb='up', index=True)
    assert classify_gesture(landmarks).gesture is GestureType.POINTING
    result = classify_gesture(landmarks, 'extended')
    assert result.gesture is GestureType.THUMBS_UP
    assert result.confidence == pytest.approx(0.9)


def test_extended_variant_confidences(landmarks_for):
    assert classify_gesture(landmarks_for('open_palm'), 'extended').confidence == pytest.approx(0.92)
    assert classify_gesture(landmarks_for('thumbs_up'), 'extended').confidence == pytest.approx(0.85)
    assert classify_gesture(landmarks_for('peace'), 'extended').confidence == pytest.approx(0.82)


def test_unknown_variant_rejected(landmarks_for):
    with pytest.raises(ValueError):
        classify_gesture(landmarks_for('fist'), 'fancy')
    with pytest.raises(ValueError):
        GestureClassifier('fancy')


def test_labels_and_descriptions_cover_every_gesture():
    for gesture_type in GestureType:
        assert get_gesture_description(gesture_type) != "Unknown gesture"
    assert get_gesture_description(GestureType.FIST).startswith("Fist")
    assert get_gesture_label(GestureType.OK_SIGN) == "OK Sign"
