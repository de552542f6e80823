"""
Configuration settings for gesture tracking
"""

# Camera settings
CAMERA_CONFIG = {
    'default_camera_index': 0,
    'default_frame_width': 640,
    'default_frame_height': 480,
    'flip_horizontal': True  # Mirror effect for natural interaction
}

# Hand landmark model settings
HAND_TRACKING_CONFIG = {
    'static_image_mode': False,
    'max_num_hands': 2,
    'model_complexity': 1,  # 0-1, higher = more accurate but slower
    'min_detection_confidence': 0.5,
    'min_tracking_confidence': 0.5
}

# Classification settings
CLASSIFIER_CONFIG = {
    'variant': 'default',  # 'default' or 'extended'
}

# Temporal stabilization settings
STABILIZER_CONFIG = {
    'window_size': 10,        # recent classifications kept per hand
    'vote_threshold': 5,      # votes needed in the window to lock a gesture
    'no_hand_threshold': 8,   # frames without the hand before its lock clears
    'confidence_cap': 0.95,
    'confidence_boost': 0.1
}

# Session aggregation settings
SESSION_CONFIG = {
    'recent_limit': 10,     # live "recent gestures" list
    'history_limit': 100,   # persisted history
    'metrics_window': 30    # frames averaged for FPS / processing time
}

# Persistence settings
STORAGE_CONFIG = {
    'history_path': 'gesture_history.json'
}

# Display settings
DISPLAY_CONFIG = {
    'show_landmarks': True,
    'show_gesture_info': True,
    'show_performance': True,
    'overlay_color': (255, 255, 255),
    'overlay_background': (0, 0, 0),
    'confidence_high_color': (0, 255, 0),
    'confidence_low_color': (0, 255, 255),
    'confidence_high_threshold': 0.7,
    'text_scale': 0.5,
    'text_thickness': 1
}
