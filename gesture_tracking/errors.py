"""
Errors raised at the boundaries of the gesture tracking pipeline.

The classifier, stabilizer and session aggregator never raise these; they
belong to the model, camera and video adapters around them.
"""


class GestureTrackingError(Exception):
    """Base class for gesture tracking errors."""


class ModelUnavailable(GestureTrackingError):
    """The hand landmark model could not be imported or started."""


class PermissionDenied(GestureTrackingError):
    """The camera could not be opened."""


class VideoSourceError(GestureTrackingError):
    """A video file could not be opened or read."""
