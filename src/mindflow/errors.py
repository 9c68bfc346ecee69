"""Exception classes for mindflow."""


class MindFlowError(Exception):
    """Base exception for mindflow errors."""

    pass


class TreeLoadError(MindFlowError):
    """Raised when a persisted payload holds no usable mind-map item."""

    pass
