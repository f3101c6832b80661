from lumina.window.visibility import (
    FocusHideSuppression,
    MonitorInfo,
    Surface,
    VisibilityController,
    VisibilityState,
    centered_position,
)

__all__ = [
    "FocusHideSuppression",
    "MonitorInfo",
    "Surface",
    "VisibilityController",
    "VisibilityState",
    "centered_position",
]
