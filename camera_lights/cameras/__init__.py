"""
Camera sources, filters and the presence tracker.
"""

from .filters import AllowAll, CameraFilter, NameList, NamePattern, Predicate, coerce_filter, matches
from .memory import InMemoryCameraSource, MemoryCamera
from .protocols import CameraHandle, CameraSource
from .tracker import CameraPresenceTracker, CameraStatus, TrackerStatus
from .v4l2 import V4L2Camera, V4L2CameraSource

__all__ = [
    "AllowAll",
    "CameraFilter",
    "NameList",
    "NamePattern",
    "Predicate",
    "coerce_filter",
    "matches",
    "CameraHandle",
    "CameraSource",
    "CameraPresenceTracker",
    "CameraStatus",
    "TrackerStatus",
    "InMemoryCameraSource",
    "MemoryCamera",
    "V4L2Camera",
    "V4L2CameraSource",
]
