"""
CameraLights - switch network lights while a camera is in use.

Architecture:
- cameras/: camera sources, filters and the presence tracker
- lights/: Elgato / WLED config models, request encoders and fan-out
- config.py: Pydantic Settings configuration
- main.py: application wiring and CLI
"""

__version__ = "0.1.0"

from .cameras.tracker import CameraPresenceTracker, TrackerStatus
from .config import CameraLightsConfig, get_settings
from .lights.fanout import LightFanOut

__all__ = [
    "CameraLightsConfig",
    "CameraPresenceTracker",
    "LightFanOut",
    "TrackerStatus",
    "get_settings",
]
