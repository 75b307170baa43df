"""
Light devices: config models, request encoders and the fan-out dispatcher.
"""

from .encoders import LightRequest, build_request, encode_elgato, encode_wled
from .fanout import LightFanOut
from .models import (
    ElgatoLight,
    LightConfig,
    LightConfigError,
    LightKind,
    UnknownLightKindError,
    WLEDLight,
    describe_light,
    kelvin_to_mireds,
    parse_light,
)

__all__ = [
    "ElgatoLight",
    "WLEDLight",
    "LightConfig",
    "LightKind",
    "LightConfigError",
    "UnknownLightKindError",
    "LightRequest",
    "LightFanOut",
    "build_request",
    "encode_elgato",
    "encode_wled",
    "describe_light",
    "kelvin_to_mireds",
    "parse_light",
]
