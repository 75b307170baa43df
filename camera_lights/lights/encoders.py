"""
Request encoders for the supported light devices.

Each encoder turns a light config and a desired on/off state into a
fully-built HTTP request. Encoding happens before anything is sent, so a
malformed config fails here and never reaches the network.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union

from .models import ElgatoLight, WLEDLight, kelvin_to_mireds

JSON_HEADERS = {"Content-Type": "application/json"}

DEFAULT_ELGATO_PORT = 9123


@dataclass(frozen=True)
class LightRequest:
    """An outbound device command."""

    method: str
    url: str
    payload: dict[str, Any]
    body: bytes
    headers: dict[str, str] = field(default_factory=lambda: dict(JSON_HEADERS))


def _encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":"), allow_nan=False).encode("utf-8")


def encode_elgato(light: ElgatoLight, on: bool, port: int = DEFAULT_ELGATO_PORT) -> LightRequest:
    """Build the Elgato Key Light request for ``on``."""
    if on:
        payload: dict[str, Any] = {
            "lights": [
                {
                    "on": 1,
                    "brightness": light.brightness,
                    "temperature": kelvin_to_mireds(light.temperature),
                }
            ]
        }
    else:
        payload = {"lights": [{"on": 0}]}

    return LightRequest(
        method="PUT",
        url=f"http://{light.address}:{port}/elgato/lights",
        payload=payload,
        body=_encode(payload),
    )


def encode_wled(light: WLEDLight, on: bool) -> LightRequest:
    """
    Build the WLED request for ``on``.

    An off-preset is sent with ``"on": true``; the preset itself decides
    what the strip does.
    """
    if on:
        if light.on_preset is not None:
            payload: dict[str, Any] = {"on": True, "ps": light.on_preset}
        else:
            payload = {"on": True, "bri": light.brightness}
    else:
        if light.off_preset is not None:
            payload = {"on": True, "ps": light.off_preset}
        else:
            payload = {"on": False}

    return LightRequest(
        method="POST",
        url=f"http://{light.address}/json/state",
        payload=payload,
        body=_encode(payload),
    )


def build_request(
    light: Union[ElgatoLight, WLEDLight],
    on: bool,
    elgato_port: int = DEFAULT_ELGATO_PORT,
) -> LightRequest:
    """Dispatch to the encoder for the light's kind."""
    if isinstance(light, ElgatoLight):
        return encode_elgato(light, on, port=elgato_port)
    if isinstance(light, WLEDLight):
        return encode_wled(light, on)
    raise TypeError(f"no encoder for {type(light).__name__}")
