"""
Light device configuration models.

Each configured device is one variant of a closed union keyed on ``kind``:
an Elgato Key Light or a WLED controller. Descriptors are accepted as model
instances or plain mappings (as loaded from JSON or environment variables).
"""

import math
from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

MIN_MIREDS = 143
MAX_MIREDS = 344


class LightKind(str, Enum):
    """Supported light device kinds."""

    ELGATO = "elgato"
    WLED = "wled"


class LightConfigError(ValueError):
    """A light descriptor cannot be turned into a device config."""


class UnknownLightKindError(LightConfigError):
    """A light descriptor names a kind no encoder handles."""


class ElgatoLight(BaseModel):
    """Elgato Key Light (HTTP API on port 9123 by default)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["elgato"] = "elgato"
    address: str = Field(
        validation_alias=AliasChoices("address", "ip"),
        description="Host name or IP address",
    )
    brightness: int = Field(default=50, description="Brightness percent (0-100)")
    temperature: int = Field(default=4500, description="Color temperature in Kelvin (2900-7000)")


class WLEDLight(BaseModel):
    """WLED controller (JSON state API)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal["wled"] = "wled"
    address: str = Field(
        validation_alias=AliasChoices("address", "ip"),
        description="Host name or IP address",
    )
    brightness: int = Field(default=128, description="Brightness (0-255)")
    on_preset: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("on_preset", "camera_on_preset"),
        description="Preset applied when a camera turns on",
    )
    off_preset: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("off_preset", "camera_off_preset"),
        description="Preset applied when all cameras turn off",
    )


LightConfig = Annotated[Union[ElgatoLight, WLEDLight], Field(discriminator="kind")]

_light_adapter: TypeAdapter = TypeAdapter(LightConfig)

_KIND_KEYS = ("kind", "type")
_ADDRESS_KEYS = ("address", "ip")


def _first(entry: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def parse_light(entry: Union[ElgatoLight, WLEDLight, Mapping[str, Any]]) -> Union[ElgatoLight, WLEDLight]:
    """
    Validate a light descriptor.

    Args:
        entry: A light model or a mapping with ``kind`` and ``address``

    Returns:
        The matching light model

    Raises:
        UnknownLightKindError: ``kind`` is missing or not supported
        LightConfigError: ``address`` is missing or a field is invalid
    """
    if isinstance(entry, (ElgatoLight, WLEDLight)):
        return entry
    if not isinstance(entry, Mapping):
        raise LightConfigError(f"light descriptor must be a mapping, got {type(entry).__name__}")

    kind = _first(entry, _KIND_KEYS)
    address = _first(entry, _ADDRESS_KEYS)
    if kind not in [k.value for k in LightKind]:
        raise UnknownLightKindError(f"unknown light kind {kind!r} for device {address}")
    if not address:
        raise LightConfigError(f"{kind} light is missing an address")

    try:
        return _light_adapter.validate_python({**entry, "kind": kind})
    except ValidationError as e:
        raise LightConfigError(f"invalid {kind} light {address}: {e}") from e


def kelvin_to_mireds(kelvin: float) -> int:
    """Convert Kelvin to mireds, clamped to the range Elgato lights accept."""
    mireds = math.floor(1_000_000 / kelvin)
    return max(MIN_MIREDS, min(MAX_MIREDS, mireds))


def describe_light(entry: Any) -> str:
    """Human-readable one-line description of a light descriptor."""
    try:
        light = parse_light(entry)
    except LightConfigError:
        address = _first(entry, _ADDRESS_KEYS) if isinstance(entry, Mapping) else None
        return f"Unknown {address}"

    if isinstance(light, ElgatoLight):
        return f"Elgato {light.address} (brightness={light.brightness}%, temp={light.temperature}K)"
    return f"WLED {light.address} (brightness={light.brightness})"
