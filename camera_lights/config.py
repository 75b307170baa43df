"""
Configuration management for CameraLights.

Uses Pydantic Settings for environment variable parsing.
"""

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .cameras.filters import AllowAll, CameraFilter, NameList, NamePattern


class DeviceConfig(BaseSettings):
    """Light device configuration."""

    model_config = SettingsConfigDict(env_prefix="CAMERA_LIGHTS_DEVICE_")

    elgato_port: int = Field(
        default=9123,
        description="Port of the Elgato Key Light API",
    )
    http_timeout: float = Field(
        default=3.0,
        description="Per-request HTTP timeout in seconds",
    )
    lights: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Light descriptors (JSON list of objects)",
    )
    lights_file: Optional[Path] = Field(
        default=None,
        description="JSON file holding a list of light descriptors",
    )

    def load_lights(self) -> list[dict[str, Any]]:
        """Inline descriptors followed by those from lights_file."""
        lights = list(self.lights)
        if self.lights_file is not None:
            with open(self.lights_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, list):
                raise ValueError(f"{self.lights_file} must contain a JSON list")
            lights.extend(data)
        return lights


class CameraConfig(BaseSettings):
    """Camera source and filter configuration."""

    model_config = SettingsConfigDict(env_prefix="CAMERA_LIGHTS_CAMERA_")

    backend: str = Field(
        default="v4l2",
        description="Camera source: v4l2, memory",
    )
    name_pattern: Optional[str] = Field(
        default=None,
        description="Only cameras whose name matches this regex drive the lights",
    )
    names: Optional[list[str]] = Field(
        default=None,
        description="Only cameras with one of these exact names drive the lights",
    )
    poll_interval: float = Field(
        default=1.0,
        description="Seconds between camera scans (v4l2 backend)",
    )

    def build_filter(self) -> CameraFilter:
        """Camera filter for the configured pattern or name list."""
        if self.name_pattern:
            return NamePattern(self.name_pattern)
        if self.names:
            return NameList(self.names)
        return AllowAll()


class CameraLightsConfig(BaseSettings):
    """Main CameraLights configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CAMERA_LIGHTS_",
        env_file=".env",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )

    # Sub-configs
    devices: DeviceConfig = Field(default_factory=DeviceConfig)
    cameras: CameraConfig = Field(default_factory=CameraConfig)


# Global settings instance
_settings: Optional[CameraLightsConfig] = None


def get_settings() -> CameraLightsConfig:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = CameraLightsConfig()
    return _settings
