"""
Tests for CameraLightsApplication wiring.
"""

import asyncio

import pytest

from camera_lights.cameras.memory import InMemoryCameraSource, MemoryCamera
from camera_lights.cameras.v4l2 import V4L2CameraSource
from camera_lights.config import CameraLightsConfig, DeviceConfig
from camera_lights.lights.fanout import LightFanOut
from camera_lights.main import CameraLightsApplication, create_source


def _config(**camera_overrides) -> CameraLightsConfig:
    config = CameraLightsConfig(_env_file=None)
    config.devices = DeviceConfig(
        lights=[
            {"kind": "elgato", "address": "192.168.1.100"},
            {"kind": "wled", "address": "192.168.1.151"},
        ]
    )
    for key, value in camera_overrides.items():
        setattr(config.cameras, key, value)
    return config


class TestCreateSource:
    """Tests for create_source."""

    def test_v4l2(self):
        assert isinstance(create_source(_config(backend="v4l2")), V4L2CameraSource)

    def test_memory(self):
        assert isinstance(create_source(_config(backend="MEMORY")), InMemoryCameraSource)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_source(_config(backend="avfoundation"))


class TestApplication:
    """Tests for the application modes."""

    @pytest.mark.asyncio
    async def test_lights_on(self, recorder):
        app = CameraLightsApplication(
            _config(backend="memory"),
            fanout=LightFanOut(transport=recorder.transport),
        )
        await app.set_lights(True)
        bodies = recorder.bodies()
        assert len(bodies) == 2
        assert {"lights": [{"on": 1, "brightness": 50, "temperature": 222}]} in bodies
        assert {"on": True, "bri": 128} in bodies

    @pytest.mark.asyncio
    async def test_status_leaves_lights_alone(self, recorder):
        source = InMemoryCameraSource([MemoryCamera("cam", "FaceTime HD Camera", in_use=True)])
        app = CameraLightsApplication(
            _config(name_pattern="FaceTime"),
            source=source,
            fanout=LightFanOut(transport=recorder.transport),
        )
        report = await app.status()
        assert "FaceTime HD Camera: IN USE (allowed)" in report
        assert "Camera filtering: enabled" in report
        assert "Elgato 192.168.1.100" in report
        assert recorder.requests == []
        assert not source.watching

    @pytest.mark.asyncio
    async def test_run_until_shutdown(self, recorder):
        source = InMemoryCameraSource([MemoryCamera("cam", "FaceTime HD Camera")])
        app = CameraLightsApplication(
            _config(),
            source=source,
            fanout=LightFanOut(transport=recorder.transport),
        )
        task = asyncio.create_task(app.run())
        await asyncio.sleep(0)

        source.set_in_use("cam", True)
        app.request_shutdown()
        await asyncio.wait_for(task, timeout=2.0)

        assert len(recorder.requests) == 4
        assert {"on": False} in recorder.bodies()
        assert {"on": True, "bri": 128} in recorder.bodies()
        assert not source.watching
