"""
Pytest fixtures for CameraLights testing.

Provides fixtures for:
- In-memory camera sources
- A recording light dispatcher
- An httpx mock transport that records device requests
"""

import json

import httpx
import pytest

from camera_lights.cameras.memory import InMemoryCameraSource, MemoryCamera


class RecordingDispatcher:
    """Light dispatcher that records every fan-out call."""

    def __init__(self):
        self.calls: list[tuple[tuple, bool]] = []

    def apply_state(self, devices, on):
        self.calls.append((tuple(devices), on))
        return []

    @property
    def states(self) -> list[bool]:
        return [on for _, on in self.calls]


class DeviceRecorder:
    """httpx handler that records requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []
        self.unreachable: set[str] = set()
        self.status_by_host: dict[str, int] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host in self.unreachable:
            raise httpx.ConnectError("host unreachable", request=request)
        code = self.status_by_host.get(request.url.host, self.status_code)
        return httpx.Response(code, json={})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def recorder() -> DeviceRecorder:
    return DeviceRecorder()


@pytest.fixture
def source() -> InMemoryCameraSource:
    """Source with one built-in camera and one USB camera, both idle."""
    return InMemoryCameraSource(
        [
            MemoryCamera("cam-builtin", "FaceTime HD Camera"),
            MemoryCamera("cam-usb", "Logitech BRIO"),
        ]
    )
