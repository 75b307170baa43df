"""
End-to-end: camera events through the tracker to device requests.
"""

import pytest

from camera_lights.cameras.memory import InMemoryCameraSource, MemoryCamera
from camera_lights.cameras.tracker import CameraPresenceTracker
from camera_lights.lights.fanout import LightFanOut

DEVICES = [
    {"kind": "elgato", "address": "192.168.1.100", "brightness": 40, "temperature": 5000},
    {"kind": "elgato", "address": "192.168.1.101"},
    {"kind": "wled", "address": "192.168.1.151", "on_preset": 2},
]


class RecordingFanOut(LightFanOut):
    """LightFanOut that also counts apply_state calls."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.states: list[bool] = []

    def apply_state(self, devices, on):
        self.states.append(on)
        return super().apply_state(devices, on)


class TestCameraSession:
    """One camera going idle -> in use -> idle."""

    @pytest.mark.asyncio
    async def test_video_call(self, recorder):
        source = InMemoryCameraSource([MemoryCamera("cam", "FaceTime HD Camera")])
        fanout = RecordingFanOut(transport=recorder.transport)
        tracker = CameraPresenceTracker(source, fanout, lights=DEVICES)

        tracker.start(sync_lights=False)

        source.set_in_use("cam", True)
        await fanout.drain()
        on_requests = list(recorder.requests)

        source.set_in_use("cam", False)
        await fanout.drain()
        off_requests = recorder.requests[len(on_requests):]

        tracker.stop()
        await fanout.aclose()

        assert fanout.states == [True, False]
        assert len(on_requests) == 3
        assert len(off_requests) == 3

        on_bodies = {str(r.url): r.content for r in on_requests}
        assert on_bodies == {
            "http://192.168.1.100:9123/elgato/lights":
                b'{"lights":[{"on":1,"brightness":40,"temperature":200}]}',
            "http://192.168.1.101:9123/elgato/lights":
                b'{"lights":[{"on":1,"brightness":50,"temperature":222}]}',
            "http://192.168.1.151/json/state": b'{"on":true,"ps":2}',
        }

        off_bodies = {str(r.url): r.content for r in off_requests}
        assert off_bodies == {
            "http://192.168.1.100:9123/elgato/lights": b'{"lights":[{"on":0}]}',
            "http://192.168.1.101:9123/elgato/lights": b'{"lights":[{"on":0}]}',
            "http://192.168.1.151/json/state": b'{"on":false}',
        }

        methods = {str(r.url): r.method for r in on_requests + off_requests}
        assert methods["http://192.168.1.100:9123/elgato/lights"] == "PUT"
        assert methods["http://192.168.1.151/json/state"] == "POST"

    @pytest.mark.asyncio
    async def test_unreachable_device_does_not_block_others(self, recorder):
        recorder.unreachable.add("192.168.1.101")
        source = InMemoryCameraSource([MemoryCamera("cam", "FaceTime HD Camera")])
        fanout = LightFanOut(transport=recorder.transport)
        tracker = CameraPresenceTracker(source, fanout, lights=DEVICES)

        tracker.start()
        source.set_in_use("cam", True)
        await fanout.aclose()
        tracker.stop()

        ok_hosts = [r.url.host for r in recorder.requests if r.url.host != "192.168.1.101"]
        assert len(ok_hosts) == 4
        assert len(recorder.requests) == 6
