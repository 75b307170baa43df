"""
CameraLights - Main entry point.

Watches the host's cameras and switches the configured lights:
- any allowed camera in use -> lights on
- no allowed camera in use -> lights off
"""

import asyncio
import logging
import signal
from pathlib import Path
from typing import Optional

# .env.local overrides .env for machine-specific settings (light addresses etc.)
from dotenv import load_dotenv

_env_root = Path.cwd()
load_dotenv(_env_root / ".env", override=True)
load_dotenv(_env_root / ".env.local", override=True)

from .cameras.memory import InMemoryCameraSource
from .cameras.protocols import CameraSource
from .cameras.tracker import CameraPresenceTracker
from .cameras.v4l2 import V4L2CameraSource
from .config import CameraLightsConfig, get_settings
from .lights.fanout import LightFanOut

logger = logging.getLogger("camera_lights.main")


def create_source(config: CameraLightsConfig) -> CameraSource:
    """Build the configured camera source."""
    backend = config.cameras.backend.lower()
    if backend == "v4l2":
        return V4L2CameraSource(poll_interval=config.cameras.poll_interval)
    if backend == "memory":
        return InMemoryCameraSource()
    raise ValueError(f"Unknown camera backend: {config.cameras.backend}")


class CameraLightsApplication:
    """
    Main application.

    Manages:
    - Camera source and presence tracker
    - Light fan-out and its HTTP client
    - Graceful shutdown
    """

    def __init__(
        self,
        config: Optional[CameraLightsConfig] = None,
        source: Optional[CameraSource] = None,
        fanout: Optional[LightFanOut] = None,
    ):
        self.config = config or get_settings()
        self.source = source or create_source(self.config)
        self.fanout = fanout or LightFanOut(
            elgato_port=self.config.devices.elgato_port,
            timeout=self.config.devices.http_timeout,
        )
        self.tracker = CameraPresenceTracker(
            source=self.source,
            dispatcher=self.fanout,
            lights=self.config.devices.load_lights(),
            camera_filter=self.config.cameras.build_filter(),
        )
        self._shutdown_event = asyncio.Event()

    async def run(self) -> None:
        """Watch cameras until SIGINT/SIGTERM."""
        await self.source.refresh()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._shutdown_event.set)

        self.tracker.start()
        logger.info("Watching cameras. Press Ctrl+C to stop.")
        try:
            await self._shutdown_event.wait()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
            self.tracker.stop()
            await self.fanout.aclose()

    async def set_lights(self, on: bool) -> None:
        """Switch every light once, ignoring the cameras."""
        if on:
            self.tracker.lights_on()
        else:
            self.tracker.lights_off()
        await self.fanout.aclose()

    async def status(self) -> str:
        """Status report without touching the lights."""
        await self.source.refresh()
        self.tracker.start(sync_lights=False)
        try:
            return self.tracker.status().render()
        finally:
            self.tracker.stop()
            await self.fanout.aclose()

    def request_shutdown(self) -> None:
        self._shutdown_event.set()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Switch lights when a camera is in use")
    parser.add_argument(
        "--mode",
        choices=["run", "on", "off", "status"],
        default="run",
        help="Running mode (default: run)",
    )
    parser.add_argument(
        "--backend",
        choices=["v4l2", "memory"],
        default=None,
        help="Camera backend (overrides CAMERA_LIGHTS_CAMERA_BACKEND)",
    )
    args = parser.parse_args()

    config = get_settings()
    if args.backend:
        config.cameras.backend = args.backend

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    async def _run() -> None:
        app = CameraLightsApplication(config)
        if args.mode == "run":
            await app.run()
        elif args.mode == "status":
            print(await app.status())
        else:
            await app.set_lights(args.mode == "on")

    asyncio.run(_run())


if __name__ == "__main__":
    main()
