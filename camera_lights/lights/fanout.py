"""
Light fan-out.

Sends one command per configured light for a desired on/off state. Every
device is handled on its own: a bad config, an encoding error, an
unreachable host or an error status affects only that device, and sends
never wait on one another.
"""

import asyncio
import logging
from typing import Any, Iterable, Optional, Union

import httpx

from .encoders import DEFAULT_ELGATO_PORT, LightRequest, build_request
from .models import (
    ElgatoLight,
    LightConfigError,
    UnknownLightKindError,
    WLEDLight,
    parse_light,
)

logger = logging.getLogger("camera_lights.lights.fanout")


class LightFanOut:
    """
    Fire-and-forget dispatcher for light commands.

    Sends are scheduled as tasks on the running event loop; their results
    are only logged.
    """

    def __init__(
        self,
        elgato_port: int = DEFAULT_ELGATO_PORT,
        timeout: float = 3.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the fan-out.

        Args:
            elgato_port: Port of the Elgato Key Light API
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.elgato_port = elgato_port
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of sends still in flight."""
        return len(self._pending)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def apply_state(self, devices: Iterable[Any], on: bool) -> list[asyncio.Task]:
        """
        Send the on/off command to every device.

        Args:
            devices: Light configs or raw descriptors, in send order
            on: Desired state

        Returns:
            The scheduled send tasks, one per device that could be encoded
        """
        logger.info("Setting all lights %s", "ON" if on else "OFF")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("No running event loop, cannot send light commands")
            return []

        tasks = []
        for index, entry in enumerate(devices, start=1):
            try:
                light = parse_light(entry)
                request = build_request(light, on, elgato_port=self.elgato_port)
            except UnknownLightKindError as e:
                logger.warning("Skipping light #%d, unsupported type: %s", index, e)
                continue
            except LightConfigError as e:
                logger.warning("Skipping light #%d, bad configuration: %s", index, e)
                continue
            except Exception as e:
                logger.warning("Light #%d: failed to encode payload - %s", index, e)
                continue

            task = loop.create_task(self._send(light, request, on))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)

        return tasks

    async def _send(
        self,
        light: Union[ElgatoLight, WLEDLight],
        request: LightRequest,
        on: bool,
    ) -> Optional[int]:
        """Send one request and log the outcome. Returns the status code, or None."""
        label = "Elgato Light" if isinstance(light, ElgatoLight) else "WLED"

        try:
            resp = await self._get_client().request(
                request.method,
                request.url,
                content=request.body,
                headers=request.headers,
            )
        except httpx.TransportError as e:
            logger.debug("%s %s: unreachable (not on network) - %s", label, light.address, e)
            return None
        except Exception as e:
            logger.warning("%s %s: request failed - %s", label, light.address, e)
            return None

        code = resp.status_code
        if 200 <= code < 300:
            if not on:
                logger.info("%s %s: OFF", label, light.address)
            elif isinstance(light, ElgatoLight):
                logger.info(
                    "%s %s: ON (brightness=%d%%, temp=%dK)",
                    label, light.address, light.brightness, light.temperature,
                )
            else:
                logger.info("%s %s: ON (brightness=%d)", label, light.address, light.brightness)
        else:
            logger.warning("%s %s: failed with code %d", label, light.address, code)
        return code

    async def drain(self) -> None:
        """Wait for every in-flight send to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """Finish in-flight sends and close the HTTP client."""
        await self.drain()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
