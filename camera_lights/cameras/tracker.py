"""
Camera presence tracker.

Keeps the set of watched cameras in sync with the camera source and derives
a single "any allowed camera in use" flag from it. The lights are switched
only when that flag changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

from ..lights.models import describe_light
from .filters import AllowAll, CameraFilter, coerce_filter, matches
from .protocols import CameraHandle, CameraSource

logger = logging.getLogger("camera_lights.cameras.tracker")


class LightDispatcher(Protocol):
    """Anything that can switch the configured lights."""

    def apply_state(self, devices: Sequence[Any], on: bool) -> Any:
        ...


@dataclass
class CameraStatus:
    """One camera in a status snapshot."""

    name: str
    in_use: bool
    allowed: bool


@dataclass
class TrackerStatus:
    """Read-only snapshot of the tracker."""

    cameras: list[CameraStatus] = field(default_factory=list)
    lights: list[str] = field(default_factory=list)
    any_camera_in_use: bool = False
    filtering_enabled: bool = False

    def render(self) -> str:
        """Format the snapshot as a console report."""
        lines = ["=== CameraLights Status ===", f"Cameras detected: {len(self.cameras)}"]
        for camera in self.cameras:
            lines.append(
                f"  - {camera.name}: {'IN USE' if camera.in_use else 'idle'} "
                f"({'allowed' if camera.allowed else 'filtered'})"
            )
        lines.append(f"Lights/devices configured: {len(self.lights)}")
        lines.extend(f"  - {description}" for description in self.lights)
        lines.append(f"Any camera in use: {'yes' if self.any_camera_in_use else 'no'}")
        lines.append(f"Camera filtering: {'enabled' if self.filtering_enabled else 'all allowed'}")
        return "\n".join(lines)


class CameraPresenceTracker:
    """
    Maps camera events to light on/off transitions.

    Handles:
    - Watching cameras as they appear and disappear
    - Camera filtering
    - Edge-triggered light fan-out
    """

    def __init__(
        self,
        source: CameraSource,
        dispatcher: LightDispatcher,
        lights: Optional[Sequence[Any]] = None,
        camera_filter: Optional[Any] = None,
    ):
        """
        Initialize the tracker.

        Args:
            source: Camera enumeration backend
            dispatcher: Light fan-out used on every transition
            lights: Light configs or raw descriptors, fixed for the run
            camera_filter: Filter variant, or a value accepted by coerce_filter
        """
        self._source = source
        self._dispatcher = dispatcher
        self.lights: tuple = tuple(lights or ())
        self.camera_filter: CameraFilter = coerce_filter(camera_filter)
        self._watched: dict[str, CameraHandle] = {}
        self._any_in_use = False
        self._subscribed = False

    @property
    def any_camera_in_use(self) -> bool:
        """Last computed aggregate state."""
        return self._any_in_use

    @property
    def filtering_enabled(self) -> bool:
        return not isinstance(self.camera_filter, AllowAll)

    @property
    def watched_cameras(self) -> list[CameraHandle]:
        return list(self._watched.values())

    # === Lifecycle ===

    def start(self, sync_lights: bool = True) -> "CameraPresenceTracker":
        """
        Start watching cameras.

        Args:
            sync_lights: Push the initial state to the lights

        Returns:
            The tracker
        """
        logger.info("CameraLights starting")
        logger.info("Configured lights/devices: %d", len(self.lights))
        for light in self.lights:
            logger.info("  - %s", describe_light(light))
        if self.filtering_enabled:
            logger.info("Camera filtering: enabled")
        else:
            logger.info("Camera filtering: all cameras allowed")

        if not self._subscribed:
            self._source.start_watcher(self.on_camera_added, self.on_camera_removed)
            self._subscribed = True

        cameras = self._source.all_cameras()
        if not cameras:
            logger.info("No cameras detected")
        for camera in cameras:
            self._watch(camera)

        self._any_in_use = self._compute_any_in_use()
        if sync_lights:
            if self._any_in_use:
                logger.info("Camera already in use - turning lights on")
            else:
                logger.info("No cameras in use - turning lights off")
            self._dispatch(self._any_in_use)

        logger.info("CameraLights ready")
        return self

    def stop(self) -> "CameraPresenceTracker":
        """Stop watching cameras. The lights are left as they are."""
        logger.info("Stopping CameraLights")
        if self._subscribed:
            self._source.stop_watcher()
            self._subscribed = False

        for camera in list(self._watched.values()):
            self._source.unwatch_camera(camera)
        self._watched.clear()
        self._any_in_use = False

        logger.info("CameraLights stopped")
        return self

    def lights_on(self) -> "CameraPresenceTracker":
        """Turn every light on regardless of camera state."""
        self._dispatch(True)
        return self

    def lights_off(self) -> "CameraPresenceTracker":
        """Turn every light off regardless of camera state."""
        self._dispatch(False)
        return self

    # === Camera events ===

    def on_camera_added(self, camera: CameraHandle) -> None:
        """Handle a camera being connected."""
        logger.info("Camera connected: %s", camera.name)
        self._watch(camera)

    def on_camera_removed(self, camera: CameraHandle) -> None:
        """Handle a camera being disconnected."""
        logger.info("Camera disconnected: %s", camera.name)
        self._unwatch(camera)

        now_in_use = self._compute_any_in_use()
        if now_in_use != self._any_in_use:
            self._any_in_use = now_in_use
            self._dispatch(now_in_use)

    def on_camera_state_changed(self, camera: CameraHandle) -> None:
        """Handle a property change on a watched camera."""
        if not self.is_allowed(camera):
            logger.debug("Ignoring camera (not allowed): %s", camera.name)
            return

        now_in_use = self._compute_any_in_use()
        if now_in_use == self._any_in_use:
            return

        if now_in_use:
            logger.info("Camera activated: %s", camera.name)
        else:
            logger.info("Camera deactivated: %s", camera.name)
        self._any_in_use = now_in_use
        self._dispatch(now_in_use)

    # === Queries ===

    def is_allowed(self, camera: CameraHandle) -> bool:
        """Whether the camera passes the filter. A failing filter rejects."""
        try:
            return matches(self.camera_filter, camera)
        except Exception as e:
            logger.warning("Error in camera filter for %s: %s", _safe_name(camera), e)
            return False

    def status(self) -> TrackerStatus:
        """Snapshot of cameras, lights and the aggregate state."""
        cameras = [
            CameraStatus(
                name=camera.name,
                in_use=bool(camera.is_in_use),
                allowed=self.is_allowed(camera),
            )
            for camera in self._watched.values()
        ]
        return TrackerStatus(
            cameras=cameras,
            lights=[describe_light(light) for light in self.lights],
            any_camera_in_use=self._any_in_use,
            filtering_enabled=self.filtering_enabled,
        )

    # === Internals ===

    def _watch(self, camera: CameraHandle) -> None:
        if camera.uid in self._watched:
            return

        self._source.watch_camera(camera, self.on_camera_state_changed)
        self._watched[camera.uid] = camera

        allowed = "allowed" if self.is_allowed(camera) else "filtered"
        logger.info("Watching camera: %s (%s)", camera.name, allowed)

    def _unwatch(self, camera: CameraHandle) -> None:
        watched = self._watched.pop(camera.uid, None)
        if watched is None:
            return
        self._source.unwatch_camera(watched)
        logger.info("Stopped watching camera: %s", camera.name)

    def _compute_any_in_use(self) -> bool:
        for camera in self._watched.values():
            if self.is_allowed(camera) and camera.is_in_use:
                return True
        return False

    def _dispatch(self, on: bool) -> None:
        try:
            self._dispatcher.apply_state(self.lights, on)
        except Exception as e:
            logger.error("Light fan-out failed: %s", e, exc_info=True)


def _safe_name(camera: CameraHandle) -> str:
    try:
        return camera.name
    except Exception:
        return "<unnamed camera>"
