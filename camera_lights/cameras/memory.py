"""
In-memory camera source for testing and dry runs without real hardware.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .protocols import CameraCallback, CameraHandle

logger = logging.getLogger("camera_lights.cameras.memory")


@dataclass
class MemoryCamera:
    """A scriptable camera."""

    uid: str
    name: str
    in_use: bool = False

    @property
    def is_in_use(self) -> bool:
        return self.in_use


class InMemoryCameraSource:
    """
    Camera source driven by explicit calls.

    Events are delivered synchronously, and only to handlers that are
    currently subscribed.
    """

    def __init__(self, cameras: Optional[list[MemoryCamera]] = None):
        self._cameras: dict[str, MemoryCamera] = {c.uid: c for c in (cameras or [])}
        self._on_added: Optional[CameraCallback] = None
        self._on_removed: Optional[CameraCallback] = None
        self._watchers: dict[str, CameraCallback] = {}

    @property
    def watching(self) -> bool:
        """Whether inventory events are being delivered."""
        return self._on_added is not None

    @property
    def watched_uids(self) -> set[str]:
        """Cameras with a property watcher."""
        return set(self._watchers)

    async def refresh(self) -> None:
        pass

    def all_cameras(self) -> list[CameraHandle]:
        return list(self._cameras.values())

    def start_watcher(self, on_added: CameraCallback, on_removed: CameraCallback) -> None:
        self._on_added = on_added
        self._on_removed = on_removed

    def stop_watcher(self) -> None:
        self._on_added = None
        self._on_removed = None

    def watch_camera(self, camera: CameraHandle, on_changed: CameraCallback) -> None:
        self._watchers[camera.uid] = on_changed

    def unwatch_camera(self, camera: CameraHandle) -> None:
        self._watchers.pop(camera.uid, None)

    # === Scripting ===

    def add_camera(self, camera: MemoryCamera) -> None:
        """Plug in a camera."""
        self._cameras[camera.uid] = camera
        logger.debug("Added camera %s", camera.name)
        if self._on_added:
            self._on_added(camera)

    def remove_camera(self, uid: str) -> None:
        """Unplug a camera."""
        camera = self._cameras.pop(uid)
        logger.debug("Removed camera %s", camera.name)
        if self._on_removed:
            self._on_removed(camera)

    def set_in_use(self, uid: str, in_use: bool) -> None:
        """Change a camera's in-use flag and notify its watcher."""
        camera = self._cameras[uid]
        camera.in_use = in_use
        callback = self._watchers.get(uid)
        if callback:
            callback(camera)
