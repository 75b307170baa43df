"""
Camera source protocols.

The tracker only talks to cameras through these protocols, so any
enumeration backend can drive it.
"""

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class CameraHandle(Protocol):
    """A camera known to the host."""

    @property
    def uid(self) -> str:
        """Stable unique identifier."""
        ...

    @property
    def name(self) -> str:
        """Display name."""
        ...

    @property
    def is_in_use(self) -> bool:
        """Whether the host reports the camera as in use."""
        ...


CameraCallback = Callable[[CameraHandle], None]


@runtime_checkable
class CameraSource(Protocol):
    """Camera inventory plus add/remove and per-camera change events."""

    async def refresh(self) -> None:
        """Reload the inventory without blocking the event loop."""
        ...

    def all_cameras(self) -> list[CameraHandle]:
        """Cameras currently present."""
        ...

    def start_watcher(self, on_added: CameraCallback, on_removed: CameraCallback) -> None:
        """Start delivering inventory events."""
        ...

    def stop_watcher(self) -> None:
        """Stop delivering inventory events."""
        ...

    def watch_camera(self, camera: CameraHandle, on_changed: CameraCallback) -> None:
        """Start delivering property-change events for one camera."""
        ...

    def unwatch_camera(self, camera: CameraHandle) -> None:
        """Stop delivering property-change events for one camera."""
        ...
