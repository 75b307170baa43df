"""
Video4Linux camera source.

Enumerates ``/dev/video*`` capture nodes and polls which of them are held
open by a process. Polling runs as an asyncio task; each scan of the
filesystem runs in a worker thread through refresh(). all_cameras() only
scans inline before the first refresh.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .protocols import CameraCallback, CameraHandle

logger = logging.getLogger("camera_lights.cameras.v4l2")


@dataclass
class V4L2Camera:
    """A video capture node."""

    uid: str
    name: str
    is_in_use: bool = False


class V4L2CameraSource:
    """Camera source backed by /dev, /sys and /proc."""

    def __init__(
        self,
        poll_interval: float = 1.0,
        dev_root: Path = Path("/dev"),
        sys_root: Path = Path("/sys/class/video4linux"),
        proc_root: Path = Path("/proc"),
    ):
        """
        Initialize the source.

        Args:
            poll_interval: Seconds between scans
            dev_root: Directory holding the video* device nodes
            sys_root: video4linux class directory (device names and indices)
            proc_root: procfs mount used to find open device handles
        """
        self.poll_interval = poll_interval
        self.dev_root = Path(dev_root)
        self.sys_root = Path(sys_root)
        self.proc_root = Path(proc_root)

        self._cameras: dict[str, V4L2Camera] = {}
        self._watchers: dict[str, CameraCallback] = {}
        self._on_added: Optional[CameraCallback] = None
        self._on_removed: Optional[CameraCallback] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._scanned = False

    # === CameraSource ===

    async def refresh(self) -> None:
        """Rescan the inventory in a worker thread."""
        self._apply(await asyncio.to_thread(self.scan))

    def all_cameras(self) -> list[CameraHandle]:
        # Inline scan only when refresh() has never run
        if not self._scanned:
            self._apply(self.scan(), notify=False)
        return list(self._cameras.values())

    def start_watcher(self, on_added: CameraCallback, on_removed: CameraCallback) -> None:
        self._on_added = on_added
        self._on_removed = on_removed
        if self._poll_task is None:
            self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())
            logger.info("Polling %s every %.1fs", self.dev_root, self.poll_interval)

    def stop_watcher(self) -> None:
        self._on_added = None
        self._on_removed = None
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

    def watch_camera(self, camera: CameraHandle, on_changed: CameraCallback) -> None:
        self._watchers[camera.uid] = on_changed

    def unwatch_camera(self, camera: CameraHandle) -> None:
        self._watchers.pop(camera.uid, None)

    # === Scanning ===

    def scan(self) -> dict[str, tuple[str, bool]]:
        """
        Read the current device inventory.

        Returns:
            Mapping of device path to (display name, in use)
        """
        devices: dict[str, str] = {}
        for node in sorted(self.dev_root.glob("video*")):
            if not self._is_capture_node(node.name):
                continue
            devices[str(node)] = self._read_name(node.name)

        open_paths = self._open_device_paths(set(devices))
        return {path: (name, path in open_paths) for path, name in devices.items()}

    def _is_capture_node(self, node_name: str) -> bool:
        # Metadata nodes share the device with a non-zero index
        index_file = self.sys_root / node_name / "index"
        try:
            return index_file.read_text().strip() == "0"
        except OSError:
            return True

    def _read_name(self, node_name: str) -> str:
        try:
            name = (self.sys_root / node_name / "name").read_text().strip()
        except OSError:
            name = ""
        return name or node_name

    def _open_device_paths(self, paths: set[str]) -> set[str]:
        found: set[str] = set()
        if not paths:
            return found

        own_pid = str(os.getpid())
        try:
            pids = [p for p in self.proc_root.iterdir() if p.name.isdigit() and p.name != own_pid]
        except OSError as e:
            logger.warning("Cannot list %s: %s", self.proc_root, e)
            return found

        for pid_dir in pids:
            try:
                fds = list((pid_dir / "fd").iterdir())
            except OSError:
                continue
            for fd in fds:
                try:
                    target = os.readlink(fd)
                except OSError:
                    continue
                if target in paths:
                    found.add(target)
            if found == paths:
                break
        return found

    # === Events ===

    def _apply(self, snapshot: dict[str, tuple[str, bool]], notify: bool = True) -> None:
        self._scanned = True
        for uid in list(self._cameras):
            if uid not in snapshot:
                camera = self._cameras.pop(uid)
                if notify and self._on_removed:
                    self._on_removed(camera)

        for uid, (name, in_use) in snapshot.items():
            camera = self._cameras.get(uid)
            if camera is None:
                camera = V4L2Camera(uid=uid, name=name, is_in_use=in_use)
                self._cameras[uid] = camera
                if notify and self._on_added:
                    self._on_added(camera)
                    # Found already in use: the new watcher needs the current state
                    callback = self._watchers.get(uid)
                    if in_use and callback:
                        callback(camera)
                continue

            if camera.is_in_use != in_use:
                camera.is_in_use = in_use
                callback = self._watchers.get(uid)
                if notify and callback:
                    callback(camera)

    async def _poll_loop(self) -> None:
        while True:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Camera scan failed: %s", e)

            await asyncio.sleep(self.poll_interval)
