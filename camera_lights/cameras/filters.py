"""
Camera filters.

A filter decides which cameras may drive the lights. It is one of a small
closed set of variants, evaluated by ``matches``.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Union

from .protocols import CameraHandle


@dataclass(frozen=True)
class AllowAll:
    """Every camera is allowed."""


@dataclass(frozen=True)
class NamePattern:
    """Cameras whose name contains a match for ``pattern``."""

    pattern: str
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_regex", re.compile(self.pattern))


@dataclass(frozen=True)
class NameList:
    """Cameras whose name is exactly one of ``names``."""

    names: Iterable[str]

    def __post_init__(self):
        object.__setattr__(self, "names", frozenset(self.names))


@dataclass(frozen=True)
class Predicate:
    """Cameras for which ``func(camera)`` is truthy."""

    func: Callable[[CameraHandle], Any]


CameraFilter = Union[AllowAll, NamePattern, NameList, Predicate]


def matches(camera_filter: CameraFilter, camera: CameraHandle) -> bool:
    """
    Evaluate a filter against a camera.

    Exceptions raised by a predicate propagate; callers decide how to treat
    a failing filter.
    """
    if isinstance(camera_filter, AllowAll):
        return True
    if isinstance(camera_filter, NamePattern):
        return camera_filter._regex.search(camera.name) is not None
    if isinstance(camera_filter, NameList):
        return camera.name in camera_filter.names
    if isinstance(camera_filter, Predicate):
        return bool(camera_filter.func(camera))
    raise TypeError(f"unsupported camera filter: {camera_filter!r}")


def coerce_filter(value: Optional[Any]) -> CameraFilter:
    """
    Build a filter from a loosely-typed value.

    ``None`` allows everything, a string is a name pattern, a callable is a
    predicate and any other iterable is a list of exact names.
    """
    if value is None:
        return AllowAll()
    if isinstance(value, (AllowAll, NamePattern, NameList, Predicate)):
        return value
    if isinstance(value, str):
        return NamePattern(value)
    if callable(value):
        return Predicate(value)
    return NameList(value)
