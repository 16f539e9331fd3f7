from __future__ import annotations

"""
Module version triple.

Versions are compared ordinally (major, then minor, then build). There is no
range or prerelease matching here; a dependency names a minimum version and
the resolver compares with these operators.
"""

import re
from functools import total_ordering
from typing import Any, Tuple

from everest.core.errors import VersionFormatError

_COMPONENT = re.compile(r"[0-9]+")


@total_ordering
class ModuleVersion:
    __slots__ = ("_parts",)

    def __init__(self, major: int = 1, minor: int = 0, build: int = 0):
        parts = (major, minor, build)
        for p in parts:
            if isinstance(p, bool) or not isinstance(p, int) or p < 0:
                raise VersionFormatError(f"Version components must be non-negative integers, got {parts!r}")
        self._parts: Tuple[int, int, int] = parts

    @classmethod
    def parse(cls, text: Any) -> "ModuleVersion":
        """
        Accepts "major.minor" or "major.minor.build". Anything else is rejected,
        including non-numeric or negative components.
        """
        if isinstance(text, ModuleVersion):
            return text
        raw = str(text if text is not None else "").strip()
        pieces = raw.split(".")
        if len(pieces) not in (2, 3) or not all(_COMPONENT.fullmatch(p) for p in pieces):
            raise VersionFormatError(f"Malformed version string: {raw!r}", version=raw)
        nums = [int(p) for p in pieces]
        if len(nums) == 2:
            nums.append(0)
        return cls(nums[0], nums[1], nums[2])

    @property
    def major(self) -> int:
        return self._parts[0]

    @property
    def minor(self) -> int:
        return self._parts[1]

    @property
    def build(self) -> int:
        return self._parts[2]

    def as_tuple(self) -> Tuple[int, int, int]:
        return self._parts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleVersion):
            return NotImplemented
        return self._parts == other._parts

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ModuleVersion):
            return NotImplemented
        return self._parts < other._parts

    def __hash__(self) -> int:
        return hash(self._parts)

    def __str__(self) -> str:
        return "{}.{}.{}".format(*self._parts)

    def __repr__(self) -> str:
        return f"ModuleVersion({self.major}, {self.minor}, {self.build})"
