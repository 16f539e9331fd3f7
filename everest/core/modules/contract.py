from __future__ import annotations

"""
Module contract: what every mod implementation must provide to the host.

The host calls load() once all mods are registered, unload() when a mod is
removed, and create_menu_section() while building its settings menu. Lifecycle
state lives in the host; the contract itself holds nothing but the metadata.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from everest.core.modules.models import ModuleMetadata


class EverestModule(ABC):
    def __init__(self, metadata: Optional[ModuleMetadata] = None):
        self._metadata = metadata

    @property
    def metadata(self) -> Optional[ModuleMetadata]:
        """
        Metadata the mod was registered with, usually parsed from everest.yaml.
        Subclasses may override this to provide dynamic metadata; that does not
        change how the mod was discovered or loaded.
        """
        return self._metadata

    @metadata.setter
    def metadata(self, value: Optional[ModuleMetadata]) -> None:
        self._metadata = value

    @abstractmethod
    def load(self) -> None:
        """
        Perform all initialization after every mod has been registered.
        Do not depend on any order relative to other mods' load().
        """
        raise NotImplementedError

    @abstractmethod
    def unload(self) -> None:
        """
        Release everything acquired in load() and undo any change made to the
        host. Must cope with a load() that failed halfway.
        """
        raise NotImplementedError

    def create_menu_section(self, menu: Any, in_game: bool, snapshot: Any) -> None:
        """
        Add this mod's section (header included) to the host's settings menu.
        `in_game` is True when opened from the pause menu; `snapshot` is the
        host's pause audio snapshot. Do not keep a reference to `menu`.
        """

    def __str__(self) -> str:
        meta = self.metadata
        return str(meta) if meta is not None else type(self).__name__
