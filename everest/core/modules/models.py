from __future__ import annotations

"""
Module metadata models (the record every discovered mod is described by).

Document keys keep the PascalCase names mod authors write in everest.yaml
(Name, Version, DLL, Prelinked, Dependencies). Location fields and the icon
are runtime-only: they are never read from the document.
"""

import os
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from everest.core.config.models import DEFAULT_LOADER_CONFIG, LoaderConfig
from everest.core.modules.version import ModuleVersion

# Only these keys are read from a document; everything else (locations, icon,
# snake_case spellings, unknown keys) is ignored.
DOCUMENT_KEYS = ("Name", "Version", "DLL", "Prelinked", "Dependencies")
DEPENDENCY_KEYS = ("Name", "Version")


def _norm_text(v: Any, field: str) -> str:
    if v is None:
        return ""
    if not isinstance(v, str):
        raise ValueError(f"{field} must be a string, got {type(v).__name__}")
    return v.strip()


def _pick(raw: Dict[str, Any], keys: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: raw[k] for k in keys if k in raw}


def _norm_version(v: Any) -> Any:
    if v is None or v == "":
        return ModuleVersion()
    if isinstance(v, ModuleVersion):
        return v
    if not isinstance(v, str):
        raise ValueError(f"Version must be a string, got {type(v).__name__}")
    return ModuleVersion.parse(v)


class ModuleDependency(BaseModel):
    """
    A dependency declaration: module name + minimum version. Not a live record.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, arbitrary_types_allowed=True, validate_assignment=True)

    name: str = Field(alias="Name", min_length=1)
    version: ModuleVersion = Field(default_factory=ModuleVersion, alias="Version")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return _norm_text(v, "Name")

    @field_validator("version", mode="before")
    @classmethod
    def _version(cls, v: Any) -> Any:
        return _norm_version(v)

    @field_serializer("version")
    def _dump_version(self, v: ModuleVersion) -> str:
        return str(v)

    def is_satisfied_by(self, meta: "ModuleMetadata") -> bool:
        """Same module name, and at least the declared version."""
        return meta.name == self.name and meta.version >= self.version

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


class ModuleMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, arbitrary_types_allowed=True, validate_assignment=True)

    path_archive: str = ""
    path_directory: str = ""

    name: str = Field(alias="Name", min_length=1)
    icon: Any = Field(default=None, exclude=True)  # opaque handle set by the host or the mod
    version: ModuleVersion = Field(default_factory=ModuleVersion, alias="Version")
    dll: str = Field(default="", alias="DLL")
    prelinked: bool = Field(default=False, alias="Prelinked")
    dependencies: List[ModuleDependency] = Field(default_factory=list, alias="Dependencies")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return _norm_text(v, "Name")

    @field_validator("version", mode="before")
    @classmethod
    def _version(cls, v: Any) -> Any:
        return _norm_version(v)

    @field_validator("dll", mode="before")
    @classmethod
    def _dll(cls, v: Any) -> str:
        return _norm_text(v, "DLL")

    @field_validator("prelinked", mode="before")
    @classmethod
    def _prelinked(cls, v: Any) -> Any:
        if v is None or v == "":
            return False
        return v

    @field_validator("dependencies", mode="before")
    @classmethod
    def _deps(cls, v: Any) -> Any:
        # An empty `Dependencies:` key decodes to an empty scalar.
        if v is None or v == "":
            return []
        return v

    @field_serializer("version")
    def _dump_version(self, v: ModuleVersion) -> str:
        return str(v)

    @classmethod
    def from_document(cls, raw: Dict[str, Any]) -> "ModuleMetadata":
        """
        Build a draft record from a decoded document, reading PascalCase keys only.
        """
        data = _pick(raw, DOCUMENT_KEYS)
        deps = data.get("Dependencies")
        if isinstance(deps, list):
            data["Dependencies"] = [_pick(d, DEPENDENCY_KEYS) if isinstance(d, dict) else d for d in deps]
        return cls.model_validate(data)

    @property
    def version_string(self) -> str:
        return str(self.version)

    def depends_on(self, name: str) -> bool:
        return any(dep.name == name for dep in self.dependencies)

    def icon_path(self, config: Optional[LoaderConfig] = None) -> str:
        """
        Location of the conventional icon file. Absolute for directory mods,
        archive-relative for zipped mods.
        """
        cfg = config or DEFAULT_LOADER_CONFIG
        if self.path_directory:
            return os.path.join(self.path_directory, cfg.default_icon)
        return cfg.default_icon

    def to_document(self) -> Dict[str, Any]:
        """Document-shaped dict (PascalCase keys, runtime-only fields omitted)."""
        return self.model_dump(by_alias=True, exclude={"path_archive", "path_directory", "icon"})

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


def to_display_string(meta: ModuleMetadata) -> str:
    return str(meta)
