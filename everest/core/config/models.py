from __future__ import annotations

from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from everest.core.modules.version import ModuleVersion


class LoaderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    platform_name: str = Field(default="Everest", min_length=1)
    # Older mods declared the platform dependency under this name.
    legacy_platform_alias: str = "API"
    minimum_platform_version: str = Field(default="1.0", min_length=1)
    metadata_file_names: Tuple[str, ...] = ("everest.yaml", "metadata.yaml")
    default_icon: str = Field(default="icon.png", min_length=1)
    log_category: str = Field(default="loader", min_length=1)

    @field_validator("metadata_file_names", mode="before")
    @classmethod
    def _norm_file_names(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return tuple(str(x).strip() for x in v if str(x or "").strip())
        return v

    @field_validator("minimum_platform_version")
    @classmethod
    def _version_parses(cls, v: str) -> str:
        ModuleVersion.parse(v)
        return v.strip()


DEFAULT_LOADER_CONFIG = LoaderConfig()


def default_loader_config_dict() -> Dict[str, Any]:
    return LoaderConfig().model_dump()
