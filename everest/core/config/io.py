from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from everest.core.config.models import LoaderConfig
from everest.core.errors import ConfigError


@dataclass(frozen=True)
class ReadResult:
    ok: bool
    data: Dict[str, Any]
    error: Optional[str] = None


def read_json_file(path: str) -> ReadResult:
    if not os.path.exists(path):
        return ReadResult(ok=False, data={}, error="missing")
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
        if not isinstance(obj, dict):
            return ReadResult(ok=False, data={}, error="not_object")
        return ReadResult(ok=True, data=obj)
    except json.JSONDecodeError as e:
        return ReadResult(ok=False, data={}, error=f"corrupt_json:{e}")
    except Exception as e:  # noqa: BLE001
        return ReadResult(ok=False, data={}, error=str(e))


def load_loader_config(path: Optional[str] = None) -> LoaderConfig:
    """
    Load config/loader.json. A missing file means defaults; anything else that
    fails to read or validate is a ConfigError.
    """
    if not path:
        return LoaderConfig()
    rr = read_json_file(path)
    if not rr.ok:
        if rr.error == "missing":
            return LoaderConfig()
        raise ConfigError(f"Could not read loader config: {rr.error}", path=path)
    try:
        return LoaderConfig.model_validate(rr.data)
    except Exception as e:  # noqa: BLE001
        raise ConfigError(f"Invalid loader config: {str(e)[:300]}", path=path) from e
