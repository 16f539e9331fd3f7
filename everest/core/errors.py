from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class EverestError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return f"{self.code}: {self.user_message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": dict(self.context or {}),
        }


# ---- Core types ----
class ConfigError(EverestError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class MetadataDecodeError(EverestError):
    """
    The metadata document could not be turned into a record.
    Never crosses parse_metadata(); it is logged and the module is skipped.
    """

    def __init__(self, user_message: str = "Failed parsing module metadata.", **ctx: Any):
        super().__init__("metadata_decode_error", user_message, severity=Severity.WARN, recoverable=True, context=ctx)


class VersionFormatError(EverestError, ValueError):
    # ValueError so pydantic validators report it as a validation failure.
    def __init__(self, user_message: str = "Malformed version string.", **ctx: Any):
        super().__init__("version_format_error", user_message, severity=Severity.WARN, recoverable=True, context=ctx)
