from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone
from types import MappingProxyType
from typing import Any, Mapping

from ..common.datetime_utils import parse_utc_offset
from .constants import (
    DEFAULT_ACCESS_EVENT_TYPE,
    DEFAULT_GRACE_MINUTES,
    DEFAULT_QUERY_TIMEOUT_MS,
    DEFAULT_SATURDAY_SHIFT_SUBSTITUTIONS,
    DEFAULT_TIMEZONE_OFFSET,
)


@dataclass(frozen=True)
class EngineSettings:
    """Run-wide engine settings, read once from the active settings module."""

    timezone_offset: str = DEFAULT_TIMEZONE_OFFSET
    access_event_type: int = DEFAULT_ACCESS_EVENT_TYPE
    default_grace_minutes: int = DEFAULT_GRACE_MINUTES
    saturday_shift_substitutions: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_SATURDAY_SHIFT_SUBSTITUTIONS))
    )
    deduction_rules: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    query_timeout_ms: int = DEFAULT_QUERY_TIMEOUT_MS

    @property
    def tz(self) -> timezone:
        return parse_utc_offset(self.timezone_offset)

    @classmethod
    def from_module(cls, settings: Any) -> "EngineSettings":
        substitutions = getattr(settings, "SATURDAY_SHIFT_SUBSTITUTIONS", DEFAULT_SATURDAY_SHIFT_SUBSTITUTIONS)
        return cls(
            timezone_offset=str(getattr(settings, "TIMEZONE_OFFSET", DEFAULT_TIMEZONE_OFFSET)),
            access_event_type=int(getattr(settings, "ACCESS_EVENT_TYPE", DEFAULT_ACCESS_EVENT_TYPE)),
            default_grace_minutes=int(getattr(settings, "DEFAULT_GRACE_MINUTES", DEFAULT_GRACE_MINUTES)),
            saturday_shift_substitutions=MappingProxyType(
                {str(k).upper(): str(v).upper() for k, v in dict(substitutions).items()}
            ),
            deduction_rules=MappingProxyType(dict(getattr(settings, "DEDUCTION_RULES", {}) or {})),
            query_timeout_ms=int(getattr(settings, "QUERY_TIMEOUT_MS", DEFAULT_QUERY_TIMEOUT_MS)),
        )
