from __future__ import annotations

import logging
import math
import os
from numbers import Real
from typing import Any, Dict, Union

from pydantic import BaseModel, Field, field_validator

from .exceptions import InvalidArgument

logger = logging.getLogger(__name__)

DEFAULT_MAX_LISTENERS = 10

MaxListeners = Union[int, float]


def check_max_listeners(n: Any) -> MaxListeners:
    """Validate a max-listeners bound and return it unchanged.

    Accepts any non-negative real number, including ``math.inf``. Both ``0`` and
    ``math.inf`` disable the warning.

    Raises:
        InvalidArgument: if ``n`` is not a number, is a bool, is NaN or is negative.
    """
    if isinstance(n, bool) or not isinstance(n, Real):
        raise InvalidArgument(f"n must be a non-negative number: {n!r}")
    if math.isnan(n) or n < 0:
        raise InvalidArgument(f"n must be a non-negative number: {n!r}")
    return n


def is_unbounded(n: MaxListeners) -> bool:
    return n == 0 or math.isinf(n)


def _parse_number(raw: str) -> MaxListeners:
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        raise InvalidArgument(f"SYNCEMIT_MAX_LISTENERS must be a number: {raw!r}") from None


class EmitterSettings(BaseModel):
    """Per-instance configuration for an :class:`~syncemit.emitter.EventEmitter`."""

    max_listeners: MaxListeners = Field(
        DEFAULT_MAX_LISTENERS,
        description="Listener count per event above which a diagnostic warning is logged",
    )
    log_dropped_errors: bool = Field(
        True,
        description="Log handler failures that no 'error' listener received",
    )

    @field_validator("max_listeners", mode="before")
    @classmethod
    def validate_max_listeners(cls, v: Any) -> MaxListeners:
        return check_max_listeners(v)

    @classmethod
    def from_env(cls) -> "EmitterSettings":
        """Build settings from SYNCEMIT_* environment variables, falling back to defaults."""
        data: Dict[str, Any] = {}
        raw_max = os.getenv("SYNCEMIT_MAX_LISTENERS")
        if raw_max:
            data["max_listeners"] = _parse_number(raw_max.strip())
        raw_log = os.getenv("SYNCEMIT_LOG_DROPPED_ERRORS")
        if raw_log:
            data["log_dropped_errors"] = raw_log.strip().lower() not in ("0", "false", "no", "off")
        logger.debug("Loaded emitter settings from environment: %s", data)
        return cls(**data)


__all__ = [
    "DEFAULT_MAX_LISTENERS",
    "EmitterSettings",
    "check_max_listeners",
    "is_unbounded",
]
