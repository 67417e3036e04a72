from __future__ import annotations

import math
from typing import Any


def as_number(value: Any) -> int | float:
    """Coerce client input to a finite number; anything else becomes 0."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return 0
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            parsed = float(raw)
        except ValueError:
            return 0
        return parsed if math.isfinite(parsed) else 0
    return 0


def as_non_negative_number(value: Any) -> int | float:
    return max(0, as_number(value))


def as_text(value: Any, *, max_length: int | None = None, default: str = "") -> str:
    text = str(value) if value not in (None, "", False) else default
    if max_length is not None:
        return text[:max_length]
    return text
