from __future__ import annotations

from typing import Any


def mask_token(token: str, visible: int = 8) -> str:
    if len(token) <= visible:
        return "***"
    return f"{token[:visible]}..."


def scalar_text(value: Any) -> str | None:
    """Return a non-blank string for str/int/float values, else None."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    text = str(value)
    return text if text.strip() else None
