from __future__ import annotations

from typing import Any, Mapping

from ..core.exceptions import ValidationError


def require_fields(payload: Mapping[str, Any] | None, *names: str) -> dict[str, str]:
    """Return the named string fields, or fail if any is absent or blank."""
    if not isinstance(payload, Mapping):
        raise ValidationError("missing fields")

    out: dict[str, str] = {}
    for name in names:
        value = payload.get(name)
        if not isinstance(value, str) or not value:
            raise ValidationError("missing fields")
        out[name] = value
    return out


def require_int(value: Any, field_name: str) -> int:
    # bool is an int subclass; a JSON true is not a student id.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        # isdigit() alone also admits characters such as "²" that int() rejects.
        if text.isascii() and text.isdigit():
            return int(text)
    raise ValidationError(f"{field_name} must be an integer")
