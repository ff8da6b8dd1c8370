"""
=============================================================================
SESSION FILE CODEC
=============================================================================

Turns a session payload into text for its file and back.

=============================================================================
FORMAT
=============================================================================

Indented JSON, one object per file:

    sessions/4f1c...e9.json
    ┌──────────────────────────────────┐
    │ {                                │
    │   "user_id": 9876,               │
    │   "username": "alice",           │
    │   "csrf_token": null,            │
    │   "errors": [                    │
    │     ["email", "Email is ..."]    │
    │   ]                              │
    │ }                                │
    └──────────────────────────────────┘

Human-readable (you can ``cat`` a session while debugging) and lossless
for the record types we store.

=============================================================================
DECODING RULES
=============================================================================

1. The document must be a JSON object, else SessionParseError.
2. If the payload type has a ``from_dict`` classmethod, it decides.
3. Dataclasses: start from a default instance, copy over known fields.
   Missing fields keep their defaults; unknown fields are dropped.
4. Dicts: start from the default dict and update it.

=============================================================================
"""

import dataclasses
import json
from typing import Any, Callable, Dict, TypeVar

from ..errors import SessionError, SessionParseError


T = TypeVar("T")


class JsonSessionCodec:
    """Encode/decode session payloads as JSON."""

    extension = "json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def encode(self, payload: Any) -> str:
        if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
            record = dataclasses.asdict(payload)
        else:
            record = payload
        try:
            return json.dumps(record, indent=self.indent, sort_keys=True) + "\n"
        except (TypeError, ValueError) as e:
            raise SessionError(f"Session payload is not serializable: {e}") from e

    def decode(self, text: str, factory: Callable[[], T]) -> T:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise SessionParseError(f"Invalid session JSON: {e}") from e

        if not isinstance(raw, dict):
            raise SessionParseError(
                f"Session record must be a JSON object, got {type(raw).__name__}"
            )

        default = factory()
        try:
            return self._apply(default, raw)
        except (TypeError, ValueError) as e:
            raise SessionParseError(f"Invalid session record: {e}") from e

    def _apply(self, default: T, raw: Dict[str, Any]) -> T:
        from_dict = getattr(type(default), "from_dict", None)
        if callable(from_dict):
            return from_dict(raw)

        if dataclasses.is_dataclass(default):
            known = {f.name for f in dataclasses.fields(default)}
            values = {k: v for k, v in raw.items() if k in known}
            return dataclasses.replace(default, **values)

        if isinstance(default, dict):
            default.update(raw)
            return default

        raise TypeError(f"Cannot decode a session into {type(default).__name__}")
