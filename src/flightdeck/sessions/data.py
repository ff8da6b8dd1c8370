"""
Default session payload.

Any record type works as a session payload; this is the one the built-in
flights (``require_login``, ``csrf_protect``) know how to read.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)

# Flash errors are meant for one form round trip, not for accumulating.
MAX_SESSION_ERRORS = 30


@dataclass
class SessionData:
    """
    Per-visitor state persisted between requests.

    ``errors`` holds ``[key, message]`` pairs left by a failed form POST
    for the following GET to display (and then clear).
    """

    user_id: Optional[int] = None
    username: Optional[str] = None
    csrf_token: Optional[str] = None
    errors: List[List[str]] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and self.user_id > 0

    def set_error(self, key: str, message: str) -> None:
        """
        Record (or replace) the error for ``key``.

        Past MAX_SESSION_ERRORS new keys are dropped with a warning.
        """
        for pair in self.errors:
            if pair[0] == key:
                pair[1] = message
                return
        if len(self.errors) >= MAX_SESSION_ERRORS:
            logger.warning(
                f"Session error limit ({MAX_SESSION_ERRORS}) reached, ignoring {key!r}"
            )
            return
        self.errors.append([key, message])

    def get_error(self, key: str) -> Optional[str]:
        for name, message in self.errors:
            if name == key:
                return message
        return None

    def error_dict(self) -> Dict[str, str]:
        return {name: message for name, message in self.errors}

    def clear_errors(self) -> None:
        self.errors.clear()

    def clear(self) -> None:
        """Forget everything, e.g. on logout."""
        self.user_id = None
        self.username = None
        self.csrf_token = None
        self.errors.clear()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SessionData":
        """
        Build from a decoded session record.

        Missing keys keep their defaults, unknown keys are ignored. A value
        of the wrong type raises ValueError.
        """
        data = cls()

        user_id = raw.get("user_id")
        if user_id is not None:
            if isinstance(user_id, bool) or not isinstance(user_id, int):
                raise ValueError(f"user_id must be an integer, got {user_id!r}")
            data.user_id = user_id

        for name in ("username", "csrf_token"):
            value = raw.get(name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{name} must be a string, got {value!r}")
            setattr(data, name, value)

        errors = raw.get("errors") or []
        if not isinstance(errors, list):
            raise ValueError("errors must be a list of [key, message] pairs")
        for pair in errors:
            if not (isinstance(pair, list) and len(pair) == 2
                    and all(isinstance(part, str) for part in pair)):
                raise ValueError(f"invalid error entry {pair!r}")
            data.errors.append([pair[0], pair[1]])

        return data
