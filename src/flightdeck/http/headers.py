"""
=============================================================================
HEADER COLLECTION
=============================================================================

An ordered, multi-valued list of header fields.

=============================================================================
WHY NOT A DICT?
=============================================================================

A response routinely carries the same header more than once:

    Set-Cookie: session_id=4f1c...; Path=/; HttpOnly
    Set-Cookie: theme=dark; Path=/

A ``Dict[str, str]`` would keep only the last one. ``Headers`` keeps every
``(name, value)`` pair in insertion order and never de-duplicates on
``add()``. Lookups by name are case-insensitive, names are stored as given.

=============================================================================
"""

from typing import Iterable, Iterator, List, Optional, Tuple


class Headers:
    """
    Ordered multi-map of header fields.

        headers = Headers()
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")
        headers.get("set-cookie")       # "a=1"
        headers.get_all("Set-Cookie")   # ["a=1", "b=2"]
    """

    def __init__(self, items: Optional[Iterable[Tuple[str, str]]] = None):
        self._items: List[Tuple[str, str]] = list(items or [])

    def add(self, name: str, value: str) -> "Headers":
        """Append a field. Existing fields with the same name are kept."""
        self._items.append((name, value))
        return self

    def set(self, name: str, value: str) -> "Headers":
        """Replace every field called ``name`` with a single one."""
        self.remove(name)
        self._items.append((name, value))
        return self

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value for ``name`` (case-insensitive), or ``default``."""
        wanted = name.lower()
        for key, value in self._items:
            if key.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> List[str]:
        wanted = name.lower()
        return [value for key, value in self._items if key.lower() == wanted]

    def remove(self, name: str) -> None:
        wanted = name.lower()
        self._items = [(k, v) for k, v in self._items if k.lower() != wanted]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"
