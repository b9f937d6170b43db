"""In-memory object store used for admission lookups."""

from __future__ import annotations

import copy
from typing import Any, Dict, Tuple, Type, Union


class NotFoundError(LookupError):
    """Raised when a requested object is not in the store."""

    def __init__(self, kind: str, name: str, namespace: str = "") -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(f'{kind} "{name}" not found')


def _kind_name(kind: Union[str, Type[Any]]) -> str:
    return kind if isinstance(kind, str) else kind.__name__


class ObjectStore:
    """Holds objects keyed by kind, namespace and name."""

    def __init__(self, *objects: Any) -> None:
        self._objects: Dict[Tuple[str, str, str], Any] = {}
        for obj in objects:
            self.add(obj)

    def add(self, obj: Any) -> None:
        """Store a copy of obj, replacing any object with the same key."""
        key = (type(obj).__name__, getattr(obj, "namespace", "") or "", obj.name)
        self._objects[key] = copy.deepcopy(obj)

    def get(self, kind: Union[str, Type[Any]], name: str, namespace: str = "") -> Any:
        """Return a copy of the stored object or raise NotFoundError."""
        kind_name = _kind_name(kind)
        try:
            obj = self._objects[(kind_name, namespace or "", name)]
        except KeyError:
            raise NotFoundError(kind_name, name, namespace) from None
        return copy.deepcopy(obj)

    def __len__(self) -> int:
        return len(self._objects)