"""
Ordered collection of model instances.

Members are keyed by generated UUID strings and can be looked up by key, by
position or by the instance itself (identity, never value equality).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar

from .model import Model

logger = logging.getLogger(__name__)


class Collection:
    """
    A list-like container of ``model`` instances.

    Subclasses set ``model``:

        class Users(Collection):
            model = User

        users = Users([{"name": "Ada"}, {"name": "Grace"}])
    """

    model: ClassVar[type[Model]] = Model

    def __init__(self, data: Any = None) -> None:
        self.data: dict[str, Model] = {}
        if data is not None:
            self.add(data)

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[Model]:
        return iter(list(self.data.values()))

    def __contains__(self, item: object) -> bool:
        return self._resolve(item) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} {self.model.__name__} item(s))"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, data: Any) -> list[str]:
        """
        Add one or more members.

        Accepts a mapping, a model instance, or a list of either. Mappings
        are built into ``model`` instances and skipped when nothing in them
        differs from the defaults.

        Returns:
            Keys of the members that were added
        """
        items = data if isinstance(data, (list, tuple)) else [data]
        keys: list[str] = []

        for item in items:
            if isinstance(item, Model):
                instance = item
            elif isinstance(item, Mapping):
                instance = self.model(item)
                if not instance.is_set():
                    logger.debug("Skipping empty %s record", self.model.__name__)
                    continue
            else:
                continue

            key = str(uuid.uuid4())
            self.data[key] = instance
            keys.append(key)

        return keys

    def remove(self, target: Any) -> bool | list[bool]:
        """
        Remove members by key, position or instance.

        A list removes several at once; every target is resolved against the
        collection as it was before the call.

        Returns:
            ``True``/``False`` per target (a list when given a list)
        """
        if isinstance(target, list):
            resolved = [self._resolve(item) for item in target]
            results = []
            for key in resolved:
                if key is not None and key in self.data:
                    del self.data[key]
                    results.append(True)
                else:
                    results.append(False)
            return results

        key = self._resolve(target)
        if key is None:
            return False
        del self.data[key]
        return True

    def reset(self) -> bool:
        """Remove every member."""
        self.data = {}
        return True

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _resolve(self, target: Any) -> str | None:
        if isinstance(target, Model):
            for key, instance in self.data.items():
                if instance is target:
                    return key
            return None

        if isinstance(target, bool):
            return None

        if isinstance(target, int):
            keys = list(self.data)
            if 0 <= target < len(keys):
                return keys[target]
            return None

        if isinstance(target, str) and target in self.data:
            return target

        return None

    def get(self, target: Any, return_key: bool = False) -> Any:
        """
        Look up a member by key, position or instance.

        Returns:
            The instance (or its key when ``return_key``), ``None`` if absent
        """
        key = self._resolve(target)
        if key is None:
            return None
        if return_key:
            return key
        return self.data[key]

    def keys(self) -> list[str]:
        return list(self.data)

    def items(self) -> Iterator[tuple[str, Model]]:
        return iter(list(self.data.items()))

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def to_object(self) -> list[dict[str, Any]]:
        return [instance.to_object() for instance in self.data.values()]

    def to_data(self) -> list[dict[str, Any]]:
        return [instance.to_data() for instance in self.data.values()]
