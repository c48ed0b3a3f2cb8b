"""Ordered string multimap shared by Header and Query."""

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, TypeVar, Union

Values = Union[str, Iterable[str]]
Source = Union[Mapping[str, Values], Iterable[tuple[str, str]], "MultiValueMap", None]

M = TypeVar("M", bound="MultiValueMap")


class MultiValueMap:
    """Ordered mapping from a string key to one or more string values.

    Keys keep their first-seen position; values keep insertion order. Key
    matching goes through `_normalize`, which subclasses override to make
    lookups case-insensitive.
    """

    def __init__(self, items: Source = None, **kwargs: Values) -> None:
        self._keys: dict[str, str] = {}
        self._values: dict[str, list[str]] = {}
        if items is not None:
            self._extend(items)
        if kwargs:
            self._extend(kwargs)

    @staticmethod
    def _normalize(key: str) -> str:
        return key

    def _extend(self, items: Source) -> None:
        if isinstance(items, MultiValueMap):
            pairs: Iterable[tuple[str, str]] = items.properties()
        elif isinstance(items, Mapping):
            pairs = (
                (key, value)
                for key, values in items.items()
                for value in ([values] if isinstance(values, str) else values)
            )
        else:
            pairs = items
        for key, value in pairs:
            self.add(key, value)

    def add(self, key: str, value: str) -> None:
        """Append a value under `key`, keeping any existing values."""
        if not isinstance(value, str):
            raise TypeError(f"value for {key!r} must be str, got {type(value).__name__}")
        normalized = self._normalize(key)
        if normalized not in self._keys:
            self._keys[normalized] = key
            self._values[normalized] = []
        self._values[normalized].append(value)

    def set(self, key: str, value: Values) -> None:
        """Replace every value under `key`."""
        self.remove(key)
        for item in [value] if isinstance(value, str) else value:
            self.add(key, item)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the first value under `key`, or `default`."""
        values = self._values.get(self._normalize(key))
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return a copy of every value under `key`."""
        return list(self._values.get(self._normalize(key), []))

    def remove(self, key: str) -> None:
        normalized = self._normalize(key)
        self._keys.pop(normalized, None)
        self._values.pop(normalized, None)

    def keys(self) -> list[str]:
        return list(self._keys.values())

    def merge(self: M, other: "MultiValueMap | None") -> M:
        """Fold every (key, value) pair of `other` into this map.

        The result is a multiset union per key: a value appears as many times
        as the side holding more copies of it, so repeated values on either
        side survive and a pair shared by both sides is not doubled.

        Returns:
            This map, for chaining.
        """
        if other is None or other is self:
            return self
        for key in other.keys():
            mine = Counter(self._values.get(self._normalize(key), ()))
            for value in other.get_list(key):
                if mine[value]:
                    mine[value] -= 1
                else:
                    self.add(key, value)
        return self

    def properties(self) -> list[tuple[str, str]]:
        """Enumerate (key, value) pairs in a stable order."""
        return [
            (self._keys[normalized], value)
            for normalized, values in self._values.items()
            for value in values
        ]

    def copy(self: M) -> M:
        return type(self)(self.properties())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, MultiValueMap) or type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.properties()!r})"
