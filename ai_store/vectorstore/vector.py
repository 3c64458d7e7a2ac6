"""
Embedding value types.

A Vector is an immutable, fixed-length sequence of floats produced by an
embedding step or by deserializing a backend response. NullVector marks a
document for which no embedding is available; it is a distinct type rather
than an empty Vector so it can never be compared by accident.
"""

from collections.abc import Iterator, Sequence
from typing import Any

import numpy as np

from ai_store.vectorstore.exceptions import InvalidArgumentError


class Vector:
    """
    Immutable embedding vector.

    Attributes:
        data: Vector components as a tuple of floats
    """

    __slots__ = ("_data",)

    def __init__(self, data: Sequence[float] | np.ndarray):
        array = np.asarray(data, dtype=np.float64).ravel()
        if not array.size:
            raise InvalidArgumentError("Vector must have at least one dimension")
        if not np.isfinite(array).all():
            raise InvalidArgumentError("Vector components must be finite numbers")
        self._data = tuple(float(v) for v in array)

    @property
    def data(self) -> tuple[float, ...]:
        return self._data

    @property
    def dimensions(self) -> int:
        return len(self._data)

    def to_list(self) -> list[float]:
        return list(self._data)

    def as_array(self) -> np.ndarray:
        """Return the components as a float64 numpy array."""
        return np.asarray(self._data, dtype=np.float64)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[float]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash(self._data)

    def __repr__(self) -> str:
        if len(self._data) > 6:
            head = ", ".join(f"{v:g}" for v in self._data[:3])
            return f"Vector([{head}, ...], dimensions={len(self._data)})"
        return f"Vector({list(self._data)!r})"


class NullVector:
    """Sentinel for "no embedding available"."""

    __slots__ = ()

    @property
    def data(self) -> tuple[float, ...]:
        return ()

    @property
    def dimensions(self) -> int:
        return 0

    def to_list(self) -> list[float]:
        return []

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NullVector)

    def __hash__(self) -> int:
        return hash(NullVector)

    def __repr__(self) -> str:
        return "NullVector()"


NULL_VECTOR = NullVector()

VectorLike = Vector | NullVector


def as_vector(value: Any) -> VectorLike:
    """
    Coerce a raw value into a Vector or the null vector.

    Args:
        value: None, a Vector, a NullVector, or a sequence of floats

    Returns:
        NULL_VECTOR for None / NullVector, otherwise a Vector
    """
    if value is None or isinstance(value, NullVector):
        return NULL_VECTOR
    if isinstance(value, Vector):
        return value
    return Vector(value)
