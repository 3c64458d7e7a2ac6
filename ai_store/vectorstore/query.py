"""
Query variants and filters.

Stores receive one of three query shapes:
- VectorQuery: semantic similarity against an embedding
- TextQuery: keyword matching against the document source text
- HybridQuery: both, blended by a semantic ratio

Each query may carry a Filter. In-process stores evaluate filters with
Filter.matches(); remote backends translate Filter.to_dict().
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ai_store.vectorstore.exceptions import InvalidArgumentError
from ai_store.vectorstore.vector import Vector, VectorLike, as_vector

if TYPE_CHECKING:
    from ai_store.vectorstore.document import VectorDocument


class QueryType(str, Enum):
    """Kinds of queries a store may support."""

    VECTOR = "vector"
    TEXT = "text"
    HYBRID = "hybrid"


class Filter(ABC):
    """Constraint on document metadata."""

    @property
    @abstractmethod
    def type(self) -> str:
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Backend-agnostic serializable form."""
        ...

    @abstractmethod
    def matches(self, document: "VectorDocument") -> bool:
        """Evaluate the filter against a document in process."""
        ...


@dataclass(frozen=True)
class EqualFilter(Filter):
    """
    Matches documents whose metadata field equals a value.

    Example:
        EqualFilter("locale", "en")
    """

    field: str
    value: Any

    @property
    def type(self) -> str:
        return "equal"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "field": self.field, "value": self.value}

    def matches(self, document: "VectorDocument") -> bool:
        return self.field in document.metadata and document.metadata[self.field] == self.value


def _normalize_texts(text: str | Sequence[str]) -> tuple[str, ...]:
    texts = (text,) if isinstance(text, str) else tuple(text)
    if not texts:
        raise InvalidArgumentError("At least one search text is required")
    for item in texts:
        if not isinstance(item, str):
            raise InvalidArgumentError(f"Search texts must be strings, got {type(item).__name__}")
    return texts


def _require_vector(vector: Any) -> Vector:
    vector = as_vector(vector)
    if not isinstance(vector, Vector):
        raise InvalidArgumentError("Query vector must not be the null vector")
    return vector


class BaseQuery(ABC):
    """Common base of all query variants."""

    filter: Filter | None

    @property
    @abstractmethod
    def type(self) -> QueryType:
        ...


@dataclass(frozen=True)
class VectorQuery(BaseQuery):
    """Semantic similarity search."""

    vector: Vector
    filter: Filter | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "vector", _require_vector(self.vector))

    @property
    def type(self) -> QueryType:
        return QueryType.VECTOR


@dataclass(frozen=True)
class TextQuery(BaseQuery):
    """
    Keyword search over document source text.

    Accepts a single string or a sequence of strings; multiple texts are
    combined with OR semantics.
    """

    texts: tuple[str, ...]
    filter: Filter | None = None

    def __init__(self, text: str | Sequence[str], filter: Filter | None = None):
        object.__setattr__(self, "texts", _normalize_texts(text))
        object.__setattr__(self, "filter", filter)

    @property
    def text(self) -> str:
        """All search texts joined by a space."""
        return " ".join(self.texts)

    @property
    def type(self) -> QueryType:
        return QueryType.TEXT


@dataclass(frozen=True)
class HybridQuery(BaseQuery):
    """
    Combined vector + keyword search.

    Attributes:
        vector: Query embedding
        texts: Search texts (OR semantics)
        semantic_ratio: Weight of the vector score, between 0.0 and 1.0
        filter: Optional metadata filter
    """

    vector: Vector
    texts: tuple[str, ...]
    semantic_ratio: float = 0.5
    filter: Filter | None = None

    def __init__(
        self,
        vector: VectorLike | Sequence[float],
        text: str | Sequence[str],
        semantic_ratio: float = 0.5,
        filter: Filter | None = None,
    ):
        ratio = float(semantic_ratio)
        if not math.isfinite(ratio) or not 0.0 <= ratio <= 1.0:
            raise InvalidArgumentError(
                f"Semantic ratio must be between 0.0 and 1.0, got {semantic_ratio}"
            )
        object.__setattr__(self, "vector", _require_vector(vector))
        object.__setattr__(self, "texts", _normalize_texts(text))
        object.__setattr__(self, "semantic_ratio", ratio)
        object.__setattr__(self, "filter", filter)

    @property
    def text(self) -> str:
        return " ".join(self.texts)

    @property
    def keyword_ratio(self) -> float:
        return 1.0 - self.semantic_ratio

    @property
    def type(self) -> QueryType:
        return QueryType.HYBRID


Query = VectorQuery | TextQuery | HybridQuery

QUERY_CLASSES: dict[QueryType, type[BaseQuery]] = {
    QueryType.VECTOR: VectorQuery,
    QueryType.TEXT: TextQuery,
    QueryType.HYBRID: HybridQuery,
}


def resolve_query_type(query_type: QueryType | str | type[BaseQuery]) -> QueryType | None:
    """
    Normalize the different ways of naming a query variant.

    Args:
        query_type: A query class, a QueryType member or its string value

    Returns:
        The matching QueryType, or None if it names no known variant
    """
    if isinstance(query_type, QueryType):
        return query_type
    if isinstance(query_type, str):
        try:
            return QueryType(query_type)
        except ValueError:
            return None
    for member, cls in QUERY_CLASSES.items():
        if query_type is cls:
            return member
    return None
