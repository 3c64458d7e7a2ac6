"""
Document model for vector stores.

VectorDocument is the unit of storage: an id, an embedding (or the null
vector), a metadata bag and, for query results only, a score.
"""

from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID

from ai_store.vectorstore.vector import NULL_VECTOR, VectorLike, as_vector


class Metadata(dict[str, Any]):
    """
    Free-form document metadata.

    Reserved keys hold the source text used by text and hybrid queries
    and the origin of the document.
    """

    KEY_TEXT = "_text"
    KEY_SOURCE = "_source"

    @property
    def text(self) -> str | None:
        return self.get(self.KEY_TEXT)

    @text.setter
    def text(self, value: str | None) -> None:
        if value is None:
            self.pop(self.KEY_TEXT, None)
        else:
            self[self.KEY_TEXT] = value

    @property
    def source(self) -> str | None:
        return self.get(self.KEY_SOURCE)

    @source.setter
    def source(self, value: str | None) -> None:
        if value is None:
            self.pop(self.KEY_SOURCE, None)
        else:
            self[self.KEY_SOURCE] = value

    def has_text(self) -> bool:
        return bool(self.get(self.KEY_TEXT))


@dataclass(frozen=True)
class VectorDocument:
    """
    A document held by a store.

    Attributes:
        id: Caller-defined identifier, unique within a store's active set
        vector: Embedding, or NULL_VECTOR when none is available
        metadata: Document metadata, including the optional source text
        score: Ranking score, only set on query results
    """

    id: str
    vector: VectorLike = NULL_VECTOR
    metadata: Metadata = field(default_factory=Metadata)
    score: float | None = None

    def __post_init__(self) -> None:
        if isinstance(self.id, UUID) or not isinstance(self.id, str):
            object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "vector", as_vector(self.vector))
        if not isinstance(self.metadata, Metadata):
            object.__setattr__(self, "metadata", Metadata(self.metadata or {}))

    @property
    def text(self) -> str | None:
        """Source text of the document, if any."""
        return self.metadata.text

    def with_score(self, score: float | None) -> "VectorDocument":
        """Return a copy of this document carrying the given score."""
        return replace(self, score=score)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (score is not included)."""
        return {
            "id": self.id,
            "vector": self.vector.to_list() if self.vector else None,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VectorDocument":
        """
        Build a document from its dict form.

        A top-level "text" key is accepted as a shortcut for the reserved
        source-text metadata key.
        """
        metadata = Metadata(data.get("metadata") or {})
        if data.get("text") is not None:
            metadata.text = data["text"]
        return cls(
            id=data["id"],
            vector=as_vector(data.get("vector")),
            metadata=metadata,
        )
