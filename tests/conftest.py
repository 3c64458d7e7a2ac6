"""Pytest fixtures for ai-store tests."""

import pytest

from ai_store.config.settings import Settings
from ai_store.vectorstore.document import Metadata, VectorDocument
from ai_store.vectorstore.memory_store import InMemoryStore
from ai_store.vectorstore.vector import NULL_VECTOR, Vector

DOCUMENT_ID_1 = "367e550e-6c92-4f12-8a6b-3f3f1d5e8c9a"
DOCUMENT_ID_2 = "f47ac10b-58cc-4372-a567-0e02b2c3d479"
DOCUMENT_ID_3 = "123e4567-e89b-12d3-a456-426614174000"


def make_document(doc_id, vector=None, text=None, **metadata) -> VectorDocument:
    """Build a VectorDocument with optional source text."""
    meta = Metadata(metadata)
    if text is not None:
        meta.text = text
    return VectorDocument(
        id=doc_id,
        vector=Vector(vector) if vector is not None else NULL_VECTOR,
        metadata=meta,
    )


@pytest.fixture
def document_factory():
    """Expose make_document to tests."""
    return make_document


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        redis_url="redis://localhost:6379/1",  # Use DB 1 for tests
    )


@pytest.fixture
def axis_documents() -> list[VectorDocument]:
    """Three documents on the unit axes, inserted as A, B, C."""
    return [
        make_document("A", [1.0, 0.0, 0.0], "This is the first document about vectors and embeddings"),
        make_document("B", [0.0, 1.0, 0.0], "This is the second document about machine learning"),
        make_document("C", [0.0, 0.0, 1.0], "This is the third document about artificial intelligence"),
    ]


@pytest.fixture
def text_documents() -> list[VectorDocument]:
    """Documents without embeddings, only source text."""
    return [
        make_document("D", text="hello world"),
        make_document("E", text="goodbye"),
    ]


@pytest.fixture
def memory_store(axis_documents) -> InMemoryStore:
    """In-memory store holding the axis documents."""
    store = InMemoryStore()
    store.add(axis_documents)
    return store
