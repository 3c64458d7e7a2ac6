"""
Command-line interface for ai-store.

Usage:
    ai-store search "crime family" --corpus movies.json
    ai-store search "crime family" --vector 0.1,0.4,0.2 --corpus movies.json
    ai-store index movies.json   # Load a corpus into the Redis cache store
    ai-store drop                # Clear the Redis cache store

A corpus is a JSON array of objects with "id", optional "vector",
optional "text" and optional "metadata".
"""

import json
import sys
from pathlib import Path

import click

from ai_store.config.settings import get_settings
from ai_store.observability.logging import setup_logging
from ai_store.vectorstore.base import LocalVectorStore
from ai_store.vectorstore.cache_store import CacheStore
from ai_store.vectorstore.config import VectorStoreConfig
from ai_store.vectorstore.distance import DistanceCalculator, DistanceStrategy
from ai_store.vectorstore.document import VectorDocument
from ai_store.vectorstore.exceptions import StoreError
from ai_store.vectorstore.memory_store import InMemoryStore
from ai_store.vectorstore.query import BaseQuery, HybridQuery, TextQuery, VectorQuery
from ai_store.vectorstore.vector import Vector


def load_corpus(path: str | Path) -> list[VectorDocument]:
    """
    Load documents from a JSON corpus file.

    Raises:
        click.BadParameter: If the file is not a JSON array of documents
    """
    try:
        entries = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}") from e

    if not isinstance(entries, list):
        raise click.BadParameter(f"{path} must contain a JSON array of documents")

    try:
        return [VectorDocument.from_dict(entry) for entry in entries]
    except (AttributeError, KeyError, TypeError, StoreError) as e:
        raise click.BadParameter(f"{path} contains an invalid document: {e}") from e


def _parse_vector(value: str | None) -> Vector | None:
    if value is None:
        return None
    try:
        return Vector([float(part) for part in value.split(",") if part.strip()])
    except (ValueError, StoreError) as e:
        raise click.BadParameter(f"invalid vector {value!r}: {e}", param_hint="--vector") from e


def _build_query(text: str, vector: Vector | None, semantic_ratio: float | None) -> BaseQuery:
    if text and vector is not None:
        ratio = semantic_ratio if semantic_ratio is not None else VectorStoreConfig().default_semantic_ratio
        return HybridQuery(vector, text, ratio)
    if vector is not None:
        return VectorQuery(vector)
    if text:
        return TextQuery(text)
    raise click.UsageError("Provide a QUERY text, a --vector, or both")


def _cache_store(strategy: str | None = None) -> CacheStore:
    config = VectorStoreConfig()
    calculator = DistanceCalculator(strategy or config.distance_strategy)
    return CacheStore.from_url(str(get_settings().redis_url), calculator=calculator, config=config)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """ai-store - vector retrieval over in-memory and cache-backed stores."""
    setup_logging("DEBUG" if debug else None)


@main.command()
@click.argument("query", default="")
@click.option(
    "--corpus",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON corpus to search in memory (default: Redis cache store)",
)
@click.option("--vector", "vector_csv", help="Comma-separated query embedding")
@click.option(
    "--semantic-ratio",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Weight of the vector score in hybrid queries",
)
@click.option("--max-items", type=click.IntRange(min=1), default=None, help="Maximum results")
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in DistanceStrategy]),
    default=None,
    help="Distance strategy",
)
def search(
    query: str,
    corpus: str | None,
    vector_csv: str | None,
    semantic_ratio: float | None,
    max_items: int | None,
    strategy: str | None,
) -> None:
    """Search documents by text, vector, or both (hybrid)."""
    query_object = _build_query(query, _parse_vector(vector_csv), semantic_ratio)

    store: LocalVectorStore
    if corpus:
        store = InMemoryStore(DistanceCalculator(strategy or VectorStoreConfig().distance_strategy))
        store.add(load_corpus(corpus))
    else:
        store = _cache_store(strategy)

    try:
        results = list(store.query(query_object, {"maxItems": max_items}))
    except StoreError as e:
        raise click.ClickException(str(e)) from e

    if not results:
        click.echo("No documents found")
        sys.exit(1)

    click.echo(f"\n{query_object.type.value.capitalize()} query results:")
    click.echo("-" * 40)
    for rank, doc in enumerate(results, start=1):
        score = f"{doc.score:.4f}" if doc.score is not None else "-"
        click.echo(f"{rank}. {doc.id}  score={score}")
        if doc.text:
            click.echo(f"   {doc.text[:80]}")
    click.echo("-" * 40)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False))
def index(corpus: str) -> None:
    """Load a JSON corpus into the Redis cache store."""
    documents = load_corpus(corpus)
    store = _cache_store()
    store.setup()
    store.add(documents)
    click.echo(f"Indexed {len(documents)} documents into {store.cache_key}")


@main.command()
def drop() -> None:
    """Remove all documents from the Redis cache store."""
    store = _cache_store()
    store.drop()
    click.echo(f"Dropped {store.cache_key}")


if __name__ == "__main__":
    main()
