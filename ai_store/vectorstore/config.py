"""
Configuration for vector stores and the retriever.

Uses Pydantic BaseSettings for environment variable support.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_store.vectorstore.distance import DistanceStrategy


class VectorStoreConfig(BaseSettings):
    """
    Configuration for local stores and Retriever.

    All settings can be overridden via environment variables with
    VECTORSTORE_ prefix (e.g., VECTORSTORE_DISTANCE_STRATEGY=euclidean).
    """

    distance_strategy: DistanceStrategy = Field(
        default=DistanceStrategy.COSINE,
        description="Scoring strategy used by local stores",
    )
    default_semantic_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Semantic ratio for hybrid queries when none is given",
    )
    cache_key: str = Field(
        default="_vectors",
        min_length=1,
        description="Redis key holding the cache store's documents",
    )

    model_config = SettingsConfigDict(env_prefix="VECTORSTORE_")
