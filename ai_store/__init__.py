"""ai-store: vector retrieval and ranking over pluggable document stores."""

__version__ = "0.1.0"
