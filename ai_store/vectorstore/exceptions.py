"""Exceptions raised by stores, queries and the distance calculator."""

from typing import Any


class StoreError(Exception):
    """Base class for all store errors."""


class InvalidArgumentError(StoreError, ValueError):
    """Raised when a value object or option is constructed with invalid data."""


class UnsupportedQueryTypeError(StoreError):
    """
    Raised when a store is asked to execute a query variant it cannot handle.

    Attributes:
        query_type: Value of the offending query type (e.g. "hybrid")
        store: The store that rejected the query
    """

    def __init__(self, query_type: Any, store: Any):
        self.query_type = getattr(query_type, "value", query_type)
        self.store = store
        super().__init__(
            f'Query type "{self.query_type}" is not supported by store '
            f'"{type(store).__name__}"'
        )
