"""Adapters layer - corpus and preference storage.

Following Cosmic Python Chapter 2: Repository Pattern
"""

from .corpus_repository import (
    AbstractCorpusRepository,
    CorpusReadError,
    InMemoryCorpusRepository,
    JsonCorpusRepository,
)
from .key_value_store import (
    AbstractKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)


__all__ = [
    "AbstractCorpusRepository",
    "AbstractKeyValueStore",
    "CorpusReadError",
    "InMemoryCorpusRepository",
    "InMemoryKeyValueStore",
    "JsonCorpusRepository",
    "JsonFileKeyValueStore",
]
