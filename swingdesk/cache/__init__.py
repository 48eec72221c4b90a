"""Analysis store implementations (in-memory and Valkey)."""

from .store import AnalysisStore, InMemoryAnalysisStore
from .valkey_store import ValkeyAnalysisStore, cache_key


__all__ = [
    "AnalysisStore",
    "InMemoryAnalysisStore",
    "ValkeyAnalysisStore",
    "cache_key",
]
