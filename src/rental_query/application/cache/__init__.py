"""Application cache – TTL-bounded list memoization."""
from rental_query.application.cache.keys import canonical_signature
from rental_query.application.cache.query_cache import CacheEntry, QueryCache

__all__ = ["CacheEntry", "QueryCache", "canonical_signature"]
