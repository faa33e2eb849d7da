from yodo.providers.cache.memory_cache import CacheEntry, MemoryCacheProvider

__all__ = ["CacheEntry", "MemoryCacheProvider"]
