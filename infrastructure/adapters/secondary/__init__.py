"""
Secondary (Driven) Adapters - Infrastructure implementations.

This package contains implementations of secondary ports that the application drives:
- caching: In-process and Redis caches
- storage: Car storage backend and repository
"""
