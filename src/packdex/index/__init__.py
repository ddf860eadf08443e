"""
Pack index and search.

Key Components:
    - build_index: Scan a registry root into a PackIndex
    - PackIndex: Name-keyed packs plus scan warnings
    - search: Rank packs against a query string
"""

from packdex.index.builder import PackIndex, build_index
from packdex.index.lookup import search

__all__ = [
    "PackIndex",
    "build_index",
    "search",
]
