"""Storage package for import index save/load operations."""

from .index_store import ImportIndex, IndexStore

__all__ = ["ImportIndex", "IndexStore"]
