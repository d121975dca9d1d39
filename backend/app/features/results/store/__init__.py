"""Result stores."""

from .base import ResultStore
from .memory import MemoryResultStore
from .sql import SqlResultStore

__all__ = [
    "ResultStore",
    "MemoryResultStore",
    "SqlResultStore",
]
