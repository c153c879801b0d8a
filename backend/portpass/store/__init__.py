# Overview: Store construction; picks the persistence backend named by STORE_BACKEND.

from .base import PassStore
from .memory import MemoryStore
from .sql import SqlAlchemyStore

BACKENDS = {
    "memory": MemoryStore,
    "sql": SqlAlchemyStore,
}


def build_store(backend: str) -> PassStore:
    try:
        factory = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown STORE_BACKEND {backend!r}; expected one of: {', '.join(sorted(BACKENDS))}"
        ) from None
    return factory()


__all__ = ["PassStore", "MemoryStore", "SqlAlchemyStore", "build_store"]
