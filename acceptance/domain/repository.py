"""
================================================================================
In-Memory Repositories
================================================================================

Lightweight persistence used by setup steps and the domain suite.

Each repository stores entities of one kind and assigns sequential ids.
`Database` groups repositories so the whole store can be truncated before
every scenario.

================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Iterator, List, Optional, TypeVar

from loguru import logger


T = TypeVar("T")


class InMemoryRepository(Generic[T]):
    """
    Stores entities in insertion order.

    Usage:
        >>> countries = InMemoryRepository("country")
        >>> countries.add(country)
        >>> countries.find_one_by(code="FR")
    """

    def __init__(self, name: str):
        self.name = name
        self._items: List[T] = []
        self._next_id = 1

    def add(self, entity: T) -> T:
        """Persist entity, assigning an id when it has none."""
        if entity in self._items:
            return entity
        if getattr(entity, "id", None) is None:
            entity.id = self._next_id
            self._next_id += 1
        self._items.append(entity)
        logger.debug(f"[{self.name}] persisted {entity!r}")
        return entity

    def remove(self, entity: T) -> None:
        if entity in self._items:
            self._items.remove(entity)
            logger.debug(f"[{self.name}] removed {entity!r}")

    def find(self, entity_id: Any) -> Optional[T]:
        try:
            entity_id = int(entity_id)
        except (TypeError, ValueError):
            return None
        return self.find_one_by(id=entity_id)

    def find_by(self, **criteria: Any) -> List[T]:
        return [item for item in self._items if self._matches(item, criteria)]

    def find_one_by(self, **criteria: Any) -> Optional[T]:
        for item in self._items:
            if self._matches(item, criteria):
                return item
        return None

    def find_all(self) -> List[T]:
        return list(self._items)

    def purge(self) -> None:
        self._items.clear()
        self._next_id = 1

    @staticmethod
    def _matches(item: T, criteria: Dict[str, Any]) -> bool:
        return all(getattr(item, key, None) == value for key, value in criteria.items())

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))


class Database:
    """Named collection of repositories sharing one lifecycle."""

    def __init__(self, *names: str):
        self._repositories: Dict[str, InMemoryRepository] = {}
        for name in names:
            self.repository(name)

    def repository(self, name: str) -> InMemoryRepository:
        """Return the repository called `name`, creating it on first use."""
        if name not in self._repositories:
            self._repositories[name] = InMemoryRepository(name)
        return self._repositories[name]

    def purge(self) -> None:
        """Truncate every repository."""
        for repository in self._repositories.values():
            repository.purge()
        logger.debug(f"Database purged ({', '.join(self._repositories) or 'empty'})")

    @property
    def names(self) -> List[str]:
        return list(self._repositories)


__all__ = [
    "InMemoryRepository",
    "Database",
]
