"""Generic collection contract consumed by the booking allocator."""

from __future__ import annotations

import dataclasses
from typing import Generic, Optional, Protocol, TypeVar

from hotel_booking.utils.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class RepositoryError(Exception):
    """Base failure raised by repository implementations."""


class EntityNotFoundError(RepositoryError):
    """Raised when edit/remove targets an unknown id."""


class EntityInUseError(RepositoryError):
    """Raised when removing an entity that other rows still reference."""


class Repository(Protocol[T]):
    def get_all(self) -> list[T]:
        ...

    def get(self, entity_id: int) -> Optional[T]:
        ...

    def add(self, entity: T) -> T:
        ...

    def edit(self, entity: T) -> None:
        ...

    def remove(self, entity_id: int) -> None:
        ...


def assign_id(entity: T, entity_id: int) -> T:
    """Return the entity carrying `entity_id`.

    Frozen dataclasses get a copy; mutable ones are updated in place so the
    caller's reference sees the stored id.
    """
    params = getattr(entity, "__dataclass_params__", None)
    if params is not None and params.frozen:
        return dataclasses.replace(entity, id=entity_id)
    entity.id = entity_id  # type: ignore[attr-defined]
    return entity


class InMemoryRepository(Generic[T]):
    """List-backed repository preserving insertion order."""

    def __init__(self, entities: Optional[list[T]] = None) -> None:
        self._entities: list[T] = []
        for entity in entities or []:
            self.add(entity)

    def get_all(self) -> list[T]:
        return list(self._entities)

    def get(self, entity_id: int) -> Optional[T]:
        for entity in self._entities:
            if entity.id == entity_id:  # type: ignore[attr-defined]
                return entity
        return None

    def add(self, entity: T) -> T:
        if entity.id is None:  # type: ignore[attr-defined]
            entity = assign_id(entity, self._next_id())
        self._entities.append(entity)
        logger.debug("Stored %s id=%s in memory", type(entity).__name__, entity.id)  # type: ignore[attr-defined]
        return entity

    def edit(self, entity: T) -> None:
        index = self._index_of(entity.id)  # type: ignore[attr-defined]
        self._entities[index] = entity

    def remove(self, entity_id: int) -> None:
        del self._entities[self._index_of(entity_id)]

    def _next_id(self) -> int:
        known_ids = [entity.id for entity in self._entities if entity.id is not None]  # type: ignore[attr-defined]
        return max(known_ids, default=0) + 1

    def _index_of(self, entity_id: Optional[int]) -> int:
        for index, entity in enumerate(self._entities):
            if entity.id == entity_id:  # type: ignore[attr-defined]
                return index
        raise EntityNotFoundError(f"No entity with id {entity_id}")
