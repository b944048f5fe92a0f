"""
Repository Base

Shared CRUD plumbing for the in-memory repositories: argument checks,
validated snapshots and defensive copies. Every read hands out deep copies
made while the store lock is held, so callers can mutate results freely.
"""

from typing import Generic, Iterable, List, Optional, TypeVar

import structlog
from pydantic import ValidationError

from vidly.core.exceptions import InvalidArgumentError, NotFoundError, NullArgumentError
from vidly.domain.models import Entity
from vidly.storage.store import EntityStore

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=Entity)


def require(value, argument: str):
    """Fail fast on a missing required argument"""
    if value is None:
        raise NullArgumentError(argument)
    return value


class InMemoryRepository(Generic[T]):
    """
    Thread-safe CRUD over an `EntityStore`.

    Subclasses set `entity_name` and override `_apply_update`
    to control which fields an update may change.
    """

    entity_name: str = "Entity"

    def __init__(self, store: EntityStore[T]):
        self._store = require(store, "store")

    @property
    def store(self) -> EntityStore[T]:
        return self._store

    def today(self):
        return self._store.today()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, entity_id: int) -> Optional[T]:
        with self._store.lock:
            entity = self._store.items.get(entity_id)
            return self._clone(entity) if entity is not None else None

    def get_all(self) -> List[T]:
        with self._store.lock:
            return [self._clone(e) for e in self._store.items.values()]

    def count(self) -> int:
        return len(self._store)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, entity: T) -> T:
        """Insert a copy of `entity` under a newly assigned id and return it"""
        require(entity, self.entity_name.lower())
        record = self._snapshot(entity)

        with self._store.lock:
            record.id = self._store.next_id()
            self._store.items[record.id] = record
            result = self._clone(record)

        logger.info(f"{self.entity_name} added", entity_id=result.id)
        return result

    def update(self, entity: T) -> T:
        require(entity, self.entity_name.lower())
        record = self._snapshot(entity)

        with self._store.lock:
            existing = self._store.items.get(record.id)
            if existing is None:
                self._log_not_found("update", record.id)
                raise NotFoundError(self.entity_name, record.id)
            self._apply_update(existing, record)
            result = self._clone(existing)

        logger.info(f"{self.entity_name} updated", entity_id=result.id)
        return result

    def remove(self, entity_id: int) -> None:
        with self._store.lock:
            if self._store.items.pop(entity_id, None) is None:
                self._log_not_found("remove", entity_id)
                raise NotFoundError(self.entity_name, entity_id)

        logger.info(f"{self.entity_name} removed", entity_id=entity_id)

    def seed(self, entities: Iterable[T]) -> int:
        """Load records keeping their ids (sample data, fixtures). Ids must be unused."""
        require(entities, "entities")
        return self._store.seed([self._snapshot(e) for e in entities])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _apply_update(self, existing: T, incoming: T) -> None:
        for field_name in type(existing).model_fields:
            if field_name != "id":
                setattr(existing, field_name, getattr(incoming, field_name))

    def _snapshot(self, entity: T) -> T:
        """Re-validate the caller's object into a private copy"""
        try:
            return type(entity).model_validate(entity.model_dump())
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            raise InvalidArgumentError(
                self.entity_name.lower(),
                f"Invalid {self.entity_name.lower()}: {errors[0]['field']} {errors[0]['message']}",
                details={"errors": errors},
            ) from e

    @staticmethod
    def _clone(entity: T) -> T:
        return entity.model_copy(deep=True)

    def _log_not_found(self, operation: str, entity_id: int) -> None:
        logger.warning(
            f"{self.entity_name} not found",
            operation=operation,
            entity_id=entity_id,
        )
