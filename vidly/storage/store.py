"""
In-Memory Entity Stores

Process-local storage for the rental core with:
- One mutual-exclusion lock per store
- Monotonic id assignment (ids are never reused until the store is cleared)
- Insertion-ordered records
- Auxiliary indexes kept under the same lock as the records

Stores are constructed explicitly and handed to repositories, so several
repository instances can share one store (and therefore one lock).
"""

import threading
from datetime import date
from typing import Callable, Dict, Generic, Iterable, List, Optional, Set, Tuple, TypeVar

import structlog

from vidly.core.exceptions import (
    DuplicateWatchlistItemError,
    InvalidArgumentError,
    MovieAlreadyRentedError,
    VidlyError,
)
from vidly.domain.models import Entity, Rental, RentalStatus, WatchlistItem

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=Entity)

Clock = Callable[[], date]


class EntityStore(Generic[T]):
    """
    Lock, id counter and record map for one entity type.

    Callers must hold `lock` while touching `items`, indexes, or calling
    `next_id()`.

    Example:
        store = EntityStore("movies")
        with store.lock:
            movie.id = store.next_id()
            store.items[movie.id] = movie
    """

    def __init__(self, name: str, clock: Optional[Clock] = None):
        self.name = name
        self.lock = threading.Lock()
        self.items: Dict[int, T] = {}
        self.clock: Clock = clock or date.today
        self._next_id = 1

    def next_id(self) -> int:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def today(self) -> date:
        return self.clock()

    def seed(self, entities: Iterable[T]) -> int:
        """
        Insert records with caller-chosen ids.

        The whole batch is checked before anything is written, so a rejected
        batch leaves the store untouched. Seeded ids must be at or above the
        id counter, which rules out ids held by live or removed records. The
        counter then moves past the largest seeded id. Returns the number of
        records inserted.

        Raises:
            InvalidArgumentError: an id is already taken or repeated
            ConflictError: a record breaks a store index (see subclasses)
        """
        records = [entity.model_copy(deep=True) for entity in entities]
        with self.lock:
            try:
                self._check_seed(records)
            except VidlyError as e:
                logger.warning("Seed rejected", store=self.name, reason=e.message)
                raise
            for record in records:
                self.items[record.id] = record
                self._index(record)
                self._next_id = max(self._next_id, record.id + 1)
        logger.info("Store seeded", store=self.name, records=len(records))
        return len(records)

    def clear(self) -> None:
        """Drop all records and restart the id counter at 1."""
        with self.lock:
            self.items.clear()
            self._reset_indexes()
            self._next_id = 1
        logger.info("Store cleared", store=self.name)

    def __len__(self) -> int:
        with self.lock:
            return len(self.items)

    def _check_seed(self, records: List[T]) -> None:
        seen: Set[int] = set()
        for record in records:
            if record.id < self._next_id or record.id in seen:
                raise InvalidArgumentError(
                    "id",
                    f"Id {record.id} is already taken in {self.name}.",
                    details={"store": self.name, "id": record.id},
                )
            seen.add(record.id)

    def _index(self, record: T) -> None:
        pass

    def _reset_indexes(self) -> None:
        pass


class RentalStore(EntityStore[Rental]):
    """Rental records plus the set of movie ids currently rented out."""

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__("rentals", clock)
        self.rented_movie_ids: Set[int] = set()

    def _check_seed(self, records: List[Rental]) -> None:
        super()._check_seed(records)
        rented = set(self.rented_movie_ids)
        for record in records:
            if record.status == RentalStatus.RETURNED:
                continue
            if record.movie_id in rented:
                raise MovieAlreadyRentedError(record.movie_id)
            rented.add(record.movie_id)

    def _index(self, record: Rental) -> None:
        if record.status != RentalStatus.RETURNED:
            self.rented_movie_ids.add(record.movie_id)

    def _reset_indexes(self) -> None:
        self.rented_movie_ids.clear()


class WatchlistStore(EntityStore[WatchlistItem]):
    """Watchlist records plus the set of (customer id, movie id) pairs."""

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__("watchlist", clock)
        self.customer_movie_pairs: Set[Tuple[int, int]] = set()

    def _check_seed(self, records: List[WatchlistItem]) -> None:
        super()._check_seed(records)
        pairs = set(self.customer_movie_pairs)
        for record in records:
            pair = (record.customer_id, record.movie_id)
            if pair in pairs:
                raise DuplicateWatchlistItemError(*pair)
            pairs.add(pair)

    def _index(self, record: WatchlistItem) -> None:
        self.customer_movie_pairs.add((record.customer_id, record.movie_id))

    def _reset_indexes(self) -> None:
        self.customer_movie_pairs.clear()
