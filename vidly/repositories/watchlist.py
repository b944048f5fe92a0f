"""
Watchlist Repository

Per-customer "rent later" lists. The (customer, movie) pair index lives in
the watchlist store and is checked and updated in the same critical section
as the insert, so a pair can never be listed twice.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

import structlog

from vidly.config.settings import AnalyticsSettings, resolve_analytics_settings
from vidly.core.exceptions import DuplicateWatchlistItemError, InvalidArgumentError, NotFoundError
from vidly.domain.models import WatchlistItem, WatchlistPriority, sort_name
from vidly.repositories.base import InMemoryRepository, require
from vidly.storage.store import WatchlistStore

logger = structlog.get_logger(__name__)


@dataclass
class WatchlistStats:
    """Item counts for one customer's watchlist"""
    total_items: int = 0
    normal_count: int = 0
    high_count: int = 0
    must_watch_count: int = 0


@dataclass
class PopularWatchlistMovie:
    """A movie and how many customers have it on their watchlist"""
    movie_id: int
    movie_name: Optional[str]
    watchlist_count: int


def _priority_order(item: WatchlistItem):
    return (item.priority, item.added_date or date.min)


class WatchlistRepository(InMemoryRepository[WatchlistItem]):
    """
    In-memory watchlist repository.

    Lists are ordered by priority (Must Watch first), then most recently
    added.
    """

    entity_name = "WatchlistItem"

    def __init__(
        self,
        store: Optional[WatchlistStore] = None,
        settings: Optional[AnalyticsSettings] = None,
    ):
        super().__init__(store if store is not None else WatchlistStore())
        self.settings = resolve_analytics_settings(settings)

    def get_all(self) -> List[WatchlistItem]:
        items = super().get_all()
        items.sort(key=_priority_order, reverse=True)
        return items

    def get_by_customer(self, customer_id: int) -> List[WatchlistItem]:
        with self._store.lock:
            items = [self._clone(i) for i in self._store.items.values() if i.customer_id == customer_id]
        items.sort(key=_priority_order, reverse=True)
        return items

    def is_on_watchlist(self, customer_id: int, movie_id: int) -> bool:
        with self._store.lock:
            return (customer_id, movie_id) in self._store.customer_movie_pairs

    def add(self, item: WatchlistItem) -> WatchlistItem:
        """
        Put a movie on a customer's watchlist.

        Raises:
            NullArgumentError: item is None
            DuplicateWatchlistItemError: the pair is already listed
        """
        require(item, "item")
        record = self._snapshot(item)
        pair = (record.customer_id, record.movie_id)

        with self._store.lock:
            if pair in self._store.customer_movie_pairs:
                logger.warning(
                    "Watchlist conflict",
                    operation="add",
                    customer_id=record.customer_id,
                    movie_id=record.movie_id,
                )
                raise DuplicateWatchlistItemError(record.customer_id, record.movie_id)

            if record.added_date is None:
                record.added_date = self._store.today()
            record.id = self._store.next_id()
            self._store.items[record.id] = record
            self._store.customer_movie_pairs.add(pair)
            result = self._clone(record)

        logger.info(
            "Watchlist item added",
            item_id=result.id,
            customer_id=result.customer_id,
            movie_id=result.movie_id,
            priority=result.priority.name,
        )
        return result

    def remove(self, item_id: int) -> None:
        with self._store.lock:
            item = self._store.items.pop(item_id, None)
            if item is None:
                self._log_not_found("remove", item_id)
                raise NotFoundError(self.entity_name, item_id)
            self._store.customer_movie_pairs.discard((item.customer_id, item.movie_id))

        logger.info("Watchlist item removed", item_id=item_id)

    def remove_by_customer_and_movie(self, customer_id: int, movie_id: int) -> bool:
        """Remove the pair if listed. Returns whether anything was removed."""
        with self._store.lock:
            if (customer_id, movie_id) not in self._store.customer_movie_pairs:
                return False
            item_id = next(
                i.id for i in self._store.items.values()
                if i.customer_id == customer_id and i.movie_id == movie_id
            )
            del self._store.items[item_id]
            self._store.customer_movie_pairs.discard((customer_id, movie_id))

        logger.info("Watchlist item removed", item_id=item_id, customer_id=customer_id, movie_id=movie_id)
        return True

    def clear_customer_watchlist(self, customer_id: int) -> int:
        """Remove every item of a customer. Returns the number removed."""
        with self._store.lock:
            doomed = [i for i in self._store.items.values() if i.customer_id == customer_id]
            for item in doomed:
                del self._store.items[item.id]
                self._store.customer_movie_pairs.discard((item.customer_id, item.movie_id))

        logger.info("Watchlist cleared", customer_id=customer_id, removed=len(doomed))
        return len(doomed)

    def get_stats(self, customer_id: int) -> WatchlistStats:
        with self._store.lock:
            stats = WatchlistStats()
            for item in self._store.items.values():
                if item.customer_id != customer_id:
                    continue
                stats.total_items += 1
                if item.priority == WatchlistPriority.MUST_WATCH:
                    stats.must_watch_count += 1
                elif item.priority == WatchlistPriority.HIGH:
                    stats.high_count += 1
                else:
                    stats.normal_count += 1
        return stats

    def get_most_watchlisted(self, limit: Optional[int] = None) -> List[PopularWatchlistMovie]:
        """
        Movies on the most watchlists.

        Args:
            limit: Maximum entries (defaults to the configured limit); must be >= 1

        Returns:
            Entries ordered by count descending, then movie name

        Raises:
            InvalidArgumentError: limit < 1
        """
        if limit is None:
            limit = self.settings.popular_watchlist_limit
        if limit < 1:
            raise InvalidArgumentError("limit", "Limit must be at least 1.", details={"value": limit})

        with self._store.lock:
            groups: Dict[int, PopularWatchlistMovie] = {}
            for item in self._store.items.values():
                entry = groups.get(item.movie_id)
                if entry is None:
                    groups[item.movie_id] = PopularWatchlistMovie(item.movie_id, item.movie_name, 1)
                else:
                    entry.watchlist_count += 1

        ranked = sorted(groups.values(), key=lambda e: (-e.watchlist_count, sort_name(e.movie_name)))
        return ranked[:limit]

    def _apply_update(self, existing: WatchlistItem, incoming: WatchlistItem) -> None:
        existing.note = incoming.note
        existing.priority = incoming.priority
