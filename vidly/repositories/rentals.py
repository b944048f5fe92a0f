"""
Rental Repository

The rental state machine. Every operation runs inside a single acquisition
of the rental store lock, so the record map and the rented-movie index can
never be observed out of step.

Lifecycle:
- checkout: availability check and insert in one critical section
- lazy Active -> Overdue transition on every read
- return_rental: one-way transition to Returned, late fee computed once

Pricing defaults (daily rate, rental period, late fee per day) come from
`RentalSettings`.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Callable, Iterable, List, Optional

import structlog

from vidly.config.settings import RentalSettings, resolve_rental_settings
from vidly.core.exceptions import (
    MovieAlreadyRentedError,
    NotFoundError,
    RentalAlreadyReturnedError,
)
from vidly.domain.models import (
    ZERO,
    Rental,
    RentalStatus,
    derive_status,
    late_fee_for,
    total_cost,
)
from vidly.repositories.base import InMemoryRepository, require
from vidly.storage.store import RentalStore

logger = structlog.get_logger(__name__)


@dataclass
class RentalStats:
    """Summary statistics for the rental system"""
    total_rentals: int = 0
    active_rentals: int = 0
    overdue_rentals: int = 0
    returned_rentals: int = 0
    total_revenue: Decimal = ZERO
    total_late_fees: Decimal = ZERO


class RentalRepository(InMemoryRepository[Rental]):
    """
    Thread-safe in-memory rental repository.

    The store keeps the set of movie ids with a non-returned rental, giving
    O(1) availability checks. Checkout tests and updates that set under the
    same lock that inserts the rental, so two concurrent checkouts of one
    movie can never both succeed.

    Example:
        rentals = RentalRepository(RentalStore())
        rental = rentals.checkout(Rental(customer_id=1, movie_id=1))
        rentals.is_movie_rented_out(1)      # True
        rentals.return_rental(rental.id)
    """

    entity_name = "Rental"

    def __init__(
        self,
        store: Optional[RentalStore] = None,
        settings: Optional[RentalSettings] = None,
    ):
        super().__init__(store if store is not None else RentalStore())
        self.settings = resolve_rental_settings(settings)

    # ------------------------------------------------------------------
    # Reads (each refreshes derived status first)
    # ------------------------------------------------------------------

    def get_by_id(self, rental_id: int) -> Optional[Rental]:
        with self._store.lock:
            rental = self._store.items.get(rental_id)
            if rental is None:
                return None
            self._refresh_status(rental, self._store.today())
            return self._clone(rental)

    def get_all(self) -> List[Rental]:
        return self._select(lambda r: True)

    def get_active_by_customer(self, customer_id: int) -> List[Rental]:
        """Non-returned rentals for a customer, soonest due first"""
        results = self._select(
            lambda r: r.customer_id == customer_id and r.status != RentalStatus.RETURNED
        )
        results.sort(key=lambda r: r.due_date)
        return results

    def get_by_movie(self, movie_id: int) -> List[Rental]:
        """All rentals of a movie, newest first"""
        results = self._select(lambda r: r.movie_id == movie_id)
        results.sort(key=lambda r: r.rental_date, reverse=True)
        return results

    def get_overdue(self) -> List[Rental]:
        """Rentals past due and not returned, most overdue first"""
        results = self._select(lambda r: r.status == RentalStatus.OVERDUE)
        results.sort(key=lambda r: r.due_date)
        return results

    def search(self, query: Optional[str] = None, status: Optional[RentalStatus] = None) -> List[Rental]:
        """
        Search rentals by customer or movie name.

        Args:
            query: Case-insensitive substring of the customer or movie name;
                blank matches everything
            status: Exact status filter, applied after status refresh

        Returns:
            Matching rentals, newest first
        """
        needle = query.strip().casefold() if query and query.strip() else None

        def matches(rental: Rental) -> bool:
            if needle is not None:
                in_customer = rental.customer_name is not None and needle in rental.customer_name.casefold()
                in_movie = rental.movie_name is not None and needle in rental.movie_name.casefold()
                if not (in_customer or in_movie):
                    return False
            return status is None or rental.status == status

        results = self._select(matches)
        results.sort(key=lambda r: r.rental_date, reverse=True)
        return results

    def is_movie_rented_out(self, movie_id: int) -> bool:
        with self._store.lock:
            return movie_id in self._store.rented_movie_ids

    def get_stats(self) -> RentalStats:
        """Status counts, revenue and late fees in one pass"""
        with self._store.lock:
            today = self._store.today()
            stats = RentalStats(total_rentals=len(self._store.items))
            for rental in self._store.items.values():
                self._refresh_status(rental, today)
                if rental.status == RentalStatus.ACTIVE:
                    stats.active_rentals += 1
                elif rental.status == RentalStatus.OVERDUE:
                    stats.overdue_rentals += 1
                else:
                    stats.returned_rentals += 1
                stats.total_revenue += total_cost(rental, today)
                stats.total_late_fees += rental.late_fee
        return stats

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def checkout(self, rental: Rental) -> Rental:
        """
        Rent a movie out.

        The availability check and the insert share one critical section.
        Unset fields default to: rental date today, due date rental date plus
        the default rental period, daily rate the default rate.

        Raises:
            NullArgumentError: rental is None
            MovieAlreadyRentedError: the movie has a non-returned rental
        """
        require(rental, "rental")
        record = self._snapshot(rental)

        with self._store.lock:
            if record.movie_id in self._store.rented_movie_ids:
                self._log_conflict("checkout", movie_id=record.movie_id)
                raise MovieAlreadyRentedError(record.movie_id)

            self._apply_defaults(record, self._store.today())
            record.status = RentalStatus.ACTIVE
            record.return_date = None
            record.late_fee = ZERO
            self._insert(record)
            result = self._clone(record)

        logger.info(
            "Rental checked out",
            rental_id=result.id,
            movie_id=result.movie_id,
            customer_id=result.customer_id,
            due_date=str(result.due_date),
        )
        return result

    def return_rental(self, rental_id: int) -> Rental:
        """
        Mark a rental returned today and charge the late fee.

        Raises:
            NotFoundError: no rental with this id
            RentalAlreadyReturnedError: the rental was already returned
        """
        with self._store.lock:
            rental = self._store.items.get(rental_id)
            if rental is None:
                self._log_not_found("return", rental_id)
                raise NotFoundError(self.entity_name, rental_id)
            if rental.status == RentalStatus.RETURNED:
                self._log_conflict("return", rental_id=rental_id)
                raise RentalAlreadyReturnedError(rental_id)

            today = self._store.today()
            rental.return_date = today
            rental.status = RentalStatus.RETURNED
            rental.late_fee = late_fee_for(rental.due_date, today, self.settings.late_fee_per_day)
            self._store.rented_movie_ids.discard(rental.movie_id)
            result = self._clone(rental)

        logger.info(
            "Rental returned",
            rental_id=rental_id,
            movie_id=result.movie_id,
            late_fee=str(result.late_fee),
        )
        return result

    # ------------------------------------------------------------------
    # General CRUD
    # ------------------------------------------------------------------

    def add(self, rental: Rental) -> Rental:
        """
        Insert a rental record as given (history imports, corrections).

        Unlike `checkout` the status, return date and late fee are kept.
        Missing dates and rate get the checkout defaults. A non-returned
        record is still subject to the one-rental-per-movie rule.

        Raises:
            NullArgumentError: rental is None
            MovieAlreadyRentedError: non-returned record for a rented movie
        """
        require(rental, "rental")
        record = self._snapshot(rental)

        with self._store.lock:
            if record.status != RentalStatus.RETURNED and record.movie_id in self._store.rented_movie_ids:
                self._log_conflict("add", movie_id=record.movie_id)
                raise MovieAlreadyRentedError(record.movie_id)

            self._apply_defaults(record, self._store.today())
            self._insert(record)
            result = self._clone(record)

        logger.info("Rental added", rental_id=result.id, status=result.status.value)
        return result

    def update(self, rental: Rental) -> Rental:
        """
        Replace a rental's fields, keeping the rented-movie index in step.

        Raises:
            NullArgumentError: rental is None
            NotFoundError: no rental with this id
            RentalAlreadyReturnedError: update would reopen a returned rental
            MovieAlreadyRentedError: update would leave the rental open on a
                movie another open rental holds
        """
        require(rental, "rental")
        record = self._snapshot(rental)

        with self._store.lock:
            existing = self._store.items.get(record.id)
            if existing is None:
                self._log_not_found("update", record.id)
                raise NotFoundError(self.entity_name, record.id)

            was_open = existing.status != RentalStatus.RETURNED
            stays_open = record.status != RentalStatus.RETURNED

            if not was_open and stays_open:
                self._log_conflict("update", rental_id=record.id)
                raise RentalAlreadyReturnedError(record.id)

            holds_same_movie = was_open and existing.movie_id == record.movie_id
            if stays_open and not holds_same_movie and record.movie_id in self._store.rented_movie_ids:
                self._log_conflict("update", rental_id=record.id, movie_id=record.movie_id)
                raise MovieAlreadyRentedError(record.movie_id)

            # Keep stored dates/rate when the update leaves them unset
            record.rental_date = record.rental_date or existing.rental_date
            record.due_date = record.due_date or existing.due_date
            record.daily_rate = record.daily_rate or existing.daily_rate

            if was_open:
                self._store.rented_movie_ids.discard(existing.movie_id)
            self._apply_update(existing, record)
            if stays_open:
                self._store.rented_movie_ids.add(existing.movie_id)
            result = self._clone(existing)

        logger.info("Rental updated", rental_id=result.id, status=result.status.value)
        return result

    def remove(self, rental_id: int) -> None:
        with self._store.lock:
            rental = self._store.items.pop(rental_id, None)
            if rental is None:
                self._log_not_found("remove", rental_id)
                raise NotFoundError(self.entity_name, rental_id)
            if rental.status != RentalStatus.RETURNED:
                self._store.rented_movie_ids.discard(rental.movie_id)

        logger.info("Rental removed", rental_id=rental_id, movie_id=rental.movie_id)

    def seed(self, rentals: Iterable[Rental]) -> int:
        """
        Load rental records keeping their ids, status and fees.

        Missing dates and rate get the checkout defaults. At most one
        non-returned record per movie is accepted across the store and
        the batch.

        Raises:
            InvalidArgumentError: an id is already taken
            MovieAlreadyRentedError: two open rentals of one movie
        """
        require(rentals, "rentals")
        today = self._store.today()
        records = [self._snapshot(r) for r in rentals]
        for record in records:
            self._apply_defaults(record, today)
        return self._store.seed(records)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _select(self, predicate: Callable[[Rental], bool]) -> List[Rental]:
        with self._store.lock:
            today = self._store.today()
            results = []
            for rental in self._store.items.values():
                self._refresh_status(rental, today)
                if predicate(rental):
                    results.append(self._clone(rental))
            return results

    def _refresh_status(self, rental: Rental, today: date) -> None:
        # Caller holds the lock
        status = derive_status(rental, today)
        if status != rental.status:
            logger.debug("Rental now overdue", rental_id=rental.id, due_date=str(rental.due_date))
            rental.status = status

    def _apply_defaults(self, record: Rental, today: date) -> None:
        if record.daily_rate is None:
            record.daily_rate = self.settings.default_daily_rate
        if record.rental_date is None:
            record.rental_date = today
        if record.due_date is None:
            record.due_date = record.rental_date + timedelta(days=self.settings.default_rental_days)

    def _insert(self, record: Rental) -> None:
        record.id = self._store.next_id()
        self._store.items[record.id] = record
        if record.status != RentalStatus.RETURNED:
            self._store.rented_movie_ids.add(record.movie_id)

    def _log_conflict(self, operation: str, **context) -> None:
        logger.warning("Rental conflict", operation=operation, **context)
