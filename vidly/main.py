"""
Vidly Application Root

Builds the stores, repositories and services of the rental core and owns
their lifecycle.
"""

from datetime import date
from typing import Callable, Optional

import structlog

from vidly.config.logging import configure_logging
from vidly.config.settings import Settings, get_settings
from vidly.data.seed import seed_sample_data
from vidly.domain.models import Customer, Movie
from vidly.repositories import (
    CustomerRepository,
    MovieRepository,
    RentalRepository,
    WatchlistRepository,
)
from vidly.services import CustomerActivityService, DashboardService, RecommendationService
from vidly.storage.store import EntityStore, RentalStore, WatchlistStore

logger = structlog.get_logger(__name__)


class VidlyApp:
    """
    Composition root for the rental core.

    One store per entity type, shared by the repositories built on it. All
    stores use the same clock, so pinning the clock pins "today" everywhere.

    Example:
        with create_app() as app:
            app.rentals.checkout(Rental(customer_id=3, movie_id=3))
            dashboard = app.dashboard.get_dashboard()
    """

    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Callable[[], date]] = None):
        self.settings = settings or get_settings()
        self.clock = clock or date.today

        self.movie_store: EntityStore[Movie] = EntityStore("movies", self.clock)
        self.customer_store: EntityStore[Customer] = EntityStore("customers", self.clock)
        self.rental_store = RentalStore(self.clock)
        self.watchlist_store = WatchlistStore(self.clock)

        self.movies = MovieRepository(self.movie_store)
        self.customers = CustomerRepository(self.customer_store)
        self.rentals = RentalRepository(self.rental_store, self.settings.rentals)
        self.watchlist = WatchlistRepository(self.watchlist_store, self.settings.analytics)

        self.dashboard = DashboardService(self.rentals, self.movies, self.customers, self.settings.analytics)
        self.recommendations = RecommendationService(self.movies, self.rentals, self.settings.analytics)
        self.activity = CustomerActivityService(
            self.customers, self.movies, self.rentals, self.settings.analytics
        )

        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started

    def startup(self, configure_logs: bool = True) -> "VidlyApp":
        """Configure logging and load sample data if enabled"""
        if self._started:
            return self
        if configure_logs:
            configure_logging(settings=self.settings)

        logger.info(
            "Starting Vidly rental core",
            version=self.settings.version,
            environment=self.settings.app_env,
        )

        if self.settings.seed_sample_data:
            seed_sample_data(self.movies, self.customers, self.rentals, self.watchlist)

        self._started = True
        return self

    def shutdown(self) -> None:
        """Drop all in-memory state"""
        if not self._started:
            return
        logger.info("Shutting down...")
        for store in (self.movie_store, self.customer_store, self.rental_store, self.watchlist_store):
            store.clear()
        self._started = False

    def __enter__(self) -> "VidlyApp":
        return self.startup()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


def create_app(settings: Optional[Settings] = None, clock: Optional[Callable[[], date]] = None) -> VidlyApp:
    """Build an application (not yet started)"""
    return VidlyApp(settings=settings, clock=clock)


def main() -> None:
    """Start with sample data and log a dashboard summary"""
    with create_app() as app:
        data = app.dashboard.get_dashboard()
        logger.info(
            "Dashboard summary",
            movies=data.movie_count,
            customers=data.customer_count,
            active=data.stats.active_rentals,
            overdue=data.stats.overdue_rentals,
            returned=data.stats.returned_rentals,
            revenue=str(data.stats.total_revenue),
        )


if __name__ == "__main__":
    main()
