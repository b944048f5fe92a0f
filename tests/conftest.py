"""
Test Suite Configuration
"""
from datetime import date, timedelta

import pytest

from vidly.config import Settings
from vidly.domain import Customer, Genre, MembershipType, Movie
from vidly.main import VidlyApp
from vidly.repositories import (
    CustomerRepository,
    MovieRepository,
    RentalRepository,
    WatchlistRepository,
)
from vidly.storage import EntityStore, RentalStore, WatchlistStore

TODAY = date(2025, 6, 15)


class FrozenClock:
    """Callable clock pinned to a date, moved forward explicitly"""

    def __init__(self, today: date = TODAY):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        self.today += timedelta(days=days)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def today(clock) -> date:
    """The pinned date at the start of each test"""
    return clock.today


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
        seed_sample_data=False,
    )


@pytest.fixture
def movie_repo(clock) -> MovieRepository:
    return MovieRepository(EntityStore("movies", clock))


@pytest.fixture
def customer_repo(clock) -> CustomerRepository:
    return CustomerRepository(EntityStore("customers", clock))


@pytest.fixture
def rental_repo(clock, test_settings) -> RentalRepository:
    return RentalRepository(RentalStore(clock), test_settings.rentals)


@pytest.fixture
def watchlist_repo(clock, test_settings) -> WatchlistRepository:
    return WatchlistRepository(WatchlistStore(clock), test_settings.analytics)


@pytest.fixture
def app(clock, test_settings) -> VidlyApp:
    """Started application without sample data"""
    application = VidlyApp(settings=test_settings, clock=clock)
    application.startup(configure_logs=False)
    yield application
    application.shutdown()


@pytest.fixture
def seeded_app(clock, test_settings) -> VidlyApp:
    """Started application with the sample catalogue, pinned to TODAY"""
    settings = test_settings.model_copy(update={"seed_sample_data": True})
    application = VidlyApp(settings=settings, clock=clock)
    application.startup(configure_logs=False)
    yield application
    application.shutdown()


@pytest.fixture
def sample_movies():
    """Unsaved movies covering genres and ratings"""
    return [
        Movie(name="Alien", release_date=date(1979, 5, 25), genre=Genre.SCIFI, rating=5),
        Movie(name="airplane!", release_date=date(1980, 7, 2), genre=Genre.COMEDY, rating=4),
        Movie(name="Brazil", release_date=date(1985, 2, 20), genre=Genre.SCIFI, rating=3),
        Movie(name="Casablanca", release_date=date(1942, 11, 26), genre=Genre.ROMANCE),
    ]


@pytest.fixture
def sample_customers():
    """Unsaved customers, one per tier plus an extra Basic"""
    return [
        Customer(name="Maria Lopez", email="maria@example.com", member_since=date(2024, 2, 1),
                 membership_type=MembershipType.GOLD),
        Customer(name="ken Adams", email="kadams@example.org", member_since=date(2024, 2, 20)),
        Customer(name="Lee Park", email="lee@example.com", member_since=date(2023, 5, 9),
                 membership_type=MembershipType.SILVER),
        Customer(name="Ann Ito", email="ann@example.net", member_since=date(2022, 1, 3),
                 membership_type=MembershipType.PLATINUM),
        Customer(name="Zoe Grant", email="zoe@example.com"),
    ]
