"""
Sample Data

The fixed demo catalogue loaded on startup: three movies, five customers,
three rentals (one active, one past due, one returned) and three watchlist
entries. Dates are relative to `today` so the demo always shows one overdue
rental.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from vidly.domain.models import (
    Customer,
    Genre,
    MembershipType,
    Movie,
    Rental,
    RentalStatus,
    WatchlistItem,
    WatchlistPriority,
)
from vidly.repositories.customers import CustomerRepository
from vidly.repositories.movies import MovieRepository
from vidly.repositories.rentals import RentalRepository
from vidly.repositories.watchlist import WatchlistRepository

logger = structlog.get_logger(__name__)

SAMPLE_DAILY_RATE = Decimal("3.99")


@dataclass
class SeedSummary:
    movies: int
    customers: int
    rentals: int
    watchlist_items: int


def sample_movies():
    return [
        Movie(id=1, name="Shrek!", release_date=date(2001, 5, 18), genre=Genre.ANIMATION, rating=4),
        Movie(id=2, name="The Godfather", release_date=date(1972, 3, 24), genre=Genre.DRAMA, rating=5),
        Movie(id=3, name="Toy Story", release_date=date(1995, 11, 22), genre=Genre.ANIMATION, rating=5),
    ]


def sample_customers():
    return [
        Customer(id=1, name="John Smith", email="john.smith@example.com", phone="555-0101",
                 member_since=date(2024, 1, 15), membership_type=MembershipType.GOLD),
        Customer(id=2, name="Jane Doe", email="jane.doe@example.com", phone="555-0102",
                 member_since=date(2024, 6, 20), membership_type=MembershipType.SILVER),
        Customer(id=3, name="Bob Wilson", email="bob.wilson@example.com", phone="555-0103",
                 member_since=date(2025, 3, 10), membership_type=MembershipType.BASIC),
        Customer(id=4, name="Alice Johnson", email="alice.johnson@example.com", phone="555-0104",
                 member_since=date(2023, 11, 5), membership_type=MembershipType.PLATINUM),
        Customer(id=5, name="Charlie Brown", email="charlie.brown@example.com", phone="555-0105",
                 member_since=date(2025, 1, 1), membership_type=MembershipType.GOLD),
    ]


def sample_rentals(today: date):
    return [
        Rental(
            id=1, customer_id=1, customer_name="John Smith", movie_id=1, movie_name="Shrek!",
            rental_date=today - timedelta(days=3), due_date=today + timedelta(days=4),
            daily_rate=SAMPLE_DAILY_RATE, status=RentalStatus.ACTIVE,
        ),
        Rental(
            id=2, customer_id=2, customer_name="Jane Doe", movie_id=2, movie_name="The Godfather",
            rental_date=today - timedelta(days=10), due_date=today - timedelta(days=3),
            daily_rate=SAMPLE_DAILY_RATE, status=RentalStatus.ACTIVE,
        ),
        Rental(
            id=3, customer_id=4, customer_name="Alice Johnson", movie_id=3, movie_name="Toy Story",
            rental_date=today - timedelta(days=14), due_date=today - timedelta(days=7),
            return_date=today - timedelta(days=6), daily_rate=SAMPLE_DAILY_RATE,
            late_fee=Decimal("0"), status=RentalStatus.RETURNED,
        ),
    ]


def sample_watchlist(today: date):
    return [
        WatchlistItem(
            id=1, customer_id=1, customer_name="John Smith", movie_id=3, movie_name="Toy Story",
            movie_genre=Genre.ANIMATION, movie_rating=5, added_date=today - timedelta(days=5),
            note="Kids want to see this", priority=WatchlistPriority.HIGH,
        ),
        WatchlistItem(
            id=2, customer_id=2, customer_name="Jane Doe", movie_id=1, movie_name="Shrek!",
            movie_genre=Genre.ANIMATION, movie_rating=4, added_date=today - timedelta(days=2),
            priority=WatchlistPriority.NORMAL,
        ),
        WatchlistItem(
            id=3, customer_id=1, customer_name="John Smith", movie_id=2, movie_name="The Godfather",
            movie_genre=Genre.DRAMA, movie_rating=5, added_date=today - timedelta(days=1),
            note="Classic must-see", priority=WatchlistPriority.MUST_WATCH,
        ),
    ]


def seed_sample_data(
    movies: MovieRepository,
    customers: CustomerRepository,
    rentals: RentalRepository,
    watchlist: WatchlistRepository,
    today: Optional[date] = None,
) -> SeedSummary:
    """
    Load the demo catalogue into the given repositories, keeping ids 1..n.

    Args:
        today: Anchor for relative dates (defaults to the rental store clock)

    Returns:
        Number of records loaded per repository
    """
    today = today or rentals.today()

    summary = SeedSummary(
        movies=movies.seed(sample_movies()),
        customers=customers.seed(sample_customers()),
        rentals=rentals.seed(sample_rentals(today)),
        watchlist_items=watchlist.seed(sample_watchlist(today)),
    )

    logger.info(
        "Sample data loaded",
        movies=summary.movies,
        customers=summary.customers,
        rentals=summary.rentals,
        watchlist_items=summary.watchlist_items,
    )
    return summary
