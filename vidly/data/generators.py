"""
Synthetic Data Generator

Generates realistic rental-store data for demos and load testing.
Includes:
- Movies across all genres with release dates and ratings
- Customers with contact details and weighted membership tiers
- Rental history driven through the real checkout/return path
"""

import random
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Sequence

import structlog
from faker import Faker

from vidly.core.exceptions import MovieAlreadyRentedError
from vidly.domain.models import Customer, Genre, MembershipType, Movie, Rental
from vidly.repositories.rentals import RentalRepository

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

MEMBERSHIP_WEIGHTS = [
    (MembershipType.BASIC, 0.50),
    (MembershipType.SILVER, 0.25),
    (MembershipType.GOLD, 0.17),
    (MembershipType.PLATINUM, 0.08),
]

RATING_WEIGHTS = [
    (None, 0.10),
    (1, 0.05),
    (2, 0.10),
    (3, 0.30),
    (4, 0.30),
    (5, 0.15),
]

DAILY_RATES = ["1.99", "2.99", "3.99", "4.99"]


# =============================================================================
# GENERATORS
# =============================================================================

class CatalogGenerator:
    """
    Generate movies and customers.

    Records come back with id 0 so they can go straight into
    `MovieRepository.add` / `CustomerRepository.add`.

    Example:
        generator = CatalogGenerator(seed=7)
        for movie in generator.generate_movies(50):
            movies.add(movie)
    """

    def __init__(self, seed: Optional[int] = 42):
        self.fake = Faker()
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate_movies(self, n: int = 100) -> List[Movie]:
        movies = []
        for _ in range(n):
            rating = self._weighted(RATING_WEIGHTS)
            movies.append(Movie(
                name=self.fake.catch_phrase().title()[:255],
                release_date=self.fake.date_between(start_date="-50y", end_date="today"),
                genre=self.random.choice(list(Genre)),
                rating=rating,
            ))
        return movies

    def generate_customers(self, n: int = 50) -> List[Customer]:
        customers = []
        for _ in range(n):
            customers.append(Customer(
                name=self.fake.name(),
                email=self.fake.email(),
                phone=self.fake.phone_number(),
                member_since=self.fake.date_between(start_date="-5y", end_date="today"),
                membership_type=self._weighted(MEMBERSHIP_WEIGHTS),
            ))
        return customers

    def _weighted(self, table):
        values = [v for v, _ in table]
        weights = [w for _, w in table]
        return self.random.choices(values, weights=weights)[0]


@dataclass
class RentalHistorySummary:
    """Outcome of a generated rental history run"""
    checkouts: int = 0
    returns: int = 0
    conflicts: int = 0


class RentalHistoryGenerator:
    """
    Drive random checkouts and returns through a `RentalRepository`.

    Rentals are back-dated up to `max_days_back` days, so returns made today
    pick up late fees the same way real ones do. Checkouts of a movie that is
    already out are counted as conflicts.
    """

    def __init__(self, rentals: RentalRepository, seed: Optional[int] = 42):
        self.rentals = rentals
        self.random = random.Random(seed)

    def generate(
        self,
        customers: Sequence[Customer],
        movies: Sequence[Movie],
        attempts: int = 200,
        return_probability: float = 0.6,
        max_days_back: int = 90,
    ) -> RentalHistorySummary:
        summary = RentalHistorySummary()
        if not customers or not movies:
            return summary

        today = self.rentals.today()

        for _ in range(attempts):
            customer = self.random.choice(customers)
            movie = self.random.choice(movies)
            try:
                rental = self.rentals.checkout(Rental(
                    customer_id=customer.id,
                    customer_name=customer.name,
                    movie_id=movie.id,
                    movie_name=movie.name,
                    rental_date=today - timedelta(days=self.random.randint(0, max_days_back)),
                    daily_rate=self.random.choice(DAILY_RATES),
                ))
            except MovieAlreadyRentedError:
                logger.debug("Generated checkout skipped", movie_id=movie.id)
                summary.conflicts += 1
                continue

            summary.checkouts += 1
            if self.random.random() < return_probability:
                self.rentals.return_rental(rental.id)
                summary.returns += 1

        logger.info(
            "Rental history generated",
            checkouts=summary.checkouts,
            returns=summary.returns,
            conflicts=summary.conflicts,
        )
        return summary
