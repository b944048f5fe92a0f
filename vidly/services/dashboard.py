"""
Dashboard Aggregation Service

Store-wide analytics built from snapshots of the rental, movie and customer
repositories. Each aggregation is a single pass over the rental list using
lookup maps built once from the catalogue and the customer base.

Aggregations:
- Rental status counts, revenue and late fees
- Top movies by rental count and top customers by spend
- Revenue by genre and by membership tier
- Most recent rentals
- Trailing monthly revenue series (zero-filled)
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Set

import structlog

from vidly.config.settings import AnalyticsSettings, resolve_analytics_settings
from vidly.domain.models import (
    ZERO,
    Customer,
    Genre,
    MembershipType,
    Movie,
    Rental,
    month_window,
    to_money,
    total_cost,
)
from vidly.repositories.base import require
from vidly.repositories.customers import CustomerRepository
from vidly.repositories.movies import MovieRepository
from vidly.repositories.rentals import RentalRepository, RentalStats

logger = structlog.get_logger(__name__)

UNKNOWN = "Unknown"


# =============================================================================
# RESULT RECORDS
# =============================================================================

@dataclass
class MovieRankEntry:
    """Movie ranked by how often it was rented"""
    movie_id: int
    movie_name: str
    genre: Optional[Genre] = None
    rating: Optional[int] = None
    rental_count: int = 0
    total_revenue: Decimal = ZERO


@dataclass
class CustomerRankEntry:
    """Customer ranked by total spend"""
    customer_id: int
    customer_name: str
    membership_type: MembershipType = MembershipType.BASIC
    rental_count: int = 0
    total_spent: Decimal = ZERO
    late_fees: Decimal = ZERO


@dataclass
class GenreRevenueEntry:
    genre_name: str
    rental_count: int = 0
    revenue: Decimal = ZERO
    late_fees: Decimal = ZERO


@dataclass
class MembershipRevenueEntry:
    tier: MembershipType
    unique_customers: int = 0
    rental_count: int = 0
    revenue: Decimal = ZERO
    customer_ids: Set[int] = field(default_factory=set, repr=False)


@dataclass
class MonthlyRevenueEntry:
    year: int
    month: int
    label: str
    revenue: Decimal = ZERO
    rental_count: int = 0
    late_fees: Decimal = ZERO


@dataclass
class DashboardData:
    """Complete dashboard model"""
    stats: RentalStats
    customer_count: int
    movie_count: int
    average_revenue_per_rental: Decimal
    top_movies: List[MovieRankEntry] = field(default_factory=list)
    top_customers: List[CustomerRankEntry] = field(default_factory=list)
    revenue_by_genre: List[GenreRevenueEntry] = field(default_factory=list)
    membership_breakdown: List[MembershipRevenueEntry] = field(default_factory=list)
    recent_rentals: List[Rental] = field(default_factory=list)
    monthly_revenue: List[MonthlyRevenueEntry] = field(default_factory=list)


# =============================================================================
# AGGREGATIONS
# =============================================================================

def compute_top_movies(
    rentals: List[Rental],
    movie_lookup: Dict[int, Movie],
    count: int,
    today: date,
) -> List[MovieRankEntry]:
    """Most-rented movies; ties go to the higher revenue"""
    ranking: Dict[int, MovieRankEntry] = {}

    for rental in rentals:
        entry = ranking.get(rental.movie_id)
        if entry is None:
            movie = movie_lookup.get(rental.movie_id)
            if movie is not None:
                entry = MovieRankEntry(rental.movie_id, movie.name, movie.genre, movie.rating)
            else:
                entry = MovieRankEntry(rental.movie_id, rental.movie_name or UNKNOWN)
            ranking[rental.movie_id] = entry

        entry.rental_count += 1
        entry.total_revenue += total_cost(rental, today)

    ranked = sorted(ranking.values(), key=lambda e: (-e.rental_count, -e.total_revenue))
    return ranked[:count]


def compute_top_customers(
    rentals: List[Rental],
    customer_lookup: Dict[int, Customer],
    count: int,
    today: date,
) -> List[CustomerRankEntry]:
    """Biggest spenders; ties go to the more frequent renter"""
    ranking: Dict[int, CustomerRankEntry] = {}

    for rental in rentals:
        entry = ranking.get(rental.customer_id)
        if entry is None:
            customer = customer_lookup.get(rental.customer_id)
            if customer is not None:
                entry = CustomerRankEntry(rental.customer_id, customer.name, customer.membership_type)
            else:
                entry = CustomerRankEntry(rental.customer_id, rental.customer_name or UNKNOWN)
            ranking[rental.customer_id] = entry

        entry.rental_count += 1
        entry.total_spent += total_cost(rental, today)
        entry.late_fees += rental.late_fee

    ranked = sorted(ranking.values(), key=lambda e: (-e.total_spent, -e.rental_count))
    return ranked[:count]


def compute_revenue_by_genre(
    rentals: List[Rental],
    movie_lookup: Dict[int, Movie],
    today: date,
) -> List[GenreRevenueEntry]:
    groups: Dict[str, GenreRevenueEntry] = {}

    for rental in rentals:
        movie = movie_lookup.get(rental.movie_id)
        genre_name = movie.genre.value if movie is not None and movie.genre is not None else UNKNOWN

        entry = groups.setdefault(genre_name, GenreRevenueEntry(genre_name))
        entry.rental_count += 1
        entry.revenue += total_cost(rental, today)
        entry.late_fees += rental.late_fee

    return sorted(groups.values(), key=lambda e: e.revenue, reverse=True)


def compute_membership_breakdown(
    rentals: List[Rental],
    customer_lookup: Dict[int, Customer],
    today: date,
) -> List[MembershipRevenueEntry]:
    groups: Dict[MembershipType, MembershipRevenueEntry] = {}

    for rental in rentals:
        customer = customer_lookup.get(rental.customer_id)
        tier = customer.membership_type if customer is not None else MembershipType.BASIC

        entry = groups.setdefault(tier, MembershipRevenueEntry(tier))
        entry.customer_ids.add(rental.customer_id)
        entry.rental_count += 1
        entry.revenue += total_cost(rental, today)

    for entry in groups.values():
        entry.unique_customers = len(entry.customer_ids)

    return sorted(groups.values(), key=lambda e: e.revenue, reverse=True)


def recent_rentals(rentals: List[Rental], count: int) -> List[Rental]:
    ordered = sorted(rentals, key=lambda r: r.rental_date or date.min, reverse=True)
    return ordered[:count]


def compute_monthly_revenue(rentals: List[Rental], months: int, today: date) -> List[MonthlyRevenueEntry]:
    """Trailing `months` months, oldest first, including the current month"""
    series = [
        MonthlyRevenueEntry(start.year, start.month, start.strftime("%b %Y"))
        for start in month_window(today, months)
    ]
    by_month = {(e.year, e.month): e for e in series}

    for rental in rentals:
        if rental.rental_date is None:
            continue
        entry = by_month.get((rental.rental_date.year, rental.rental_date.month))
        if entry is None:
            continue
        entry.revenue += total_cost(rental, today)
        entry.rental_count += 1
        entry.late_fees += rental.late_fee

    return series


# =============================================================================
# SERVICE
# =============================================================================

class DashboardService:
    """
    Builds the store dashboard.

    Example:
        service = DashboardService(rentals, movies, customers)
        data = service.get_dashboard()
        data.stats.overdue_rentals
    """

    def __init__(
        self,
        rental_repository: RentalRepository,
        movie_repository: MovieRepository,
        customer_repository: CustomerRepository,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self.rental_repository = require(rental_repository, "rental_repository")
        self.movie_repository = require(movie_repository, "movie_repository")
        self.customer_repository = require(customer_repository, "customer_repository")
        self.settings = resolve_analytics_settings(settings)

    def get_dashboard(self) -> DashboardData:
        rentals = self.rental_repository.get_all()
        movies = self.movie_repository.get_all()
        customers = self.customer_repository.get_all()
        stats = self.rental_repository.get_stats()
        today = self.rental_repository.today()

        movie_lookup = {m.id: m for m in movies}
        customer_lookup = {c.id: c for c in customers}

        average = to_money(stats.total_revenue / stats.total_rentals) if stats.total_rentals else ZERO

        data = DashboardData(
            stats=stats,
            customer_count=len(customers),
            movie_count=len(movies),
            average_revenue_per_rental=average,
            top_movies=compute_top_movies(rentals, movie_lookup, self.settings.top_count, today),
            top_customers=compute_top_customers(rentals, customer_lookup, self.settings.top_count, today),
            revenue_by_genre=compute_revenue_by_genre(rentals, movie_lookup, today),
            membership_breakdown=compute_membership_breakdown(rentals, customer_lookup, today),
            recent_rentals=recent_rentals(rentals, self.settings.recent_rentals_count),
            monthly_revenue=compute_monthly_revenue(rentals, self.settings.trend_months, today),
        )

        logger.info(
            "Dashboard built",
            rentals=stats.total_rentals,
            movies=data.movie_count,
            customers=data.customer_count,
        )
        return data
