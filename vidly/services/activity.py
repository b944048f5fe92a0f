"""
Customer Activity Service

Per-customer rental history report.

Report sections:
- Summary: status counts, spend, late fees, averages, on-time return rate
- Genre breakdown with share of total rentals
- Trailing monthly activity series
- Loyalty score (0-100)
- Qualitative insights tagged Info / Positive / Warning
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

import structlog

from vidly.config.settings import AnalyticsSettings, resolve_analytics_settings
from vidly.core.exceptions import NotFoundError
from vidly.domain.models import (
    ZERO,
    Customer,
    Genre,
    MembershipType,
    Movie,
    Rental,
    RentalStatus,
    month_window,
    to_money,
    total_cost,
)
from vidly.repositories.base import require
from vidly.repositories.customers import CustomerRepository
from vidly.repositories.movies import MovieRepository
from vidly.repositories.rentals import RentalRepository

logger = structlog.get_logger(__name__)

TIER_BONUS = {
    MembershipType.PLATINUM: 10,
    MembershipType.GOLD: 7,
    MembershipType.SILVER: 4,
    MembershipType.BASIC: 1,
}

HIGH_VALUE_THRESHOLD = Decimal("100")
INACTIVE_AFTER_DAYS = 30
UPGRADE_MIN_RENTALS = 5


class InsightType(str, Enum):
    """Insight severity"""
    INFO = "Info"
    POSITIVE = "Positive"
    WARNING = "Warning"


@dataclass
class ActivityInsight:
    icon: str
    title: str
    description: str
    type: InsightType


@dataclass
class ActivitySummary:
    """Aggregate statistics over a customer's rentals"""
    total_rentals: int = 0
    active_rentals: int = 0
    overdue_rentals: int = 0
    returned_rentals: int = 0
    total_spent: Decimal = ZERO
    total_late_fees: Decimal = ZERO
    average_rental_days: float = 0.0
    average_spent_per_rental: Decimal = ZERO
    first_rental_date: Optional[date] = None
    last_rental_date: Optional[date] = None
    on_time_return_rate: float = 0.0


@dataclass
class GenreActivity:
    genre: Genre
    rental_count: int = 0
    total_spent: Decimal = ZERO
    percentage: float = 0.0


@dataclass
class MonthlyActivityEntry:
    year: int
    month: int
    month_name: str
    rental_count: int = 0
    total_spent: Decimal = ZERO


@dataclass
class CustomerActivityReport:
    """Complete activity report for one customer"""
    customer_id: int
    customer_name: str
    membership_type: MembershipType
    member_since: Optional[date]
    rental_history: List[Rental] = field(default_factory=list)
    summary: ActivitySummary = field(default_factory=ActivitySummary)
    genre_breakdown: List[GenreActivity] = field(default_factory=list)
    monthly_activity: List[MonthlyActivityEntry] = field(default_factory=list)
    loyalty_score: int = 0
    insights: List[ActivityInsight] = field(default_factory=list)


# =============================================================================
# REPORT SECTIONS
# =============================================================================

def build_summary(rentals: List[Rental], today: date) -> ActivitySummary:
    """Single-pass summary; empty history gives an all-zero summary"""
    if not rentals:
        return ActivitySummary()

    summary = ActivitySummary(total_rentals=len(rentals))
    duration_days = 0
    completed = 0
    on_time = 0

    for rental in rentals:
        if rental.status == RentalStatus.ACTIVE:
            summary.active_rentals += 1
        elif rental.status == RentalStatus.OVERDUE:
            summary.overdue_rentals += 1
        else:
            summary.returned_rentals += 1
            if rental.late_fee == 0:
                on_time += 1

        summary.total_spent += total_cost(rental, today)
        summary.total_late_fees += rental.late_fee

        if rental.return_date is not None and rental.rental_date is not None:
            duration_days += (rental.return_date - rental.rental_date).days
            completed += 1

    rental_dates = [r.rental_date for r in rentals if r.rental_date is not None]
    if rental_dates:
        summary.first_rental_date = min(rental_dates)
        summary.last_rental_date = max(rental_dates)

    if completed:
        summary.average_rental_days = round(duration_days / completed, 1)
    summary.average_spent_per_rental = to_money(summary.total_spent / len(rentals))
    if summary.returned_rentals:
        summary.on_time_return_rate = round(on_time / summary.returned_rentals * 100, 1)

    return summary


def build_genre_breakdown(
    rentals: List[Rental],
    movie_lookup: Dict[int, Movie],
    today: date,
) -> List[GenreActivity]:
    """Per-genre counts and spend; unknown or genre-less movies are skipped"""
    groups: Dict[Genre, GenreActivity] = {}

    for rental in rentals:
        movie = movie_lookup.get(rental.movie_id)
        if movie is None or movie.genre is None:
            continue
        activity = groups.setdefault(movie.genre, GenreActivity(movie.genre))
        activity.rental_count += 1
        activity.total_spent += total_cost(rental, today)

    total = len(rentals) or 1
    for activity in groups.values():
        activity.percentage = round(activity.rental_count / total * 100, 1)

    return sorted(groups.values(), key=lambda a: a.rental_count, reverse=True)


def build_monthly_activity(rentals: List[Rental], months: int, today: date) -> List[MonthlyActivityEntry]:
    series = [
        MonthlyActivityEntry(start.year, start.month, start.strftime("%b %Y"))
        for start in month_window(today, months)
    ]
    by_month = {(e.year, e.month): e for e in series}

    for rental in rentals:
        if rental.rental_date is None:
            continue
        entry = by_month.get((rental.rental_date.year, rental.rental_date.month))
        if entry is not None:
            entry.rental_count += 1
            entry.total_spent += total_cost(rental, today)

    return series


def calculate_loyalty_score(rentals: List[Rental], customer: Customer, today: date) -> int:
    """
    Loyalty score from 0 to 100.

    Components:
        frequency   1 point per rental, max 30
        on time     on-time return rate x 25
        spend       1 point per $10, max 20
        tenure      1 point per month of membership, max 15
        tier        Platinum 10, Gold 7, Silver 4, Basic 1
    """
    if not rentals:
        return 0

    score = float(min(len(rentals), 30))

    returned = [r for r in rentals if r.status == RentalStatus.RETURNED]
    if returned:
        on_time = sum(1 for r in returned if r.late_fee == 0)
        score += on_time / len(returned) * 25

    spent = sum((total_cost(r, today) for r in rentals), ZERO)
    score += min(float(spent / 10), 20.0)

    if customer.member_since is not None:
        months_active = max(
            0,
            (today.year - customer.member_since.year) * 12 + (today.month - customer.member_since.month),
        )
        score += min(months_active, 15)

    score += TIER_BONUS[customer.membership_type]

    return int(min(round(score), 100))


def generate_insights(
    rentals: List[Rental],
    customer: Customer,
    movie_lookup: Dict[int, Movie],
    today: date,
) -> List[ActivityInsight]:
    if not rentals:
        return [
            ActivityInsight(
                "🎬",
                "No rentals yet",
                "This customer hasn't rented any movies. Suggest popular titles!",
                InsightType.INFO,
            )
        ]

    insights = []

    overdue = sum(1 for r in rentals if r.status == RentalStatus.OVERDUE)
    if overdue:
        insights.append(ActivityInsight(
            "⚠️",
            f"{overdue} overdue rental{'s' if overdue > 1 else ''}",
            "Follow up on overdue items to avoid accumulating late fees.",
            InsightType.WARNING,
        ))

    returned = [r for r in rentals if r.status == RentalStatus.RETURNED]
    if len(returned) >= 3:
        late_rate = sum(1 for r in returned if r.late_fee > 0) / len(returned)
        if late_rate > 0.5:
            insights.append(ActivityInsight(
                "💸",
                "Frequent late returns",
                f"{late_rate:.0%} of returns were late. Consider offering extended rental periods.",
                InsightType.WARNING,
            ))
        elif late_rate == 0:
            insights.append(ActivityInsight(
                "⭐",
                "Perfect return record",
                "This customer always returns on time. A model member!",
                InsightType.POSITIVE,
            ))

    breakdown = build_genre_breakdown(rentals, movie_lookup, today)
    if breakdown:
        top = breakdown[0]
        insights.append(ActivityInsight(
            "🎯",
            f"Top genre: {top.genre.value}",
            f"{top.rental_count} rentals ({top.percentage}% of total). Feature new {top.genre.value} arrivals!",
            InsightType.INFO,
        ))

    spent = sum((total_cost(r, today) for r in rentals), ZERO)
    if spent > HIGH_VALUE_THRESHOLD:
        insights.append(ActivityInsight(
            "💰",
            "High-value customer",
            f"Total spend: ${spent:.2f}. Consider offering a loyalty discount or membership upgrade.",
            InsightType.POSITIVE,
        ))

    if customer.membership_type == MembershipType.BASIC and len(rentals) >= UPGRADE_MIN_RENTALS:
        insights.append(ActivityInsight(
            "⬆️",
            "Upgrade candidate",
            f"With {len(rentals)} rentals, this customer may benefit from a Silver or Gold membership.",
            InsightType.INFO,
        ))

    rental_dates = [r.rental_date for r in rentals if r.rental_date is not None]
    if rental_dates:
        days_since_last = (today - max(rental_dates)).days
        if days_since_last > INACTIVE_AFTER_DAYS:
            insights.append(ActivityInsight(
                "📭",
                "Inactive customer",
                f"No rentals in {days_since_last} days. Send a promotional offer to re-engage.",
                InsightType.WARNING,
            ))

    return insights


# =============================================================================
# SERVICE
# =============================================================================

class CustomerActivityService:
    """Builds customer activity reports"""

    def __init__(
        self,
        customer_repository: CustomerRepository,
        movie_repository: MovieRepository,
        rental_repository: RentalRepository,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self.customer_repository = require(customer_repository, "customer_repository")
        self.movie_repository = require(movie_repository, "movie_repository")
        self.rental_repository = require(rental_repository, "rental_repository")
        self.settings = resolve_analytics_settings(settings)

    def get_activity_report(self, customer_id: int) -> CustomerActivityReport:
        """
        Full activity report for a customer.

        Raises:
            NotFoundError: no customer with this id
        """
        customer = self.customer_repository.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)

        today = self.rental_repository.today()
        history = [r for r in self.rental_repository.get_all() if r.customer_id == customer_id]
        history.sort(key=lambda r: r.rental_date or date.min, reverse=True)
        movie_lookup = {m.id: m for m in self.movie_repository.get_all()}

        report = CustomerActivityReport(
            customer_id=customer.id,
            customer_name=customer.name,
            membership_type=customer.membership_type,
            member_since=customer.member_since,
            rental_history=history,
            summary=build_summary(history, today),
            genre_breakdown=build_genre_breakdown(history, movie_lookup, today),
            monthly_activity=build_monthly_activity(history, self.settings.trend_months, today),
            loyalty_score=calculate_loyalty_score(history, customer, today),
            insights=generate_insights(history, customer, movie_lookup, today),
        )

        logger.info(
            "Activity report built",
            customer_id=customer_id,
            rentals=len(history),
            loyalty_score=report.loyalty_score,
        )
        return report
