"""
Unit Tests - Customer Activity Service
"""
from datetime import date, timedelta
from decimal import Decimal

import pytest

from vidly.core import NotFoundError
from vidly.domain import Customer, Genre, MembershipType, Movie, Rental, RentalStatus
from vidly.services import InsightType
from vidly.services.activity import (
    build_genre_breakdown,
    build_summary,
    calculate_loyalty_score,
    generate_insights,
)


def returned_rental(today, movie_id, days_ago, days_kept, rate="5.00", late_fee="0"):
    rental_date = today - timedelta(days=days_ago)
    return Rental(
        customer_id=1,
        movie_id=movie_id,
        rental_date=rental_date,
        due_date=rental_date + timedelta(days=7),
        return_date=rental_date + timedelta(days=days_kept),
        daily_rate=Decimal(rate),
        late_fee=Decimal(late_fee),
        status=RentalStatus.RETURNED,
    )


class TestActivityReport:
    """Reports over the sample catalogue pinned to 2025-06-15"""

    def test_unknown_customer(self, seeded_app):
        with pytest.raises(NotFoundError) as exc_info:
            seeded_app.activity.get_activity_report(999)
        assert exc_info.value.entity == "Customer"

    def test_customer_without_rentals(self, seeded_app):
        report = seeded_app.activity.get_activity_report(3)

        assert report.customer_name == "Bob Wilson"
        assert report.summary.total_rentals == 0
        assert report.summary.first_rental_date is None
        assert report.loyalty_score == 0
        assert [(i.title, i.type) for i in report.insights] == [("No rentals yet", InsightType.INFO)]
        assert len(report.monthly_activity) == 6

    def test_overdue_customer(self, seeded_app):
        report = seeded_app.activity.get_activity_report(2)

        summary = report.summary
        assert summary.total_rentals == 1
        assert summary.overdue_rentals == 1
        assert summary.total_spent == Decimal("39.90")
        assert summary.average_spent_per_rental == Decimal("39.90")
        assert summary.average_rental_days == 0
        assert summary.first_rental_date == date(2025, 6, 5)

        assert [i.title for i in report.insights] == ["1 overdue rental", "Top genre: Drama"]
        assert report.insights[0].type == InsightType.WARNING
        # 1 rental + 3.99 spend + 12 months + Silver 4
        assert report.loyalty_score == 21

    def test_returned_customer(self, seeded_app):
        report = seeded_app.activity.get_activity_report(4)

        assert report.membership_type == MembershipType.PLATINUM
        assert report.summary.returned_rentals == 1
        assert report.summary.average_rental_days == 8.0
        assert report.summary.on_time_return_rate == 100.0
        assert report.genre_breakdown[0].genre == Genre.ANIMATION
        assert report.genre_breakdown[0].percentage == 100.0
        assert report.monthly_activity[-1].rental_count == 1
        assert report.monthly_activity[-1].month_name == "Jun 2025"
        # 1 rental + 25 on time + 3.19 spend + 15 months + Platinum 10
        assert report.loyalty_score == 54

    def test_history_newest_first(self, seeded_app, today):
        seeded_app.rentals.add(returned_rental(today, movie_id=2, days_ago=40, days_kept=3))

        report = seeded_app.activity.get_activity_report(1)

        assert [r.movie_id for r in report.rental_history] == [1, 2]


class TestSummaryAndBreakdown:
    """Tests for summary and genre breakdown sections"""

    def test_summary_averages(self, today):
        rentals = [
            returned_rental(today, 1, days_ago=20, days_kept=3),
            returned_rental(today, 2, days_ago=10, days_kept=4, late_fee="1.50"),
            returned_rental(today, 3, days_ago=5, days_kept=4),
        ]

        summary = build_summary(rentals, today)

        assert summary.returned_rentals == 3
        assert summary.average_rental_days == 3.7
        assert summary.on_time_return_rate == 66.7
        assert summary.total_late_fees == Decimal("1.50")
        assert summary.total_spent == Decimal("56.50")
        assert summary.average_spent_per_rental == Decimal("18.83")
        assert summary.first_rental_date == today - timedelta(days=20)
        assert summary.last_rental_date == today - timedelta(days=5)

    def test_genre_breakdown_skips_unknown(self, today):
        lookup = {
            1: Movie(id=1, name="A", genre=Genre.HORROR),
            2: Movie(id=2, name="B", genre=Genre.HORROR),
            3: Movie(id=3, name="C", genre=Genre.COMEDY),
            4: Movie(id=4, name="D"),
        }
        rentals = [returned_rental(today, movie_id, 10, 2) for movie_id in (1, 2, 3, 4)]

        breakdown = build_genre_breakdown(rentals, lookup, today)

        assert [(g.genre, g.rental_count, g.percentage) for g in breakdown] == [
            (Genre.HORROR, 2, 50.0),
            (Genre.COMEDY, 1, 25.0),
        ]


class TestLoyaltyScore:
    """Tests for the loyalty score components"""

    def test_capped_at_one_hundred(self, today):
        customer = Customer(name="Vip", member_since=date(2015, 1, 1), membership_type=MembershipType.PLATINUM)
        rentals = [returned_rental(today, i, days_ago=50, days_kept=5, rate="20.00") for i in range(40)]

        assert calculate_loyalty_score(rentals, customer, today) == 100

    def test_basic_member_without_join_date(self, today):
        customer = Customer(name="New")
        rentals = [returned_rental(today, 1, days_ago=10, days_kept=2, late_fee="1.50")]

        # 1 rental + 0 on time + 1.15 spend + Basic 1
        assert calculate_loyalty_score(rentals, customer, today) == 3


class TestInsights:
    """Tests for qualitative insights"""

    def test_warning_and_upsell_insights(self, today):
        customer = Customer(name="Late Larry")
        rentals = [
            returned_rental(today, i, days_ago=60, days_kept=10, late_fee="4.50") for i in range(5)
        ]

        insights = {i.title: i for i in generate_insights(rentals, customer, {}, today)}

        assert insights["Frequent late returns"].type == InsightType.WARNING
        assert insights["Frequent late returns"].description.startswith("100% of returns were late")
        assert insights["High-value customer"].type == InsightType.POSITIVE
        assert insights["Upgrade candidate"].type == InsightType.INFO
        assert insights["Inactive customer"].description.startswith("No rentals in 60 days")

    def test_perfect_return_record(self, today):
        customer = Customer(name="Punctual", membership_type=MembershipType.GOLD)
        rentals = [returned_rental(today, i, days_ago=5, days_kept=2) for i in range(3)]

        titles = [i.title for i in generate_insights(rentals, customer, {}, today)]

        assert titles == ["Perfect return record"]

    def test_overdue_count_is_pluralised(self, today):
        customer = Customer(name="Busy")
        rentals = [
            Rental(customer_id=1, movie_id=i, rental_date=today - timedelta(days=9),
                   due_date=today - timedelta(days=2), daily_rate=Decimal("1.00"),
                   status=RentalStatus.OVERDUE)
            for i in range(2)
        ]

        titles = [i.title for i in generate_insights(rentals, customer, {}, today)]

        assert titles[0] == "2 overdue rentals"
