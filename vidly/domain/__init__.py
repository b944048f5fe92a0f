"""
Domain Module
"""
from .models import (
    Customer,
    Genre,
    MembershipType,
    Movie,
    Rental,
    RentalStatus,
    WatchlistItem,
    WatchlistPriority,
    days_overdue,
    derive_status,
    is_overdue,
    late_fee_for,
    total_cost,
)

__all__ = [
    "Customer",
    "Genre",
    "MembershipType",
    "Movie",
    "Rental",
    "RentalStatus",
    "WatchlistItem",
    "WatchlistPriority",
    "days_overdue",
    "derive_status",
    "is_overdue",
    "late_fee_for",
    "total_cost",
]
