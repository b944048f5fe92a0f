"""
Domain Models - Rental Store Entities

Entity records for the rental core and the pure functions that derive
values from them. Entities are plain Pydantic records: they carry identity
and field constraints but no behaviour that touches shared state.

Entities:
- Movie: catalogue title with optional genre and 1-5 rating
- Customer: member with a membership tier
- Rental: customer/movie checkout with denormalized names and pricing
- WatchlistItem: movie a customer intends to rent later

Derived values (all take an explicit `today`):
- derive_status: lazy Active -> Overdue transition
- total_cost: max(1, days) * daily rate + late fee
- days_overdue / is_overdue
- late_fee_for: flat per-day late fee at return time
"""

from datetime import date
from decimal import Decimal
from enum import Enum, IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENT = Decimal("0.01")
ZERO = Decimal("0")


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Genre(str, Enum):
    """Movie genre classification"""
    ACTION = "Action"
    COMEDY = "Comedy"
    DRAMA = "Drama"
    HORROR = "Horror"
    SCIFI = "SciFi"
    ANIMATION = "Animation"
    THRILLER = "Thriller"
    ROMANCE = "Romance"
    DOCUMENTARY = "Documentary"
    ADVENTURE = "Adventure"

    @property
    def display_name(self) -> str:
        return "Sci-Fi" if self is Genre.SCIFI else self.value


class MembershipType(IntEnum):
    """Membership tiers, ordered low to high"""
    BASIC = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4

    @property
    def display_name(self) -> str:
        return self.name.title()


class RentalStatus(str, Enum):
    """Rental lifecycle status"""
    ACTIVE = "Active"
    OVERDUE = "Overdue"
    RETURNED = "Returned"


class WatchlistPriority(IntEnum):
    """Watchlist item priority levels, ordered low to high"""
    NORMAL = 1
    HIGH = 2
    MUST_WATCH = 3

    @property
    def display_name(self) -> str:
        return "Must Watch" if self is WatchlistPriority.MUST_WATCH else self.name.title()


# =============================================================================
# ENTITIES
# =============================================================================

class Entity(BaseModel):
    """Base record: integer identity assigned by the owning store"""

    model_config = ConfigDict(validate_assignment=True)

    id: int = 0


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value


class Movie(Entity):
    """Catalogue title"""

    name: str = Field(..., max_length=255)
    release_date: Optional[date] = None
    genre: Optional[Genre] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names"""
        return _require_text(v)


class Customer(Entity):
    """Store member"""

    name: str = Field(..., max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    member_since: Optional[date] = None
    membership_type: MembershipType = MembershipType.BASIC

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names"""
        return _require_text(v)


class Rental(Entity):
    """
    A movie checked out by a customer.

    Customer and movie names are snapshots taken at rental time. Dates left
    unset are filled in by the repository on checkout.
    """

    customer_id: int
    customer_name: Optional[str] = None
    movie_id: int
    movie_name: Optional[str] = None
    rental_date: Optional[date] = None
    due_date: Optional[date] = None
    return_date: Optional[date] = None
    daily_rate: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), le=Decimal("999.99"))
    late_fee: Decimal = Field(default=ZERO, ge=0)
    status: RentalStatus = RentalStatus.ACTIVE

    @property
    def is_returned(self) -> bool:
        return self.status == RentalStatus.RETURNED

    # `today` should come from the store clock (`repository.today()`)

    def total_cost(self, today: date) -> Decimal:
        """Rental days (at least one) times the daily rate, plus late fee"""
        return total_cost(self, today)

    def days_overdue(self, today: date) -> int:
        return days_overdue(self, today)

    def is_overdue(self, today: date) -> bool:
        return is_overdue(self, today)


class WatchlistItem(Entity):
    """Movie a customer wants to watch later"""

    customer_id: int
    customer_name: Optional[str] = None
    movie_id: int
    movie_name: Optional[str] = None
    movie_genre: Optional[Genre] = None
    movie_rating: Optional[int] = Field(default=None, ge=1, le=5)
    added_date: Optional[date] = None
    note: Optional[str] = Field(default=None, max_length=500)
    priority: WatchlistPriority = WatchlistPriority.NORMAL


# =============================================================================
# DERIVED VALUES
# =============================================================================

def derive_status(rental: Rental, today: date) -> RentalStatus:
    """Status a rental should report on `today`.

    Non-returned rentals past their due date are Overdue. Returned is terminal.
    """
    if rental.status != RentalStatus.RETURNED and rental.due_date is not None and today > rental.due_date:
        return RentalStatus.OVERDUE
    return rental.status


def total_cost(rental: Rental, today: date) -> Decimal:
    start = rental.rental_date or today
    end = rental.return_date or today
    days = max(1, (end - start).days)
    return days * (rental.daily_rate or ZERO) + rental.late_fee


def days_overdue(rental: Rental, today: date) -> int:
    if rental.due_date is None:
        return 0
    if rental.status == RentalStatus.RETURNED:
        if rental.return_date is not None and rental.return_date > rental.due_date:
            return (rental.return_date - rental.due_date).days
        return 0
    return max(0, (today - rental.due_date).days)


def is_overdue(rental: Rental, today: date) -> bool:
    return derive_status(rental, today) == RentalStatus.OVERDUE


def late_fee_for(due_date: date, return_date: date, per_day: Decimal) -> Decimal:
    """Flat per-day fee for each day the return is past the due date"""
    return max(0, (return_date - due_date).days) * per_day


def to_money(value: Decimal) -> Decimal:
    """Quantize to cents"""
    return Decimal(value).quantize(CENT)


def sort_name(value: Optional[str]) -> tuple:
    """Case-insensitive ordering key for names"""
    value = value or ""
    return (value.casefold(), value)


def month_window(today: date, months: int) -> List[date]:
    """First day of each of the trailing `months` months, oldest first,
    ending with the month containing `today`."""
    index = today.year * 12 + (today.month - 1)
    starts = []
    for offset in range(months - 1, -1, -1):
        year, month_index = divmod(index - offset, 12)
        starts.append(date(year, month_index + 1, 1))
    return starts
