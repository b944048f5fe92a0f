"""
Vidly Rental Core - Error Taxonomy
==================================

Every failure a caller has to branch on is raised as a subclass of
`VidlyError` carrying a machine-readable `kind`:

- `NotFoundError`        entity id has no matching record (404-equivalent)
- `ConflictError`        business rule violated: double checkout, double
                         return, duplicate watchlist entry
- `InvalidArgumentError` out-of-range or malformed input
- `NullArgumentError`    required input missing

Usage
-----
    try:
        rentals.checkout(rental)
    except MovieAlreadyRentedError as exc:
        show_message(exc.message)
"""

from enum import Enum
from typing import Any, Dict, Optional

__all__ = [
    "ErrorKind",
    "VidlyError",
    "NotFoundError",
    "ConflictError",
    "MovieAlreadyRentedError",
    "RentalAlreadyReturnedError",
    "DuplicateWatchlistItemError",
    "InvalidArgumentError",
    "NullArgumentError",
]


class ErrorKind(str, Enum):
    """Caller-distinguishable failure categories"""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_ARGUMENT = "invalid_argument"
    NULL_ARGUMENT = "null_argument"


class VidlyError(Exception):
    """Base error with a kind and optional structured details.

    Attributes
    -----------
    message : str
        Human-readable error message.
    kind : ErrorKind
        Failure category callers branch on.
    details : dict
        Machine-readable context (entity name, ids, constraint values).
    """

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Return a problem-like dict for presentation layers."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            "details": dict(self.details),
        }


class NotFoundError(VidlyError, LookupError):
    """Raised when an entity id has no matching record."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: Any) -> None:
        super().__init__(
            f"{entity} with Id {entity_id} not found.",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(VidlyError):
    """Raised when an operation would break a business rule."""

    kind = ErrorKind.CONFLICT


class MovieAlreadyRentedError(ConflictError):
    """The movie already has an active or overdue rental."""

    def __init__(self, movie_id: int) -> None:
        super().__init__(
            "This movie is currently rented out.",
            details={"movie_id": movie_id},
        )
        self.movie_id = movie_id


class RentalAlreadyReturnedError(ConflictError):
    """The rental is already in its terminal Returned state."""

    def __init__(self, rental_id: int) -> None:
        super().__init__(
            f"Rental {rental_id} has already been returned.",
            details={"rental_id": rental_id},
        )
        self.rental_id = rental_id


class DuplicateWatchlistItemError(ConflictError):
    """The (customer, movie) pair is already on the watchlist."""

    def __init__(self, customer_id: int, movie_id: int) -> None:
        super().__init__(
            "This movie is already on the customer's watchlist.",
            details={"customer_id": customer_id, "movie_id": movie_id},
        )
        self.customer_id = customer_id
        self.movie_id = movie_id


class InvalidArgumentError(VidlyError, ValueError):
    """Raised for out-of-range arguments and invalid entity data."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, argument: str, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details={"argument": argument, **(details or {})})
        self.argument = argument


class NullArgumentError(VidlyError, TypeError):
    """Raised when a required argument is None."""

    kind = ErrorKind.NULL_ARGUMENT

    def __init__(self, argument: str) -> None:
        super().__init__(f"Argument '{argument}' must not be None.", details={"argument": argument})
        self.argument = argument
