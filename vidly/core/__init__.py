"""
Core Module
"""
from .exceptions import (
    ConflictError,
    DuplicateWatchlistItemError,
    ErrorKind,
    InvalidArgumentError,
    MovieAlreadyRentedError,
    NotFoundError,
    NullArgumentError,
    RentalAlreadyReturnedError,
    VidlyError,
)

__all__ = [
    "ConflictError",
    "DuplicateWatchlistItemError",
    "ErrorKind",
    "InvalidArgumentError",
    "MovieAlreadyRentedError",
    "NotFoundError",
    "NullArgumentError",
    "RentalAlreadyReturnedError",
    "VidlyError",
]
