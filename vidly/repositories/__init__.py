"""
Repositories Module

Thread-safe in-memory repositories for the rental core.
"""
from .base import InMemoryRepository
from .customers import CustomerRepository, CustomerStats
from .movies import MovieRepository, MovieStats
from .rentals import RentalRepository, RentalStats
from .watchlist import PopularWatchlistMovie, WatchlistRepository, WatchlistStats

__all__ = [
    "InMemoryRepository",
    "CustomerRepository",
    "CustomerStats",
    "MovieRepository",
    "MovieStats",
    "RentalRepository",
    "RentalStats",
    "PopularWatchlistMovie",
    "WatchlistRepository",
    "WatchlistStats",
]
