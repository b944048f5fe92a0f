"""
Storage Module
"""
from .store import EntityStore, RentalStore, WatchlistStore

__all__ = [
    "EntityStore",
    "RentalStore",
    "WatchlistStore",
]
