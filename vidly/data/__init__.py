"""
Data Generation Module
"""
from .generators import CatalogGenerator, RentalHistoryGenerator, RentalHistorySummary
from .seed import SeedSummary, seed_sample_data

__all__ = [
    "CatalogGenerator",
    "RentalHistoryGenerator",
    "RentalHistorySummary",
    "SeedSummary",
    "seed_sample_data",
]
