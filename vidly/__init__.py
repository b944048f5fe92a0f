"""
Vidly Rental Core

In-memory movie rental management: catalogue, customers, rentals,
watchlists and analytics.
"""

__version__ = "1.0.0"
