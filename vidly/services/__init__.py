"""
Services Module

Read-side analytics over the repositories.
"""
from .activity import (
    ActivityInsight,
    ActivitySummary,
    CustomerActivityReport,
    CustomerActivityService,
    GenreActivity,
    InsightType,
    MonthlyActivityEntry,
)
from .dashboard import (
    CustomerRankEntry,
    DashboardData,
    DashboardService,
    GenreRevenueEntry,
    MembershipRevenueEntry,
    MonthlyRevenueEntry,
    MovieRankEntry,
)
from .recommendations import (
    GenrePreference,
    MovieRecommendation,
    RecommendationResult,
    RecommendationService,
)

__all__ = [
    "ActivityInsight",
    "ActivitySummary",
    "CustomerActivityReport",
    "CustomerActivityService",
    "GenreActivity",
    "InsightType",
    "MonthlyActivityEntry",
    "CustomerRankEntry",
    "DashboardData",
    "DashboardService",
    "GenreRevenueEntry",
    "MembershipRevenueEntry",
    "MonthlyRevenueEntry",
    "MovieRankEntry",
    "GenrePreference",
    "MovieRecommendation",
    "RecommendationResult",
    "RecommendationService",
]
