"""
Recommendation Service

Personalized movie suggestions from a customer's rental history.

Scoring:
- Genre preference: 1.0 per rental of the genre, plus a recency bonus of up
  to 0.5 that fades linearly over 30 days
- Movie score: preference x 2 + rating, +1 for five-star titles
- Movies the customer already rented are never suggested
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Set

import structlog

from vidly.config.settings import AnalyticsSettings, resolve_analytics_settings
from vidly.core.exceptions import InvalidArgumentError
from vidly.domain.models import Genre, Movie, Rental, sort_name
from vidly.repositories.base import require
from vidly.repositories.movies import MovieRepository
from vidly.repositories.rentals import RentalRepository

logger = structlog.get_logger(__name__)

RECENCY_WINDOW_DAYS = 30
RECENCY_BONUS = 0.5
GENRE_WEIGHT = 2.0
HIGH_RATING = 4


@dataclass
class GenrePreference:
    """A customer's affinity for one genre"""
    genre: Genre
    rental_count: int
    score: float


@dataclass
class MovieRecommendation:
    """A scored suggestion with a human-readable reason"""
    movie: Movie
    score: float
    reason: str


@dataclass
class RecommendationResult:
    customer_id: int
    total_rentals: int
    genre_preferences: List[GenrePreference] = field(default_factory=list)
    recommendations: List[MovieRecommendation] = field(default_factory=list)
    total_available_movies: int = 0


def analyze_genre_preferences(
    customer_rentals: Iterable[Rental],
    movie_lookup: Dict[int, Movie],
    today: date,
) -> Dict[Genre, float]:
    """
    Genre preference scores from rental history.

    Rentals of unknown or genre-less movies are skipped.
    """
    preferences: Dict[Genre, float] = {}

    for rental in customer_rentals:
        movie = movie_lookup.get(rental.movie_id)
        if movie is None or movie.genre is None:
            continue

        score = 1.0
        if rental.rental_date is not None:
            days_since = max(0, (today - rental.rental_date).days)
            if days_since <= RECENCY_WINDOW_DAYS:
                score += RECENCY_BONUS * (1.0 - days_since / RECENCY_WINDOW_DAYS)

        preferences[movie.genre] = preferences.get(movie.genre, 0.0) + score

    return preferences


def _reason(movie: Movie, genre_score: float) -> str:
    rating = movie.rating or 0
    if genre_score > 0 and rating >= HIGH_RATING:
        return f"Matches your love of {movie.genre.value} + highly rated ({movie.rating}★)"
    if genre_score > 0:
        return f"Based on your interest in {movie.genre.value} movies"
    if rating >= HIGH_RATING:
        return f"Highly rated ({movie.rating}★) - try something new!"
    return "Explore a different genre"


def score_movies(
    movies: Iterable[Movie],
    rented_movie_ids: Set[int],
    preferences: Dict[Genre, float],
) -> List[MovieRecommendation]:
    """Score every movie not in `rented_movie_ids`, best first"""
    scored = []

    for movie in movies:
        if movie.id in rented_movie_ids:
            continue

        genre_score = preferences.get(movie.genre, 0.0) if movie.genre is not None else 0.0
        score = genre_score * GENRE_WEIGHT + (movie.rating or 0)
        if movie.rating == 5:
            score += 1.0

        scored.append(MovieRecommendation(movie, round(score, 2), _reason(movie, genre_score)))

    scored.sort(key=lambda r: (-r.score, -(r.movie.rating or 0), sort_name(r.movie.name)))
    return scored


class RecommendationService:
    """
    Suggests unwatched movies weighted toward a customer's favourite genres.

    Example:
        service = RecommendationService(movies, rentals)
        result = service.get_recommendations(customer_id=1, max_recommendations=5)
        for rec in result.recommendations:
            print(rec.movie.name, rec.score, rec.reason)
    """

    def __init__(
        self,
        movie_repository: MovieRepository,
        rental_repository: RentalRepository,
        settings: Optional[AnalyticsSettings] = None,
    ):
        self.movie_repository = require(movie_repository, "movie_repository")
        self.rental_repository = require(rental_repository, "rental_repository")
        self.settings = resolve_analytics_settings(settings)

    def get_recommendations(
        self,
        customer_id: int,
        max_recommendations: Optional[int] = None,
    ) -> RecommendationResult:
        """
        Recommend movies for a customer.

        Args:
            customer_id: Customer to recommend for (unknown ids get rating-only picks)
            max_recommendations: Result cap, defaults to the configured count

        Raises:
            InvalidArgumentError: max_recommendations < 1
        """
        if max_recommendations is None:
            max_recommendations = self.settings.default_recommendations
        if max_recommendations < 1:
            raise InvalidArgumentError(
                "max_recommendations",
                "Must request at least 1 recommendation.",
                details={"value": max_recommendations},
            )

        today = self.rental_repository.today()
        customer_rentals = [r for r in self.rental_repository.get_all() if r.customer_id == customer_id]
        movies = self.movie_repository.get_all()
        movie_lookup = {m.id: m for m in movies}
        rented_ids = {r.movie_id for r in customer_rentals}

        preferences = analyze_genre_preferences(customer_rentals, movie_lookup, today)

        genre_counts: Dict[Genre, int] = {}
        for rental in customer_rentals:
            movie = movie_lookup.get(rental.movie_id)
            if movie is not None and movie.genre is not None:
                genre_counts[movie.genre] = genre_counts.get(movie.genre, 0) + 1

        genre_preferences = [
            GenrePreference(genre, genre_counts.get(genre, 0), score)
            for genre, score in sorted(preferences.items(), key=lambda kv: kv[1], reverse=True)
        ]

        recommendations = score_movies(movies, rented_ids, preferences)[:max_recommendations]

        logger.info(
            "Recommendations built",
            customer_id=customer_id,
            rentals=len(customer_rentals),
            recommendations=len(recommendations),
        )

        return RecommendationResult(
            customer_id=customer_id,
            total_rentals=len(customer_rentals),
            genre_preferences=genre_preferences,
            recommendations=recommendations,
            total_available_movies=sum(1 for m in movies if m.id not in rented_ids),
        )
