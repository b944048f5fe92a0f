"""
Unit Tests - Recommendation Service
"""
from datetime import timedelta

import pytest

from vidly.core import InvalidArgumentError, NullArgumentError
from vidly.domain import Genre, Movie, Rental
from vidly.services import RecommendationService
from vidly.services.recommendations import analyze_genre_preferences, score_movies


class TestGenrePreferences:
    """Tests for the genre preference scoring"""

    @pytest.fixture
    def lookup(self):
        return {
            1: Movie(id=1, name="Alien", genre=Genre.SCIFI, rating=5),
            2: Movie(id=2, name="Heat", genre=Genre.ACTION, rating=4),
            3: Movie(id=3, name="Untagged"),
        }

    def test_recent_rental_gets_full_bonus(self, lookup, today):
        rentals = [Rental(customer_id=1, movie_id=1, rental_date=today)]
        assert analyze_genre_preferences(rentals, lookup, today) == {Genre.SCIFI: pytest.approx(1.5)}

    def test_bonus_decays_over_thirty_days(self, lookup, today):
        rentals = [
            Rental(customer_id=1, movie_id=1, rental_date=today - timedelta(days=15)),
            Rental(customer_id=1, movie_id=2, rental_date=today - timedelta(days=45)),
        ]

        preferences = analyze_genre_preferences(rentals, lookup, today)

        assert preferences[Genre.SCIFI] == pytest.approx(1.25)
        assert preferences[Genre.ACTION] == pytest.approx(1.0)

    def test_genreless_and_unknown_movies_skipped(self, lookup, today):
        rentals = [
            Rental(customer_id=1, movie_id=3, rental_date=today),
            Rental(customer_id=1, movie_id=404, rental_date=today),
        ]
        assert analyze_genre_preferences(rentals, lookup, today) == {}


class TestScoreMovies:
    """Tests for movie scoring and reasons"""

    def test_reasons_by_precedence(self):
        movies = [
            Movie(id=1, name="Loved And Rated", genre=Genre.DRAMA, rating=4),
            Movie(id=2, name="Loved Only", genre=Genre.DRAMA, rating=3),
            Movie(id=3, name="Rated Only", genre=Genre.COMEDY, rating=5),
            Movie(id=4, name="Neither", genre=Genre.HORROR),
        ]

        scored = {r.movie.name: r for r in score_movies(movies, set(), {Genre.DRAMA: 1.0})}

        assert scored["Loved And Rated"].reason == "Matches your love of Drama + highly rated (4★)"
        assert scored["Loved Only"].reason == "Based on your interest in Drama movies"
        assert scored["Rated Only"].reason == "Highly rated (5★) - try something new!"
        assert scored["Neither"].reason == "Explore a different genre"

    def test_score_formula(self):
        movies = [
            Movie(id=1, name="Five Star", genre=Genre.DRAMA, rating=5),
            Movie(id=2, name="Unrated", genre=Genre.DRAMA),
        ]

        scored = {r.movie.name: r.score for r in score_movies(movies, set(), {Genre.DRAMA: 1.25})}

        assert scored["Five Star"] == pytest.approx(8.5)
        assert scored["Unrated"] == pytest.approx(2.5)

    def test_rented_movies_excluded(self):
        movies = [Movie(id=1, name="Seen", rating=5), Movie(id=2, name="Unseen", rating=1)]

        scored = score_movies(movies, {1}, {})

        assert [r.movie.name for r in scored] == ["Unseen"]

    def test_ties_broken_by_rating_then_name(self):
        movies = [
            Movie(id=1, name="zulu", rating=4),
            Movie(id=2, name="Alpha", rating=4),
            Movie(id=3, name="Loved", genre=Genre.DRAMA, rating=2),
        ]

        # Loved scores 1.0 * 2 + 2 = 4.0, tying the rated movies on score
        scored = score_movies(movies, set(), {Genre.DRAMA: 1.0})

        assert [r.movie.name for r in scored] == ["Alpha", "zulu", "Loved"]


class TestRecommendationService:
    """Tests for recommendations over the sample catalogue"""

    def test_recommends_unwatched_movies(self, seeded_app):
        # John Smith rented Shrek! (Animation) three days ago
        result = seeded_app.recommendations.get_recommendations(1)

        assert result.total_rentals == 1
        assert result.total_available_movies == 2
        assert [r.movie.name for r in result.recommendations] == ["Toy Story", "The Godfather"]
        assert result.recommendations[0].score == pytest.approx(8.9)
        assert result.recommendations[0].reason == "Matches your love of Animation + highly rated (5★)"
        assert result.recommendations[1].score == pytest.approx(6.0)

    def test_genre_preferences_reported(self, seeded_app):
        result = seeded_app.recommendations.get_recommendations(1)

        assert len(result.genre_preferences) == 1
        preference = result.genre_preferences[0]
        assert preference.genre == Genre.ANIMATION
        assert preference.rental_count == 1
        assert preference.score == pytest.approx(1.45)

    def test_never_recommends_rented_movie(self, seeded_app):
        result = seeded_app.recommendations.get_recommendations(1)
        assert 1 not in [r.movie.id for r in result.recommendations]

    def test_customer_without_history(self, seeded_app):
        result = seeded_app.recommendations.get_recommendations(3)

        assert result.total_rentals == 0
        assert result.genre_preferences == []
        assert [r.movie.name for r in result.recommendations] == ["The Godfather", "Toy Story", "Shrek!"]

    def test_max_recommendations_truncates(self, seeded_app):
        result = seeded_app.recommendations.get_recommendations(3, max_recommendations=1)
        assert len(result.recommendations) == 1

    def test_max_recommendations_must_be_positive(self, seeded_app):
        with pytest.raises(InvalidArgumentError) as exc_info:
            seeded_app.recommendations.get_recommendations(1, max_recommendations=0)
        assert exc_info.value.argument == "max_recommendations"

    def test_requires_collaborators(self, movie_repo):
        with pytest.raises(NullArgumentError):
            RecommendationService(movie_repo, None)
