"""
Movie Repository

Thread-safe catalogue storage with name search, release-month lookup,
random pick and single-pass catalogue statistics.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vidly.domain.models import Genre, Movie, sort_name
from vidly.repositories.base import InMemoryRepository
from vidly.storage.store import EntityStore


@dataclass
class MovieStats:
    """Catalogue statistics"""
    total_movies: int = 0
    unrated_count: int = 0
    by_genre: Dict[Genre, int] = field(default_factory=dict)
    by_rating: Dict[int, int] = field(default_factory=dict)


class MovieRepository(InMemoryRepository[Movie]):
    """
    In-memory movie repository.

    Example:
        movies = MovieRepository()
        shrek = movies.add(Movie(name="Shrek!", genre=Genre.ANIMATION, rating=4))
        movies.search("shr", genre=Genre.ANIMATION)
    """

    entity_name = "Movie"

    def __init__(
        self,
        store: Optional[EntityStore[Movie]] = None,
        random_source: Optional[random.Random] = None,
    ):
        super().__init__(store if store is not None else EntityStore("movies"))
        self._random = random_source or random.Random()

    def search(
        self,
        query: Optional[str] = None,
        genre: Optional[Genre] = None,
        min_rating: Optional[int] = None,
    ) -> List[Movie]:
        """
        Case-insensitive name search with optional genre and minimum rating.

        Args:
            query: Name substring; blank matches everything
            genre: Exact genre filter
            min_rating: Only movies rated at least this (unrated never match)

        Returns:
            Matching movies ordered by name
        """
        needle = query.strip().casefold() if query and query.strip() else None

        with self._store.lock:
            results = []
            for movie in self._store.items.values():
                if needle is not None and needle not in movie.name.casefold():
                    continue
                if genre is not None and movie.genre != genre:
                    continue
                if min_rating is not None and (movie.rating is None or movie.rating < min_rating):
                    continue
                results.append(self._clone(movie))

        results.sort(key=lambda m: sort_name(m.name))
        return results

    def get_by_release_date(self, year: int, month: int) -> List[Movie]:
        """Movies released in the given month, ordered by release date"""
        with self._store.lock:
            results = [
                self._clone(m)
                for m in self._store.items.values()
                if m.release_date is not None
                and m.release_date.year == year
                and m.release_date.month == month
            ]

        results.sort(key=lambda m: m.release_date)
        return results

    def get_random(self) -> Optional[Movie]:
        with self._store.lock:
            if not self._store.items:
                return None
            return self._clone(self._random.choice(list(self._store.items.values())))

    def get_stats(self) -> MovieStats:
        """Per-genre and per-rating counts in one pass"""
        with self._store.lock:
            stats = MovieStats(total_movies=len(self._store.items))
            for movie in self._store.items.values():
                if movie.genre is not None:
                    stats.by_genre[movie.genre] = stats.by_genre.get(movie.genre, 0) + 1
                if movie.rating is None:
                    stats.unrated_count += 1
                else:
                    stats.by_rating[movie.rating] = stats.by_rating.get(movie.rating, 0) + 1
        return stats
