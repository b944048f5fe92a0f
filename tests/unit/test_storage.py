"""
Unit Tests - Entity Stores, Shared Stores and Seeding
"""
from datetime import timedelta

import pytest

from vidly.core import DuplicateWatchlistItemError, InvalidArgumentError, MovieAlreadyRentedError
from vidly.domain import Movie, Rental, RentalStatus, WatchlistItem
from vidly.repositories import MovieRepository, RentalRepository, WatchlistRepository
from vidly.storage import EntityStore, RentalStore, WatchlistStore


class TestSharedStore:
    """Repositories built on one store see the same records and lock"""

    def test_empty_store_is_kept(self, clock):
        store = EntityStore("movies", clock)

        first = MovieRepository(store)
        second = MovieRepository(store)
        first.add(Movie(name="Heat"))

        assert first.store is store
        assert second.count() == 1

    def test_checkout_conflicts_across_repositories(self, clock, test_settings):
        store = RentalStore(clock)
        front_desk = RentalRepository(store, test_settings.rentals)
        kiosk = RentalRepository(store, test_settings.rentals)

        front_desk.checkout(Rental(customer_id=1, movie_id=1))

        with pytest.raises(MovieAlreadyRentedError):
            kiosk.checkout(Rental(customer_id=2, movie_id=1))
        assert kiosk.count() == 1

    def test_store_clock_is_used(self, clock, test_settings, today):
        repo = RentalRepository(RentalStore(clock), test_settings.rentals)

        rental = repo.checkout(Rental(customer_id=1, movie_id=1))

        assert repo.today() == today
        assert rental.rental_date == today
        assert rental.due_date == today + timedelta(days=7)

    def test_app_repositories_use_app_stores(self, app, clock):
        assert app.movies.store is app.movie_store
        assert app.customers.store is app.customer_store
        assert app.rentals.store is app.rental_store
        assert app.watchlist.store is app.watchlist_store
        assert app.rentals.today() == clock.today

        app.movies.add(Movie(name="Heat"))
        app.shutdown()

        assert app.movies.count() == 0

    def test_model_helpers_agree_with_repository_reads(self, rental_repo, clock):
        rental = rental_repo.checkout(Rental(customer_id=1, movie_id=1))
        clock.advance(9)

        stored = rental_repo.get_by_id(rental.id)

        assert stored.status == RentalStatus.OVERDUE
        assert stored.is_overdue(rental_repo.today())
        assert stored.days_overdue(rental_repo.today()) == 2


class TestSeedChecks:
    """Seeding follows the same rules as the repository write paths"""

    def test_two_open_rentals_of_one_movie_rejected(self, rental_repo):
        with pytest.raises(MovieAlreadyRentedError):
            rental_repo.seed([
                Rental(id=1, customer_id=1, movie_id=7),
                Rental(id=2, customer_id=2, movie_id=7),
            ])

        assert rental_repo.count() == 0
        assert not rental_repo.is_movie_rented_out(7)

    def test_open_rental_on_rented_movie_rejected(self, rental_repo):
        rental_repo.checkout(Rental(customer_id=1, movie_id=7))

        with pytest.raises(MovieAlreadyRentedError):
            rental_repo.seed([Rental(id=5, customer_id=2, movie_id=7)])

    def test_returned_history_alongside_open_rental(self, rental_repo, today):
        count = rental_repo.seed([
            Rental(id=1, customer_id=1, movie_id=7, rental_date=today - timedelta(days=20),
                   due_date=today - timedelta(days=13), return_date=today - timedelta(days=13),
                   status=RentalStatus.RETURNED),
            Rental(id=2, customer_id=2, movie_id=7),
        ])

        assert count == 2
        assert rental_repo.is_movie_rented_out(7)

    def test_taken_id_rejected(self, rental_repo):
        rental_repo.seed([Rental(id=1, customer_id=1, movie_id=5)])

        with pytest.raises(InvalidArgumentError):
            rental_repo.seed([Rental(id=1, customer_id=1, movie_id=6, status=RentalStatus.RETURNED)])

        assert rental_repo.store.rented_movie_ids == {5}
        assert rental_repo.get_by_id(1).movie_id == 5

    def test_removed_id_not_reused(self, movie_repo):
        movie = movie_repo.add(Movie(name="Heat"))
        movie_repo.remove(movie.id)

        with pytest.raises(InvalidArgumentError):
            movie_repo.seed([Movie(id=movie.id, name="Ronin")])

    def test_repeated_id_in_batch_rejected(self, movie_repo):
        with pytest.raises(InvalidArgumentError):
            movie_repo.seed([Movie(id=3, name="Heat"), Movie(id=3, name="Ronin")])

        assert movie_repo.count() == 0

    def test_rental_defaults_applied(self, rental_repo, today):
        rental_repo.seed([Rental(id=1, customer_id=1, movie_id=1), Rental(id=2, customer_id=1, movie_id=2)])

        seeded = rental_repo.get_by_id(1)
        assert seeded.rental_date == today
        assert seeded.due_date == today + timedelta(days=7)
        assert len(rental_repo.get_active_by_customer(1)) == 2
        assert rental_repo.return_rental(1).late_fee == 0

    def test_duplicate_watchlist_pair_rejected(self, watchlist_repo):
        with pytest.raises(DuplicateWatchlistItemError):
            watchlist_repo.seed([
                WatchlistItem(id=1, customer_id=1, movie_id=3),
                WatchlistItem(id=2, customer_id=1, movie_id=3),
            ])

        assert watchlist_repo.count() == 0


class TestClear:
    """Clearing returns a store to its initial state"""

    def test_clear_restarts_ids(self, clock):
        store = WatchlistStore(clock)
        repo = WatchlistRepository(store)
        repo.add(WatchlistItem(customer_id=1, movie_id=1))

        store.clear()

        assert len(store) == 0
        assert store.customer_movie_pairs == set()
        assert repo.add(WatchlistItem(customer_id=1, movie_id=1)).id == 1

    def test_restart_reloads_sample_data(self, seeded_app):
        seeded_app.shutdown()
        seeded_app.startup(configure_logs=False)

        assert seeded_app.rentals.count() == 3
        assert seeded_app.rentals.is_movie_rented_out(1)
        assert seeded_app.movies.add(Movie(name="Heat")).id == 4
