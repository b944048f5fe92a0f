"""
Unit Tests - Sample Data and Generators
"""
from vidly.data import CatalogGenerator, RentalHistoryGenerator, seed_sample_data
from vidly.domain import Genre, MembershipType, RentalStatus


class TestSampleData:
    """Tests for the fixed demo catalogue"""

    def test_loads_all_repositories(self, movie_repo, customer_repo, rental_repo, watchlist_repo):
        summary = seed_sample_data(movie_repo, customer_repo, rental_repo, watchlist_repo)

        assert (summary.movies, summary.customers, summary.rentals, summary.watchlist_items) == (3, 5, 3, 3)
        assert movie_repo.get_by_id(2).name == "The Godfather"
        assert customer_repo.get_by_id(4).membership_type == MembershipType.PLATINUM

    def test_rented_set_matches_statuses(self, movie_repo, customer_repo, rental_repo, watchlist_repo):
        seed_sample_data(movie_repo, customer_repo, rental_repo, watchlist_repo)

        assert rental_repo.is_movie_rented_out(1)
        assert rental_repo.is_movie_rented_out(2)
        assert not rental_repo.is_movie_rented_out(3)
        assert [r.id for r in rental_repo.get_overdue()] == [2]
        assert rental_repo.get_by_id(3).status == RentalStatus.RETURNED

    def test_new_records_continue_after_seeded_ids(self, movie_repo, customer_repo, rental_repo, watchlist_repo):
        seed_sample_data(movie_repo, customer_repo, rental_repo, watchlist_repo)

        assert watchlist_repo.is_on_watchlist(1, 3)
        assert [i.movie_id for i in watchlist_repo.get_by_customer(1)] == [2, 3]
        assert movie_repo.add(movie_repo.get_by_id(1)).id == 4


class TestCatalogGenerator:
    """Tests for Faker-backed catalogue generation"""

    def test_generates_valid_movies(self):
        movies = CatalogGenerator(seed=1).generate_movies(25)

        assert len(movies) == 25
        assert all(m.name.strip() for m in movies)
        assert all(m.genre in Genre for m in movies)
        assert all(m.rating is None or 1 <= m.rating <= 5 for m in movies)

    def test_same_seed_same_catalogue(self):
        first = CatalogGenerator(seed=9).generate_customers(5)
        second = CatalogGenerator(seed=9).generate_customers(5)

        assert [c.name for c in first] == [c.name for c in second]
        assert [c.membership_type for c in first] == [c.membership_type for c in second]


class TestRentalHistoryGenerator:
    """Tests for generated rental history"""

    def test_history_keeps_rented_set_consistent(self, movie_repo, customer_repo, rental_repo):
        catalog = CatalogGenerator(seed=3)
        movies = [movie_repo.add(m) for m in catalog.generate_movies(8)]
        customers = [customer_repo.add(c) for c in catalog.generate_customers(4)]

        summary = RentalHistoryGenerator(rental_repo, seed=3).generate(customers, movies, attempts=60)

        assert summary.checkouts + summary.conflicts == 60
        stats = rental_repo.get_stats()
        assert stats.total_rentals == summary.checkouts
        assert stats.returned_rentals == summary.returns
        for movie in movies:
            open_rentals = [r for r in rental_repo.get_by_movie(movie.id) if r.status != RentalStatus.RETURNED]
            assert len(open_rentals) <= 1
            assert rental_repo.is_movie_rented_out(movie.id) == bool(open_rentals)

    def test_empty_inputs(self, rental_repo):
        summary = RentalHistoryGenerator(rental_repo).generate([], [])
        assert summary.checkouts == 0
