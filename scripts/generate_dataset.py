"""
Synthetic Rental Store Generator
Fills an in-memory store with generated movies, customers and rental history
and prints the resulting dashboard numbers.
"""

import argparse

from vidly.config import Settings
from vidly.data import CatalogGenerator, RentalHistoryGenerator
from vidly.main import create_app


def parse_args():
    parser = argparse.ArgumentParser(description="Generate a synthetic rental store")
    parser.add_argument("--movies", type=int, default=200)
    parser.add_argument("--customers", type=int, default=100)
    parser.add_argument("--rentals", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=42)
    return parser.parse_args()


def main():
    args = parse_args()
    settings = Settings(seed_sample_data=False)

    with create_app(settings) as app:
        catalog = CatalogGenerator(seed=args.seed)

        print(f"📊 Generating {args.movies:,} movies...")
        movies = [app.movies.add(m) for m in catalog.generate_movies(args.movies)]

        print(f"📊 Generating {args.customers:,} customers...")
        customers = [app.customers.add(c) for c in catalog.generate_customers(args.customers)]

        print(f"📊 Generating {args.rentals:,} rental attempts...")
        history = RentalHistoryGenerator(app.rentals, seed=args.seed).generate(
            customers, movies, attempts=args.rentals
        )
        print(f"   ✅ checkouts: {history.checkouts:,}  returns: {history.returns:,}  conflicts: {history.conflicts:,}")

        data = app.dashboard.get_dashboard()
        print("\n📈 Dashboard")
        print(f"   Active: {data.stats.active_rentals}  Overdue: {data.stats.overdue_rentals}  "
              f"Returned: {data.stats.returned_rentals}")
        print(f"   Revenue: ${data.stats.total_revenue:.2f}  Late fees: ${data.stats.total_late_fees:.2f}")
        for entry in data.top_movies:
            print(f"   🎬 {entry.movie_name}: {entry.rental_count} rentals")


if __name__ == "__main__":
    main()
