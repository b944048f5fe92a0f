"""
Customer Repository

Thread-safe member storage with name/email search, join-month lookup and
per-tier statistics.
"""

from dataclasses import dataclass
from typing import List, Optional

from vidly.domain.models import Customer, MembershipType, sort_name
from vidly.repositories.base import InMemoryRepository
from vidly.storage.store import EntityStore


@dataclass
class CustomerStats:
    """Customer base statistics"""
    total_customers: int = 0
    basic_count: int = 0
    silver_count: int = 0
    gold_count: int = 0
    platinum_count: int = 0


_TIER_FIELDS = {
    MembershipType.BASIC: "basic_count",
    MembershipType.SILVER: "silver_count",
    MembershipType.GOLD: "gold_count",
    MembershipType.PLATINUM: "platinum_count",
}


class CustomerRepository(InMemoryRepository[Customer]):
    """In-memory customer repository"""

    entity_name = "Customer"

    def __init__(self, store: Optional[EntityStore[Customer]] = None):
        super().__init__(store if store is not None else EntityStore("customers"))

    def search(
        self,
        query: Optional[str] = None,
        membership_type: Optional[MembershipType] = None,
    ) -> List[Customer]:
        """Name or email substring match (case-insensitive), ordered by name"""
        needle = query.strip().casefold() if query and query.strip() else None

        with self._store.lock:
            results = []
            for customer in self._store.items.values():
                if needle is not None:
                    in_name = needle in customer.name.casefold()
                    in_email = customer.email is not None and needle in customer.email.casefold()
                    if not (in_name or in_email):
                        continue
                if membership_type is not None and customer.membership_type != membership_type:
                    continue
                results.append(self._clone(customer))

        results.sort(key=lambda c: sort_name(c.name))
        return results

    def get_by_member_since(self, year: int, month: int) -> List[Customer]:
        """Customers who joined in the given month, ordered by join date"""
        with self._store.lock:
            results = [
                self._clone(c)
                for c in self._store.items.values()
                if c.member_since is not None
                and c.member_since.year == year
                and c.member_since.month == month
            ]

        results.sort(key=lambda c: c.member_since)
        return results

    def get_stats(self) -> CustomerStats:
        with self._store.lock:
            stats = CustomerStats(total_customers=len(self._store.items))
            for customer in self._store.items.values():
                attr = _TIER_FIELDS[customer.membership_type]
                setattr(stats, attr, getattr(stats, attr) + 1)
        return stats
