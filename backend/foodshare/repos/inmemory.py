# foodshare/repos/inmemory.py
from typing import Dict, List, Optional

from foodshare.core.errors import NotFound
from foodshare.repos.base import FoodShareRepo
from foodshare.schemas import Acceptor, Activity, DeliveryPerson, Restaurant


def _copy(record):
    return record.model_copy(deep=True)


def _pick(store: Dict[str, object], record_id: str, kind: str):
    doc = store.get(record_id)
    if doc is None:
        raise NotFound(f"{kind} not found")
    return doc


class InMemoryRepo(FoodShareRepo):
    engine_name = "In-Memory"

    def __init__(self):
        # dicts keep insertion order, which is the "store order" matching relies on
        self.restaurants: Dict[str, Restaurant] = {}
        self.acceptors: Dict[str, Acceptor] = {}
        self.deliveries: Dict[str, DeliveryPerson] = {}
        self.activities: Dict[str, Activity] = {}

    async def _flush(self) -> None:
        """Called after every mutation; the file-backed repo persists here."""

    # Restaurants
    async def add_restaurant(self, record: Restaurant) -> Restaurant:
        self.restaurants[record.id] = _copy(record)
        await self._flush()
        return _copy(record)

    async def get_restaurant(self, restaurant_id: str) -> Restaurant:
        return _copy(_pick(self.restaurants, restaurant_id, "Restaurant"))

    async def list_restaurants(self, verified: Optional[bool] = None) -> List[Restaurant]:
        vals = self.restaurants.values()
        return [_copy(r) for r in vals if (verified is None or r.is_verified == verified)]

    async def save_restaurant(self, record: Restaurant) -> None:
        _pick(self.restaurants, record.id, "Restaurant")
        self.restaurants[record.id] = _copy(record)
        await self._flush()

    async def verify_restaurant(self, restaurant_id: str) -> Restaurant:
        doc = _pick(self.restaurants, restaurant_id, "Restaurant")
        doc.is_verified = True
        await self._flush()
        return _copy(doc)

    async def delete_restaurant(self, restaurant_id: str) -> None:
        _pick(self.restaurants, restaurant_id, "Restaurant")
        del self.restaurants[restaurant_id]
        await self._flush()

    # Acceptors
    async def add_acceptor(self, record: Acceptor) -> Acceptor:
        self.acceptors[record.id] = _copy(record)
        await self._flush()
        return _copy(record)

    async def find_acceptor_by_id(self, acceptor_id: str) -> Acceptor:
        return _copy(_pick(self.acceptors, acceptor_id, "Acceptor"))

    async def list_acceptors(self, verified: Optional[bool] = None) -> List[Acceptor]:
        vals = self.acceptors.values()
        return [_copy(a) for a in vals if (verified is None or a.is_verified == verified)]

    async def save_acceptor(self, record: Acceptor) -> None:
        _pick(self.acceptors, record.id, "Acceptor")
        self.acceptors[record.id] = _copy(record)
        await self._flush()

    async def delete_acceptor(self, acceptor_id: str) -> None:
        _pick(self.acceptors, acceptor_id, "Acceptor")
        del self.acceptors[acceptor_id]
        await self._flush()

    # Delivery persons
    async def add_delivery(self, record: DeliveryPerson) -> DeliveryPerson:
        self.deliveries[record.id] = _copy(record)
        await self._flush()
        return _copy(record)

    async def list_deliveries(self) -> List[DeliveryPerson]:
        return [_copy(d) for d in reversed(self.deliveries.values())]

    async def verify_delivery(self, delivery_id: str) -> DeliveryPerson:
        doc = _pick(self.deliveries, delivery_id, "Delivery person")
        doc.is_verified = True
        await self._flush()
        return _copy(doc)

    async def delete_delivery(self, delivery_id: str) -> None:
        _pick(self.deliveries, delivery_id, "Delivery person")
        del self.deliveries[delivery_id]
        await self._flush()

    # Activity log
    async def append_activity(self, entry: Activity) -> Activity:
        self.activities[entry.id] = _copy(entry)
        await self._flush()
        return _copy(entry)

    async def list_activities(self) -> List[Activity]:
        return sorted(
            (_copy(a) for a in reversed(self.activities.values())),
            key=lambda a: a.timestamp,
            reverse=True,
        )

    async def delete_activity(self, activity_id: str) -> None:
        _pick(self.activities, activity_id, "Activity")
        del self.activities[activity_id]
        await self._flush()

    # Stats
    async def counts(self) -> Dict[str, int]:
        return {
            "restaurants": len(self.restaurants),
            "acceptors": len(self.acceptors),
            "deliveries": len(self.deliveries),
            "activities": len(self.activities),
        }
