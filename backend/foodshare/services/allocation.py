# foodshare/services/allocation.py
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from foodshare.core.errors import NotFound, StorageError
from foodshare.schemas import (
    Acceptor,
    Activity,
    AllocationResult,
    FoodItem,
    Pricing,
    Restaurant,
    utcnow,
)

logger = logging.getLogger(__name__)

RESTAURANT_PAYOUT_RATE = 0.10
ACCEPTOR_COST_RATE = 0.20
PLATFORM_PROFIT_RATE = 0.10

NO_MATCH_INFO = "No matching fresh verified food found."
ENGINE_ACTOR = "Pricing Engine"
ENGINE_ACTION = "Matched & Priced"


@dataclass
class Allocation:
    acceptor: Acceptor
    activity: Activity
    match_info: str
    restaurant: Optional[Restaurant] = None
    item_index: Optional[int] = None
    pricing: Optional[Pricing] = None

    @property
    def matched(self) -> bool:
        return self.restaurant is not None

    def result(self) -> AllocationResult:
        return AllocationResult(
            data=self.acceptor,
            match_info=self.match_info,
            pricing=self.pricing,
            matched=self.matched,
            matched_restaurant_id=self.restaurant.id if self.restaurant else None,
        )


def item_qualifies(item: FoodItem, food: str, qty: int, now: datetime) -> bool:
    return (
        item.food.lower() == food
        and item.quantity >= qty
        and now < item.expiry_time
    )


def find_match(
    acceptor: Acceptor, restaurants: Iterable[Restaurant], now: datetime
) -> Optional[Tuple[Restaurant, int]]:
    """
    First-fit: first verified restaurant in iteration order, first qualifying
    item in list order. Returns (restaurant, item index) or None.
    """
    food = acceptor.food.lower()
    for rest in restaurants:
        if not rest.is_verified:
            continue
        for idx, item in enumerate(rest.items):
            if item_qualifies(item, food, acceptor.quantity, now):
                return rest, idx
    return None


def price_allocation(item: FoodItem, requested_qty: int) -> Pricing:
    """Price `requested_qty` units of `item`, using its quantity before decrement."""
    unit_value = item.value / (item.quantity if item.quantity > 0 else 1)
    actual = unit_value * requested_qty
    return Pricing(
        actual_value=actual,
        restaurant_payout=RESTAURANT_PAYOUT_RATE * actual,
        acceptor_cost=ACCEPTOR_COST_RATE * actual,
        platform_profit=PLATFORM_PROFIT_RATE * actual,
    )


def allocate_request(
    acceptor: Acceptor, restaurants: Iterable[Restaurant], now: Optional[datetime] = None
) -> Allocation:
    """
    Match one acceptor request against a snapshot of restaurants.

    Pure: the inputs are left untouched. The returned Allocation carries an
    updated copy of the acceptor (resolved), an updated copy of the matched
    restaurant (item decremented) if any, and the audit entry to append.
    """
    now = now or utcnow()
    hit = find_match(acceptor, restaurants, now)

    restaurant = None
    item_index = None
    pricing = None
    match_info = NO_MATCH_INFO

    if hit:
        source, item_index = hit
        pricing = price_allocation(source.items[item_index], acceptor.quantity)
        restaurant = source.model_copy(deep=True)
        restaurant.items[item_index].quantity -= acceptor.quantity
        match_info = (
            f"Matched with {restaurant.name}. "
            f"Payout: {pricing.restaurant_payout:.2f}, Cost: {pricing.acceptor_cost:.2f}"
        )

    resolved = acceptor.model_copy(deep=True)
    resolved.is_verified = True
    resolved.verified_at = now
    resolved.matched = restaurant is not None
    resolved.matched_restaurant_id = restaurant.id if restaurant else None
    resolved.match_info = match_info
    resolved.pricing = pricing

    activity = Activity(
        actor_type="System",
        actor_name=ENGINE_ACTOR,
        action=ENGINE_ACTION,
        details=f"Acceptor {acceptor.name} matched. {match_info}",
        timestamp=now,
    )
    return Allocation(
        acceptor=resolved,
        activity=activity,
        match_info=match_info,
        restaurant=restaurant,
        item_index=item_index,
        pricing=pricing,
    )


class KeyedLocks:
    """asyncio.Lock per key, dropped once nobody holds or waits on it."""

    def __init__(self):
        self._entries: Dict[str, list] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @asynccontextmanager
    async def hold(self, key: str):
        entry = self._entries.setdefault(key, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._entries[key]


class AllocationEngine:
    """
    Runs allocate_request against a repository.

    Writes to one restaurant are serialized by a per-restaurant lock and the
    matched restaurant is re-read under that lock before its item is
    decremented, so two allocations racing for the same item cannot both
    take it. Acceptor deletes share the per-acceptor lock with allocate.
    Locks are per process.
    """

    def __init__(self, repo, clock=utcnow):
        self.repo = repo
        self._clock = clock
        self._restaurant_locks = KeyedLocks()
        self._acceptor_locks = KeyedLocks()

    async def allocate(self, acceptor_id: str) -> AllocationResult:
        async with self._acceptor_locks.hold(acceptor_id):
            acceptor = await self.repo.find_acceptor_by_id(acceptor_id)

            if acceptor.is_verified:
                logger.info("acceptor %s already resolved; returning recorded outcome", acceptor_id)
                return replay(acceptor)

            allocation = await self._match_and_commit(acceptor)
            await self.repo.save_acceptor(allocation.acceptor)

            try:
                await self.repo.append_activity(allocation.activity)
            except StorageError:
                # inventory and acceptor writes stand; the caller sees the failure
                logger.exception("activity append failed for acceptor %s", acceptor_id)
                raise

            if allocation.matched:
                logger.info(
                    "allocated %s x %r to acceptor %s from restaurant %s",
                    acceptor.quantity, acceptor.food, acceptor_id, allocation.restaurant.id,
                )
            else:
                logger.info("no match for acceptor %s (%s x %r)", acceptor_id, acceptor.quantity, acceptor.food)
            return allocation.result()

    async def delete_acceptor(self, acceptor_id: str) -> None:
        # waits for an in-flight allocation of the same acceptor to finish
        async with self._acceptor_locks.hold(acceptor_id):
            await self.repo.delete_acceptor(acceptor_id)

    async def _match_and_commit(self, acceptor: Acceptor) -> Allocation:
        while True:
            now = self._clock()
            restaurants = await self.repo.find_verified_restaurants()
            allocation = allocate_request(acceptor, restaurants, now)
            if not allocation.matched:
                return allocation

            rid = allocation.restaurant.id
            async with self._restaurant_locks.hold(rid):
                try:
                    fresh = await self.repo.get_restaurant(rid)
                except NotFound:
                    fresh = None
                confirmed = allocate_request(acceptor, [fresh], now) if fresh else None
                if confirmed and confirmed.matched:
                    await self.repo.save_restaurant(confirmed.restaurant)
                    return confirmed
            logger.warning("restaurant %s changed while allocating to %s; rescanning", rid, acceptor.id)


def replay(acceptor: Acceptor) -> AllocationResult:
    return AllocationResult(
        data=acceptor,
        match_info=acceptor.match_info or NO_MATCH_INFO,
        pricing=acceptor.pricing,
        matched=bool(acceptor.matched),
        matched_restaurant_id=acceptor.matched_restaurant_id,
    )
