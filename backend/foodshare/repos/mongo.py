# foodshare/repos/mongo.py
import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from foodshare.core.errors import NotFound, StorageError
from foodshare.repos.base import FoodShareRepo
from foodshare.schemas import Acceptor, Activity, DeliveryPerson, Restaurant

logger = logging.getLogger(__name__)

RESTAURANTS = "restaurants"
ACCEPTORS = "acceptors"
DELIVERIES = "deliveries"
ACTIVITIES = "activities"


@contextmanager
def _storage_errors(op: str):
    try:
        yield
    except PyMongoError as e:
        logger.exception("mongo %s failed", op)
        raise StorageError(f"{op} failed: {e}") from e


def _doc(record) -> dict:
    # native datetimes, camelCase keys, string _id
    return record.model_dump(by_alias=True)


async def ensure_indexes(db: AsyncIOMotorDatabase):
    async def ensure_index(col, keys, name: str, **kwargs):
        existing = [ix["name"] async for ix in col.list_indexes()]
        if name in existing:
            return
        await col.create_index(keys, name=name, **kwargs)

    await ensure_index(db[RESTAURANTS], [("isVerified", ASCENDING)], "isVerified_1")
    await ensure_index(db[ACCEPTORS], [("isVerified", ASCENDING)], "isVerified_1")
    await ensure_index(db[ACTIVITIES], [("timestamp", DESCENDING)], "timestamp_-1")


class MongoRepo(FoodShareRepo):
    engine_name = "MongoDB"

    def __init__(self, uri: str, db_name: str, client: Optional[AsyncIOMotorClient] = None):
        self.client = client or AsyncIOMotorClient(uri, tz_aware=True, uuidRepresentation="standard")
        self.db = self.client[db_name]

    async def startup(self) -> None:
        with _storage_errors("index setup"):
            await ensure_indexes(self.db)

    async def close(self) -> None:
        self.client.close()

    async def _get(self, col: str, record_id: str, model, kind: str):
        with _storage_errors(f"load {kind}"):
            doc = await self.db[col].find_one({"_id": record_id})
        if not doc:
            raise NotFound(f"{kind} not found")
        return model.model_validate(doc)

    async def _list(self, col: str, model, query: dict, sort=None) -> list:
        with _storage_errors(f"list {col}"):
            cur = self.db[col].find(query)
            if sort:
                cur = cur.sort(*sort)
            return [model.model_validate(d) async for d in cur]

    async def _insert(self, col: str, record):
        with _storage_errors(f"insert into {col}"):
            await self.db[col].insert_one(_doc(record))
        return record

    async def _replace(self, col: str, record, kind: str) -> None:
        with _storage_errors(f"save {kind}"):
            res = await self.db[col].replace_one({"_id": record.id}, _doc(record))
        if res.matched_count == 0:
            raise NotFound(f"{kind} not found")

    async def _set_verified(self, col: str, record_id: str, model, kind: str):
        with _storage_errors(f"verify {kind}"):
            res = await self.db[col].update_one({"_id": record_id}, {"$set": {"isVerified": True}})
        if res.matched_count == 0:
            raise NotFound(f"{kind} not found")
        return await self._get(col, record_id, model, kind)

    async def _delete(self, col: str, record_id: str, kind: str) -> None:
        with _storage_errors(f"delete {kind}"):
            res = await self.db[col].delete_one({"_id": record_id})
        if res.deleted_count == 0:
            raise NotFound(f"{kind} not found")

    # Restaurants
    async def add_restaurant(self, record: Restaurant) -> Restaurant:
        return await self._insert(RESTAURANTS, record)

    async def get_restaurant(self, restaurant_id: str) -> Restaurant:
        return await self._get(RESTAURANTS, restaurant_id, Restaurant, "Restaurant")

    async def list_restaurants(self, verified: Optional[bool] = None) -> List[Restaurant]:
        query = {} if verified is None else {"isVerified": verified}
        # natural order: matching is first-fit by store order
        return await self._list(RESTAURANTS, Restaurant, query)

    async def save_restaurant(self, record: Restaurant) -> None:
        await self._replace(RESTAURANTS, record, "Restaurant")

    async def verify_restaurant(self, restaurant_id: str) -> Restaurant:
        return await self._set_verified(RESTAURANTS, restaurant_id, Restaurant, "Restaurant")

    async def delete_restaurant(self, restaurant_id: str) -> None:
        await self._delete(RESTAURANTS, restaurant_id, "Restaurant")

    # Acceptors
    async def add_acceptor(self, record: Acceptor) -> Acceptor:
        return await self._insert(ACCEPTORS, record)

    async def find_acceptor_by_id(self, acceptor_id: str) -> Acceptor:
        return await self._get(ACCEPTORS, acceptor_id, Acceptor, "Acceptor")

    async def list_acceptors(self, verified: Optional[bool] = None) -> List[Acceptor]:
        query = {} if verified is None else {"isVerified": verified}
        return await self._list(ACCEPTORS, Acceptor, query)

    async def save_acceptor(self, record: Acceptor) -> None:
        await self._replace(ACCEPTORS, record, "Acceptor")

    async def delete_acceptor(self, acceptor_id: str) -> None:
        await self._delete(ACCEPTORS, acceptor_id, "Acceptor")

    # Delivery persons
    async def add_delivery(self, record: DeliveryPerson) -> DeliveryPerson:
        return await self._insert(DELIVERIES, record)

    async def list_deliveries(self) -> List[DeliveryPerson]:
        return await self._list(DELIVERIES, DeliveryPerson, {}, sort=("createdAt", DESCENDING))

    async def verify_delivery(self, delivery_id: str) -> DeliveryPerson:
        return await self._set_verified(DELIVERIES, delivery_id, DeliveryPerson, "Delivery person")

    async def delete_delivery(self, delivery_id: str) -> None:
        await self._delete(DELIVERIES, delivery_id, "Delivery person")

    # Activity log
    async def append_activity(self, entry: Activity) -> Activity:
        return await self._insert(ACTIVITIES, entry)

    async def list_activities(self) -> List[Activity]:
        return await self._list(ACTIVITIES, Activity, {}, sort=("timestamp", DESCENDING))

    async def delete_activity(self, activity_id: str) -> None:
        await self._delete(ACTIVITIES, activity_id, "Activity")

    # Stats
    async def counts(self) -> Dict[str, int]:
        out = {}
        with _storage_errors("count"):
            for name in (RESTAURANTS, ACCEPTORS, DELIVERIES, ACTIVITIES):
                out[name] = await self.db[name].count_documents({})
        return out
