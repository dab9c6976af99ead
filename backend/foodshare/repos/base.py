# foodshare/repos/base.py
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from foodshare.schemas import Acceptor, Activity, DeliveryPerson, Restaurant


class FoodShareRepo(ABC):
    """
    Storage seam for restaurants, acceptors, delivery persons and the
    activity log. Records handed out are copies: changes only land through
    save_* / verify_*.

    Missing ids raise NotFound, backend failures raise StorageError.
    """

    engine_name = "abstract"

    async def startup(self) -> None:
        pass

    async def close(self) -> None:
        pass

    def describe(self) -> str:
        return self.engine_name

    # Restaurants
    @abstractmethod
    async def add_restaurant(self, record: Restaurant) -> Restaurant: ...

    @abstractmethod
    async def get_restaurant(self, restaurant_id: str) -> Restaurant: ...

    @abstractmethod
    async def list_restaurants(self, verified: Optional[bool] = None) -> List[Restaurant]: ...

    async def find_verified_restaurants(self) -> List[Restaurant]:
        return await self.list_restaurants(verified=True)

    @abstractmethod
    async def save_restaurant(self, record: Restaurant) -> None: ...

    @abstractmethod
    async def verify_restaurant(self, restaurant_id: str) -> Restaurant: ...

    @abstractmethod
    async def delete_restaurant(self, restaurant_id: str) -> None: ...

    # Acceptors
    @abstractmethod
    async def add_acceptor(self, record: Acceptor) -> Acceptor: ...

    @abstractmethod
    async def find_acceptor_by_id(self, acceptor_id: str) -> Acceptor: ...

    @abstractmethod
    async def list_acceptors(self, verified: Optional[bool] = None) -> List[Acceptor]: ...

    @abstractmethod
    async def save_acceptor(self, record: Acceptor) -> None: ...

    @abstractmethod
    async def delete_acceptor(self, acceptor_id: str) -> None: ...

    # Delivery persons
    @abstractmethod
    async def add_delivery(self, record: DeliveryPerson) -> DeliveryPerson: ...

    @abstractmethod
    async def list_deliveries(self) -> List[DeliveryPerson]: ...

    @abstractmethod
    async def verify_delivery(self, delivery_id: str) -> DeliveryPerson: ...

    @abstractmethod
    async def delete_delivery(self, delivery_id: str) -> None: ...

    # Activity log
    @abstractmethod
    async def append_activity(self, entry: Activity) -> Activity: ...

    @abstractmethod
    async def list_activities(self) -> List[Activity]:
        """Newest first."""

    @abstractmethod
    async def delete_activity(self, activity_id: str) -> None: ...

    # Stats
    @abstractmethod
    async def counts(self) -> Dict[str, int]: ...
