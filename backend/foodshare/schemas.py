import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

Membership = Literal["Basic", "Silver", "Gold"]


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # Mongo and older JSON snapshots hand back naive timestamps; treat them as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Record(BaseModel):
    """camelCase on the wire and in storage, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=new_id, alias="_id")

    def to_doc(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# --------------------------
# Stored records
# --------------------------
class FoodItem(Record):
    food: str
    quantity: int = Field(ge=0)
    category: Optional[str] = None
    value: float = Field(default=100.0, alias="foodValue")
    expiry_time: datetime
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("expiry_time", "created_at")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Restaurant(Record):
    name: str
    email: str = ""
    phone: str = ""
    location: str = ""
    description: str = ""
    items: List[FoodItem] = []
    is_verified: bool = False
    membership: Membership = "Basic"
    created_at: datetime = Field(default_factory=utcnow)


class Pricing(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    actual_value: float
    restaurant_payout: float
    acceptor_cost: float
    platform_profit: float


class Acceptor(Record):
    name: str
    email: str = ""
    phone: str = ""
    location: str = ""
    food: str
    quantity: int
    membership: Membership = "Basic"
    is_verified: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    # outcome of the allocation that resolved this request
    matched: Optional[bool] = None
    matched_restaurant_id: Optional[str] = None
    match_info: Optional[str] = None
    pricing: Optional[Pricing] = None
    verified_at: Optional[datetime] = None


class DeliveryPerson(Record):
    name: str
    email: str = ""
    phone: str = ""
    location: str = ""
    vehicle_type: str
    license_number: Optional[str] = None
    is_verified: bool = False
    status: str = "Available"
    created_at: datetime = Field(default_factory=utcnow)


class Activity(Record):
    actor_type: str
    actor_name: str
    actor_email: Optional[str] = None
    action: str
    details: str = ""
    timestamp: datetime = Field(default_factory=utcnow)


# --------------------------
# Request bodies
# --------------------------
class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodItemIn(_Body):
    food: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    category: Optional[str] = None
    food_value: float = Field(default=100.0, ge=0)
    expiry_hours: Optional[float] = Field(default=None, gt=0)

    def to_item(self, default_expiry_hours: float, now: datetime) -> FoodItem:
        hours = self.expiry_hours if self.expiry_hours is not None else default_expiry_hours
        return FoodItem(
            food=self.food,
            quantity=self.quantity,
            category=self.category,
            value=self.food_value,
            expiry_time=now + timedelta(hours=hours),
            created_at=now,
        )


class RestaurantIn(_Body):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""
    location: str = ""
    description: str = ""
    membership: Membership = "Basic"
    # either a single listing ...
    food: Optional[str] = None
    quantity: Optional[int] = Field(default=None, gt=0)
    category: Optional[str] = None
    food_value: float = Field(default=100.0, ge=0)
    expiry_hours: Optional[float] = Field(default=None, gt=0)
    # ... or several
    items: Optional[List[FoodItemIn]] = None

    def listed_items(self) -> List[FoodItemIn]:
        if self.items:
            return self.items
        if self.food and self.quantity:
            return [FoodItemIn(
                food=self.food,
                quantity=self.quantity,
                category=self.category,
                food_value=self.food_value,
                expiry_hours=self.expiry_hours,
            )]
        return []


class AcceptorIn(_Body):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""
    location: str = ""
    food: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    membership: Membership = "Basic"


class DeliveryIn(_Body):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = ""
    location: str = ""
    vehicle_type: str = Field(min_length=1)
    license_number: Optional[str] = None


class AdminLoginIn(_Body):
    admin_id: str
    password: str


# --------------------------
# Responses
# --------------------------
class AllocationResult(_Body):
    success: bool = True
    data: Acceptor
    match_info: str
    pricing: Optional[Pricing] = None
    matched: bool
    matched_restaurant_id: Optional[str] = None


class StorageStats(_Body):
    engine: str
    restaurants: int
    acceptors: int
    deliveries: int
    activities: int
