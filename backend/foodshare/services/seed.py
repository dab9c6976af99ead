# foodshare/services/seed.py
import logging
from datetime import timedelta

from foodshare.schemas import Activity, FoodItem, Restaurant, utcnow

logger = logging.getLogger(__name__)

DEMO_RESTAURANTS = [
    {"name": "Grand Imperial Hotel", "email": "info@grandimperial.com", "location": "Mumbai Central",
     "food": "Lunch Buffet", "quantity": 50, "membership": "Gold"},
    {"name": "Oceanic Resort", "email": "contact@oceanic.io", "location": "Goa Beach Road",
     "food": "Seafood Platter", "quantity": 30, "membership": "Silver"},
    {"name": "The Green Bistro", "email": "hello@greenbistro.com", "location": "Bangalore Tech Park",
     "food": "Organic Salads", "quantity": 20, "membership": "Gold"},
    {"name": "Urban Tandoor", "email": "order@urbantandoor.in", "location": "Delhi Metro Heights",
     "food": "North Indian Meals", "quantity": 45, "membership": "Basic"},
]

DEMO_ACTIVITIES = [
    {"actor_type": "System", "actor_name": "Storage Engine", "action": "Ecosystem Wake-up",
     "details": "Demo inventory loaded."},
    {"actor_type": "Admin", "actor_name": "admin", "action": "Storage Audit",
     "details": "Demo restaurants pre-verified."},
]


async def seed_demo(repo, expiry_hours: float = 24) -> int:
    """Seed verified demo restaurants into an empty store. Returns how many were added."""
    if (await repo.counts())["restaurants"]:
        return 0

    now = utcnow()
    for r in DEMO_RESTAURANTS:
        item = FoodItem(
            food=r["food"],
            quantity=r["quantity"],
            category="Meals",
            value=r["quantity"] * 10,
            expiry_time=now + timedelta(hours=expiry_hours),
        )
        await repo.add_restaurant(Restaurant(
            name=r["name"], email=r["email"], location=r["location"],
            membership=r["membership"], items=[item], is_verified=True,
        ))

    for a in DEMO_ACTIVITIES:
        await repo.append_activity(Activity(**a))

    logger.info("seeded %d demo restaurants", len(DEMO_RESTAURANTS))
    return len(DEMO_RESTAURANTS)
