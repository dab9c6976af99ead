# foodshare/routers/restaurants.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from foodshare.core.config import Settings, get_settings
from foodshare.deps import get_repo
from foodshare.schemas import Activity, Restaurant, RestaurantIn, utcnow

router = APIRouter(tags=["restaurants"])


@router.get("/restaurants", response_model=List[Restaurant])
async def list_verified(repo=Depends(get_repo)):
    return await repo.find_verified_restaurants()


@router.get("/admin/restaurants", response_model=List[Restaurant])
async def list_all(repo=Depends(get_repo)):
    # newest first
    return list(reversed(await repo.list_restaurants()))


@router.get("/get-restaurant/{restaurant_id}", response_model=Restaurant)
async def get_restaurant(restaurant_id: str, repo=Depends(get_repo)):
    return await repo.get_restaurant(restaurant_id)


@router.post("/add-restaurant", status_code=201)
async def add_restaurant(
    body: RestaurantIn,
    repo=Depends(get_repo),
    settings: Settings = Depends(get_settings),
):
    listed = body.listed_items()
    if not listed:
        raise HTTPException(status_code=400, detail="A food listing (food + quantity, or items) is required")

    now = utcnow()
    record = Restaurant(
        name=body.name,
        email=body.email,
        phone=body.phone,
        location=body.location,
        description=body.description,
        membership=body.membership,
        items=[i.to_item(settings.default_expiry_hours, now) for i in listed],
        created_at=now,
    )
    saved = await repo.add_restaurant(record)
    await repo.append_activity(Activity(
        actor_type="Restaurant",
        actor_name=body.name,
        actor_email=body.email,
        action="Donated Food",
        details="; ".join(f"{i.quantity} portions of {i.food} (Val: {i.food_value:g})" for i in listed),
        timestamp=now,
    ))
    return {"success": True, "data": saved.to_doc()}


@router.put("/verify-restaurant/{restaurant_id}")
async def verify_restaurant(restaurant_id: str, repo=Depends(get_repo)):
    saved = await repo.verify_restaurant(restaurant_id)
    return {"success": True, "data": saved.to_doc()}


@router.delete("/delete-restaurant/{restaurant_id}")
async def delete_restaurant(restaurant_id: str, repo=Depends(get_repo)):
    await repo.delete_restaurant(restaurant_id)
    return {"success": True}
