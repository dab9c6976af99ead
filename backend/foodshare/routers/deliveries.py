# foodshare/routers/deliveries.py
from typing import List

from fastapi import APIRouter, Depends

from foodshare.deps import get_repo
from foodshare.schemas import Activity, DeliveryIn, DeliveryPerson

router = APIRouter(tags=["deliveries"])


@router.get("/admin/deliveries", response_model=List[DeliveryPerson])
async def list_deliveries(repo=Depends(get_repo)):
    return await repo.list_deliveries()


@router.post("/add-delivery", status_code=201)
async def add_delivery(body: DeliveryIn, repo=Depends(get_repo)):
    saved = await repo.add_delivery(DeliveryPerson(**body.model_dump()))
    await repo.append_activity(Activity(
        actor_type="Delivery",
        actor_name=body.name,
        actor_email=body.email,
        action="Registered for Delivery",
        details=f"Vehicle: {body.vehicle_type}",
    ))
    return {"success": True, "data": saved.to_doc()}


@router.put("/verify-delivery/{delivery_id}")
async def verify_delivery(delivery_id: str, repo=Depends(get_repo)):
    saved = await repo.verify_delivery(delivery_id)
    return {"success": True, "data": saved.to_doc()}


@router.delete("/delete-delivery/{delivery_id}")
async def delete_delivery(delivery_id: str, repo=Depends(get_repo)):
    await repo.delete_delivery(delivery_id)
    return {"success": True}
