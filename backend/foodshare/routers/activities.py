# foodshare/routers/activities.py
from typing import List

from fastapi import APIRouter, Depends

from foodshare.deps import get_repo
from foodshare.schemas import Activity

router = APIRouter(tags=["activities"])


@router.get("/admin/activities", response_model=List[Activity])
async def list_activities(repo=Depends(get_repo)):
    return await repo.list_activities()


@router.delete("/delete-activity/{activity_id}")
async def delete_activity(activity_id: str, repo=Depends(get_repo)):
    await repo.delete_activity(activity_id)
    return {"success": True}
