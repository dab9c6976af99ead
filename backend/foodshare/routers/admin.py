# foodshare/routers/admin.py
import hmac

from fastapi import APIRouter, Depends, HTTPException

from foodshare.core.config import Settings, get_settings
from foodshare.deps import get_repo
from foodshare.schemas import AdminLoginIn, StorageStats

router = APIRouter(tags=["admin"])


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode(), b.encode())


@router.post("/verify-admin")
def verify_admin(body: AdminLoginIn, settings: Settings = Depends(get_settings)):
    ok = _same(body.admin_id, settings.admin_id) & _same(body.password, settings.admin_password)
    if not ok:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"success": True, "admin": {"adminId": settings.admin_id}}


@router.get("/admin/db-status")
async def db_status(repo=Depends(get_repo)):
    return {"status": f"Connected: {repo.describe()}"}


@router.get("/admin/storage-stats", response_model=StorageStats)
async def storage_stats(repo=Depends(get_repo)):
    return StorageStats(engine=repo.describe(), **(await repo.counts()))
