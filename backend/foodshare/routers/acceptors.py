# foodshare/routers/acceptors.py
from typing import List

from fastapi import APIRouter, Depends

from foodshare.deps import get_engine, get_repo
from foodshare.schemas import Acceptor, AcceptorIn, Activity, AllocationResult
from foodshare.services.allocation import AllocationEngine

router = APIRouter(tags=["acceptors"])


@router.get("/acceptors", response_model=List[Acceptor])
async def list_verified(repo=Depends(get_repo)):
    return await repo.list_acceptors(verified=True)


@router.get("/admin/acceptors", response_model=List[Acceptor])
async def list_all(repo=Depends(get_repo)):
    return list(reversed(await repo.list_acceptors()))


@router.get("/get-acceptor/{acceptor_id}", response_model=Acceptor)
async def get_acceptor(acceptor_id: str, repo=Depends(get_repo)):
    return await repo.find_acceptor_by_id(acceptor_id)


@router.post("/add-acceptor", status_code=201)
async def add_acceptor(body: AcceptorIn, repo=Depends(get_repo)):
    record = Acceptor(**body.model_dump())
    saved = await repo.add_acceptor(record)
    await repo.append_activity(Activity(
        actor_type="Acceptor",
        actor_name=body.name,
        actor_email=body.email,
        action="Requested Food",
        details=f"{body.quantity} portions of {body.food}",
    ))
    return {"success": True, "data": saved.to_doc()}


@router.put("/verify-acceptor/{acceptor_id}", response_model=AllocationResult)
async def verify_acceptor(acceptor_id: str, engine: AllocationEngine = Depends(get_engine)):
    """Admin approval of a request: runs the match-and-price allocation."""
    return await engine.allocate(acceptor_id)


@router.delete("/delete-acceptor/{acceptor_id}")
async def delete_acceptor(acceptor_id: str, engine: AllocationEngine = Depends(get_engine)):
    await engine.delete_acceptor(acceptor_id)
    return {"success": True}
