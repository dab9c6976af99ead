# foodshare/deps.py
from foodshare.core.config import Settings, get_settings
from foodshare.repos.base import FoodShareRepo
from foodshare.services.allocation import AllocationEngine

_repo = None
_engine = None


def build_repo(settings: Settings) -> FoodShareRepo:
    backend = settings.resolved_backend
    if backend == "mongo":
        from foodshare.repos.mongo import MongoRepo
        return MongoRepo(settings.mongodb_uri or "mongodb://localhost:27017", settings.mongodb_db)
    if backend == "file":
        from foodshare.repos.jsonfile import JsonFileRepo
        return JsonFileRepo(settings.data_file)
    from foodshare.repos.inmemory import InMemoryRepo
    return InMemoryRepo()


def get_repo() -> FoodShareRepo:
    global _repo
    if _repo is None:
        _repo = build_repo(get_settings())
    return _repo


def get_engine() -> AllocationEngine:
    global _engine
    if _engine is None:
        _engine = AllocationEngine(get_repo())
    return _engine
