# foodshare/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodshare.core.config import get_settings
from foodshare.core.errors import install_error_handlers
from foodshare.deps import get_repo
from foodshare.routers import acceptors, activities, admin, deliveries, restaurants
from foodshare.services.seed import seed_demo

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = get_repo()
    await repo.startup()
    logger.info("storage: %s", repo.describe())

    if get_settings().seed_demo:
        await seed_demo(repo)

    yield
    await repo.close()


app = FastAPI(lifespan=lifespan, title="FoodShare API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)

app.include_router(restaurants.router)
app.include_router(acceptors.router)
app.include_router(deliveries.router)
app.include_router(activities.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    return {"ok": True, "storage": get_repo().describe()}
