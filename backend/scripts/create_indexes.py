import asyncio

from motor.motor_asyncio import AsyncIOMotorClient

from foodshare.core.config import get_settings
from foodshare.repos.mongo import ensure_indexes


async def main():
    settings = get_settings()
    client = AsyncIOMotorClient(settings.mongodb_uri or "mongodb://localhost:27017")
    try:
        await ensure_indexes(client[settings.mongodb_db])
    finally:
        client.close()
    print(f"Indexes ensured on {settings.mongodb_db}")

if __name__ == "__main__":
    asyncio.run(main())
