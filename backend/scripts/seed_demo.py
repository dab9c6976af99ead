import asyncio

from foodshare.core.config import get_settings
from foodshare.deps import build_repo
from foodshare.services.seed import seed_demo


async def main():
    repo = build_repo(get_settings())
    await repo.startup()
    try:
        added = await seed_demo(repo)
    finally:
        await repo.close()
    print(f"Seeded {added} restaurants" if added else "Store not empty; nothing seeded")

if __name__ == "__main__":
    asyncio.run(main())
