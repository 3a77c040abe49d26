import asyncio
import sys
import os

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import settings
from core.logger import logger, setup_logging
from db.session import get_kv_store
from db.storage import LocalStorage

async def reset_local_data(storage: LocalStorage = None, confirm: str = None) -> bool:
    if storage is None and settings.STORAGE_BACKEND == "memory":
        # A fresh memory store is always empty
        print("❌ STORAGE_BACKEND is 'memory': there is no persistent data to reset.")
        logger.warning("Reset refused for non-persistent backend", backend=settings.STORAGE_BACKEND)
        return False

    print(f"⚠️  WARNING: This will DELETE ALL LOCAL QUIZ DATA under prefix '{settings.STORAGE_KEY_PREFIX}'.")
    print("Users, quizzes, friendships, results, id counters and the current session are removed.")
    if confirm is None:
        confirm = input("Type 'CONFIRM' to proceed: ")

    if confirm != "CONFIRM":
        print("Operation cancelled.")
        return False

    if storage is not None:
        await storage.clear()
    else:
        kv = get_kv_store(settings)
        storage = LocalStorage(kv, prefix=settings.STORAGE_KEY_PREFIX)
        try:
            await storage.clear()
        finally:
            await kv.close()

    logger.info("Local data reset", prefix=storage.prefix, backend=settings.STORAGE_BACKEND)
    print("✅ Local data has been reset.")
    return True

if __name__ == "__main__":
    setup_logging()
    if os.name == 'nt':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(reset_local_data())
