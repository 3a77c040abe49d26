from core.config import Settings, settings as default_settings
from db.kv import KeyValueStore, MemoryKeyValueStore, RedisKeyValueStore
from db.storage import LocalStorage


def get_kv_store(settings: Settings = None) -> KeyValueStore:
    settings = settings or default_settings
    if settings.STORAGE_BACKEND == "redis":
        return RedisKeyValueStore.from_url(settings.REDIS_URL)
    return MemoryKeyValueStore()


def get_storage(settings: Settings = None, kv: KeyValueStore = None) -> LocalStorage:
    settings = settings or default_settings
    kv = kv if kv is not None else get_kv_store(settings)
    return LocalStorage(kv, prefix=settings.STORAGE_KEY_PREFIX)
