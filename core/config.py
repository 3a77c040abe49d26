from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Storage
    STORAGE_BACKEND: Literal["redis", "memory"] = Field("redis", description="Key-value backend; memory is for tests and throwaway runs")
    REDIS_URL: str = Field("redis://localhost:6379/0")
    STORAGE_KEY_PREFIX: str = Field("quizApp", description="Prefix for every key the local store owns")

    # Auth
    SESSION_TTL_SECONDS: int = 604800  # 7 days

    # Leaderboard
    LEADERBOARD_TOP_N: int = 5

    # Environment
    ENV: str = "development"  # development, staging, production
    DEBUG: bool = False

settings = Settings()
