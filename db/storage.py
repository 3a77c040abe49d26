"""
Whole-collection persistence for the local data layer.

Each entity kind lives as one JSON array under a fixed key. Every mutation is a
read-modify-write of the entire collection; there are no partial updates.
"""
from typing import List, Optional, Type, TypeVar
from pydantic import BaseModel, TypeAdapter
from db.kv import KeyValueStore
from models.friendship import Friendship
from models.quiz import Quiz
from models.result import QuizResult
from models.user import StoredUser

T = TypeVar("T", bound=BaseModel)

ID_KINDS = ("user", "quiz", "question", "friendship", "quizResult")


class LocalStorage:
    def __init__(self, kv: KeyValueStore, prefix: str = "quizApp"):
        self.kv = kv
        self.prefix = prefix
        self.users_key = f"{prefix}_users"
        self.quizzes_key = f"{prefix}_quizzes"
        self.friendships_key = f"{prefix}_friendships"
        self.results_key = f"{prefix}_quizResults"
        self.token_key = f"{prefix}_authToken"

    def counter_key(self, kind: str) -> str:
        return f"{self.prefix}_lastId_{kind}"

    async def _load(self, key: str, model: Type[T]) -> List[T]:
        data = await self.kv.get(key)
        if not data:
            return []
        return TypeAdapter(List[model]).validate_json(data)

    async def _save(self, key: str, model: Type[T], items: List[T]):
        data = TypeAdapter(List[model]).dump_json(items, by_alias=True)
        await self.kv.set(key, data.decode("utf-8"))

    # Users
    async def load_users(self) -> List[StoredUser]:
        return await self._load(self.users_key, StoredUser)

    async def save_users(self, users: List[StoredUser]):
        await self._save(self.users_key, StoredUser, users)

    # Quizzes
    async def load_quizzes(self) -> List[Quiz]:
        return await self._load(self.quizzes_key, Quiz)

    async def save_quizzes(self, quizzes: List[Quiz]):
        await self._save(self.quizzes_key, Quiz, quizzes)

    # Friendships
    async def load_friendships(self) -> List[Friendship]:
        return await self._load(self.friendships_key, Friendship)

    async def save_friendships(self, friendships: List[Friendship]):
        await self._save(self.friendships_key, Friendship, friendships)

    # Quiz results
    async def load_results(self) -> List[QuizResult]:
        return await self._load(self.results_key, QuizResult)

    async def save_results(self, results: List[QuizResult]):
        await self._save(self.results_key, QuizResult, results)

    # Id counters
    async def next_id(self, kind: str) -> int:
        if kind not in ID_KINDS:
            raise ValueError(f"Unknown id kind: {kind}")
        return await self.kv.incr(self.counter_key(kind))

    # Session capsule
    async def get_token(self) -> Optional[str]:
        return await self.kv.get(self.token_key)

    async def set_token(self, token: str):
        await self.kv.set(self.token_key, token)

    async def clear_token(self):
        await self.kv.delete(self.token_key)

    async def clear(self):
        """Remove every key owned by this store, counters included."""
        await self.kv.delete(
            self.users_key,
            self.quizzes_key,
            self.friendships_key,
            self.results_key,
            self.token_key,
            *(self.counter_key(kind) for kind in ID_KINDS),
        )
