"""
Data-source contract used by the quiz client, and its offline implementation.

`QuizDataSource` is the only surface callers depend on. `LocalQuizDataSource`
satisfies it from a key-value store on the device; a remote-API implementation
must honor the same method signatures, return types and exceptions.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, List, Optional
from core.config import Settings, settings as default_settings
from db.kv import KeyValueStore
from db.session import get_storage
from db.storage import LocalStorage
from models.base import utcnow
from models.friendship import Friendship
from models.quiz import GroupedQuizzes, PlayQuiz, Quiz, QuizInput
from models.result import Leaderboard, MyLeaderboard, SubmitQuizResult
from models.user import AuthResponse, CurrentUser
from services.friendship_service import FriendshipService
from services.grading import grade_answers
from services.leaderboard_service import LeaderboardService
from services.quiz_service import QuizService
from services.session_service import SessionService
from services.user_service import UserService


class QuizDataSource(ABC):
    # Auth
    @abstractmethod
    async def register(self, username: str, email: str, password: str) -> AuthResponse: ...

    @abstractmethod
    async def login(self, email: str, password: str) -> AuthResponse: ...

    @abstractmethod
    async def update_profile(self, username: Optional[str] = None, email: Optional[str] = None) -> AuthResponse: ...

    @abstractmethod
    async def change_password(self, current_password: str, new_password: str) -> None: ...

    @abstractmethod
    async def get_current_user(self) -> Optional[CurrentUser]: ...

    @abstractmethod
    async def logout(self) -> None: ...

    # Quiz
    @abstractmethod
    async def get_all_quizzes(self) -> GroupedQuizzes: ...

    @abstractmethod
    async def get_quiz_by_id(self, quiz_id: int) -> Quiz: ...

    @abstractmethod
    async def get_my_quizzes(self) -> List[Quiz]: ...

    @abstractmethod
    async def create_quiz(self, data: QuizInput) -> Quiz: ...

    @abstractmethod
    async def update_quiz(self, quiz_id: int, data: QuizInput) -> Quiz: ...

    @abstractmethod
    async def delete_quiz(self, quiz_id: int) -> None: ...

    @abstractmethod
    async def play_quiz(self, quiz_id: int) -> PlayQuiz: ...

    @abstractmethod
    async def grade_quiz(self, quiz_id: int, answers: Dict[int, bool]) -> SubmitQuizResult: ...

    # Results & leaderboard
    @abstractmethod
    async def submit_quiz_result(self, data: SubmitQuizResult) -> None: ...

    @abstractmethod
    async def get_leaderboard(self) -> Leaderboard: ...

    @abstractmethod
    async def get_my_leaderboard(self) -> MyLeaderboard: ...

    # Friendships
    @abstractmethod
    async def send_friend_invite(self, email: str) -> Friendship: ...

    @abstractmethod
    async def accept_friend_invite(self, friendship_id: int) -> Friendship: ...

    @abstractmethod
    async def decline_friend_invite(self, friendship_id: int) -> None: ...

    @abstractmethod
    async def get_pending_invites(self) -> List[Friendship]: ...

    @abstractmethod
    async def get_sent_invites(self) -> List[Friendship]: ...

    @abstractmethod
    async def get_friends(self) -> List[Friendship]: ...

    @abstractmethod
    async def remove_friend(self, friendship_id: int) -> None: ...


class LocalQuizDataSource(QuizDataSource):
    """Offline backend: every call reads and writes whole collections in `storage`."""

    def __init__(self, storage: LocalStorage, clock: Callable[[], datetime] = utcnow, settings: Settings = None):
        settings = settings or default_settings
        self.storage = storage
        self.sessions = SessionService(storage, clock=clock, ttl_seconds=settings.SESSION_TTL_SECONDS)
        self.users = UserService(storage, self.sessions)
        self.friendships = FriendshipService(storage, self.sessions, clock=clock)
        self.quizzes = QuizService(storage, self.sessions, self.friendships, clock=clock)
        self.leaderboards = LeaderboardService(
            storage, self.sessions, self.friendships, clock=clock, top_n=settings.LEADERBOARD_TOP_N
        )

    @classmethod
    def from_settings(cls, settings: Settings = None, kv: KeyValueStore = None, clock: Callable[[], datetime] = utcnow):
        settings = settings or default_settings
        return cls(get_storage(settings, kv), clock=clock, settings=settings)

    # Auth
    async def register(self, username: str, email: str, password: str) -> AuthResponse:
        return await self.users.register(username, email, password)

    async def login(self, email: str, password: str) -> AuthResponse:
        return await self.users.login(email, password)

    async def update_profile(self, username: Optional[str] = None, email: Optional[str] = None) -> AuthResponse:
        return await self.users.update_profile(username=username, email=email)

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self.users.change_password(current_password, new_password)

    async def get_current_user(self) -> Optional[CurrentUser]:
        return await self.sessions.resolve_current_user()

    async def logout(self) -> None:
        await self.sessions.end_session()

    # Quiz
    async def get_all_quizzes(self) -> GroupedQuizzes:
        return await self.quizzes.get_all_quizzes()

    async def get_quiz_by_id(self, quiz_id: int) -> Quiz:
        return await self.quizzes.get_quiz(quiz_id)

    async def get_my_quizzes(self) -> List[Quiz]:
        return await self.quizzes.get_my_quizzes()

    async def create_quiz(self, data: QuizInput) -> Quiz:
        return await self.quizzes.create_quiz(data)

    async def update_quiz(self, quiz_id: int, data: QuizInput) -> Quiz:
        return await self.quizzes.update_quiz(quiz_id, data)

    async def delete_quiz(self, quiz_id: int) -> None:
        await self.quizzes.delete_quiz(quiz_id)

    async def play_quiz(self, quiz_id: int) -> PlayQuiz:
        return await self.quizzes.play_quiz(quiz_id)

    async def grade_quiz(self, quiz_id: int, answers: Dict[int, bool]) -> SubmitQuizResult:
        return grade_answers(await self.quizzes.get_quiz(quiz_id), answers)

    # Results & leaderboard
    async def submit_quiz_result(self, data: SubmitQuizResult) -> None:
        await self.leaderboards.submit_result(data)

    async def get_leaderboard(self) -> Leaderboard:
        return await self.leaderboards.get_leaderboard()

    async def get_my_leaderboard(self) -> MyLeaderboard:
        return await self.leaderboards.get_my_leaderboard()

    # Friendships
    async def send_friend_invite(self, email: str) -> Friendship:
        return await self.friendships.send_invite(email)

    async def accept_friend_invite(self, friendship_id: int) -> Friendship:
        return await self.friendships.accept_invite(friendship_id)

    async def decline_friend_invite(self, friendship_id: int) -> None:
        await self.friendships.decline_invite(friendship_id)

    async def get_pending_invites(self) -> List[Friendship]:
        return await self.friendships.get_pending_invites()

    async def get_sent_invites(self) -> List[Friendship]:
        return await self.friendships.get_sent_invites()

    async def get_friends(self) -> List[Friendship]:
        return await self.friendships.get_friends()

    async def remove_friend(self, friendship_id: int) -> None:
        await self.friendships.remove_friend(friendship_id)
