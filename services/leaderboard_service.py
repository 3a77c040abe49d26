from datetime import datetime
from typing import Callable, Dict, List, Optional
from core.config import settings
from core.exceptions import NotFound, Unauthorized
from core.logger import logger
from db.storage import LocalStorage
from models.base import utcnow
from models.quiz import Quiz
from models.result import (
    Leaderboard,
    MyLeaderboard,
    QuizLeaderboardEntry,
    QuizResult,
    QuizResultEntry,
    SubmitQuizResult,
)
from services.friendship_service import FriendshipService
from services.session_service import SessionService
from services.visibility import can_view, group_quizzes

UNKNOWN_USERNAME = "Unknown"


def rank_results(entries: List[QuizResultEntry]) -> List[QuizResultEntry]:
    """Highest percentage first; equal percentages put the most recent completion first."""
    return sorted(entries, key=lambda e: (e.percentage, e.completed_at), reverse=True)


class LeaderboardService:
    def __init__(
        self,
        storage: LocalStorage,
        sessions: SessionService,
        friendships: FriendshipService,
        clock: Callable[[], datetime] = utcnow,
        top_n: int = None,
    ):
        self.storage = storage
        self.sessions = sessions
        self.friendships = friendships
        self.clock = clock
        self.top_n = settings.LEADERBOARD_TOP_N if top_n is None else top_n

    async def submit_result(self, data: SubmitQuizResult):
        current = await self.sessions.require_user()
        quizzes = await self.storage.load_quizzes()
        quiz = next((q for q in quizzes if q.id == data.quiz_id), None)
        if not quiz:
            raise NotFound(f"Quiz with id {data.quiz_id} not found")

        friend_ids = await self.friendships.resolve_friend_ids(current.user_id)
        if not can_view(quiz, current.user_id, friend_ids):
            logger.warning("Result rejected, quiz not accessible", quiz_id=quiz.id, user_id=current.user_id)
            raise Unauthorized("You do not have access to this quiz")

        results = await self.storage.load_results()
        result = QuizResult(
            id=await self.storage.next_id("quizResult"),
            user_id=current.user_id,
            quiz_id=data.quiz_id,
            score=data.score,
            total_questions=data.total_questions,
            percentage=data.percentage,
            completed_at=self.clock(),
        )
        results.append(result)
        await self.storage.save_results(results)
        logger.info("Quiz result saved", result_id=result.id, quiz_id=quiz.id, user_id=current.user_id, percentage=result.percentage)

    def _join(self, results: List[QuizResult], usernames: Dict[int, str], quiz_id: int, limit: Optional[int]) -> List[QuizResultEntry]:
        entries = [
            QuizResultEntry(
                result_id=r.id,
                user_id=r.user_id,
                username=usernames.get(r.user_id, UNKNOWN_USERNAME),
                score=r.score,
                total_questions=r.total_questions,
                percentage=r.percentage,
                completed_at=r.completed_at,
            )
            for r in results
            if r.quiz_id == quiz_id
        ]
        ranked = rank_results(entries)
        return ranked[:limit] if limit is not None else ranked

    async def _usernames(self) -> Dict[int, str]:
        return {u.id: u.username for u in await self.storage.load_users()}

    async def results_for_quiz(self, quiz_id: int, limit: Optional[int] = None) -> List[QuizResultEntry]:
        results = await self.storage.load_results()
        return self._join(results, await self._usernames(), quiz_id, limit)

    async def _entries(self, quizzes: List[Quiz]) -> List[QuizLeaderboardEntry]:
        results = await self.storage.load_results()
        usernames = await self._usernames()
        return [
            QuizLeaderboardEntry(
                quiz_id=quiz.id,
                quiz_title=quiz.title,
                results=self._join(results, usernames, quiz.id, self.top_n),
            )
            for quiz in quizzes
        ]

    async def get_leaderboard(self) -> Leaderboard:
        current = await self.sessions.resolve_current_user()
        quizzes = await self.storage.load_quizzes()
        if current is None:
            grouped = group_quizzes(quizzes, None)
        else:
            friend_ids = await self.friendships.resolve_friend_ids(current.user_id)
            grouped = group_quizzes(quizzes, current.user_id, friend_ids)

        return Leaderboard(
            my_quizzes=await self._entries(grouped.my_quizzes),
            friends_quizzes=await self._entries(grouped.friends_quizzes),
            public_quizzes=await self._entries(grouped.public_quizzes),
        )

    async def get_my_leaderboard(self) -> MyLeaderboard:
        current = await self.sessions.require_user()
        quizzes = await self.storage.load_quizzes()
        mine = [q for q in quizzes if q.user_id == current.user_id]
        return MyLeaderboard(quizzes=await self._entries(mine))
