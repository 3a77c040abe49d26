from datetime import datetime
from typing import Callable, List, Tuple
from core.exceptions import NotFound, Unauthorized
from core.logger import logger
from db.storage import LocalStorage
from models.base import utcnow
from models.quiz import GroupedQuizzes, PlayQuestion, PlayQuiz, Question, QuestionInput, Quiz, QuizInput
from services.friendship_service import FriendshipService
from services.session_service import SessionService
from services.visibility import group_quizzes

class QuizService:
    def __init__(
        self,
        storage: LocalStorage,
        sessions: SessionService,
        friendships: FriendshipService,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage
        self.sessions = sessions
        self.friendships = friendships
        self.clock = clock

    async def _new_questions(self, questions: List[QuestionInput]) -> List[Question]:
        # Every save draws fresh ids from the global question counter
        return [
            Question(id=await self.storage.next_id("question"), text=q.text, correct_answer=q.correct_answer)
            for q in questions
        ]

    async def _owned(self, quiz_id: int) -> Tuple[List[Quiz], int]:
        current = await self.sessions.require_user()
        quizzes = await self.storage.load_quizzes()
        index = next((i for i, q in enumerate(quizzes) if q.id == quiz_id), None)
        if index is None:
            raise NotFound("Quiz not found")
        if quizzes[index].user_id != current.user_id:
            logger.warning("Quiz ownership check failed", quiz_id=quiz_id, user_id=current.user_id)
            raise Unauthorized("You don't have permission to modify this quiz")
        return quizzes, index

    async def get_quiz(self, quiz_id: int) -> Quiz:
        quizzes = await self.storage.load_quizzes()
        quiz = next((q for q in quizzes if q.id == quiz_id), None)
        if not quiz:
            raise NotFound("Quiz not found")
        return quiz

    async def get_my_quizzes(self) -> List[Quiz]:
        current = await self.sessions.require_user()
        quizzes = await self.storage.load_quizzes()
        return [q for q in quizzes if q.user_id == current.user_id]

    async def get_all_quizzes(self) -> GroupedQuizzes:
        current = await self.sessions.resolve_current_user()
        quizzes = await self.storage.load_quizzes()
        if current is None:
            return group_quizzes(quizzes, None)
        friend_ids = await self.friendships.resolve_friend_ids(current.user_id)
        return group_quizzes(quizzes, current.user_id, friend_ids)

    async def create_quiz(self, data: QuizInput) -> Quiz:
        current = await self.sessions.require_user()
        quiz = Quiz(
            id=await self.storage.next_id("quiz"),
            title=data.title,
            description=data.description,
            is_public=data.is_public,
            user_id=current.user_id,
            username=current.username,
            created_at=self.clock(),
            questions=await self._new_questions(data.questions),
        )
        quizzes = await self.storage.load_quizzes()
        quizzes.append(quiz)
        await self.storage.save_quizzes(quizzes)
        logger.info("Quiz saved", user_id=current.user_id, quiz_id=quiz.id, title=quiz.title)
        return quiz

    async def update_quiz(self, quiz_id: int, data: QuizInput) -> Quiz:
        """Replace a quiz wholesale. Old question ids are discarded."""
        quizzes, index = await self._owned(quiz_id)
        quiz = quizzes[index]
        quiz.title = data.title
        quiz.description = data.description
        quiz.is_public = data.is_public
        quiz.questions = await self._new_questions(data.questions)
        await self.storage.save_quizzes(quizzes)
        logger.info("Quiz updated", quiz_id=quiz_id, user_id=quiz.user_id)
        return quiz

    async def delete_quiz(self, quiz_id: int):
        quizzes, index = await self._owned(quiz_id)
        del quizzes[index]
        await self.storage.save_quizzes(quizzes)
        logger.info("Quiz deleted", quiz_id=quiz_id)

    async def play_quiz(self, quiz_id: int) -> PlayQuiz:
        quiz = await self.get_quiz(quiz_id)
        return PlayQuiz(
            id=quiz.id,
            title=quiz.title,
            questions=[PlayQuestion(id=q.id, text=q.text) for q in quiz.questions],
        )
