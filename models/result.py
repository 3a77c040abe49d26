from datetime import datetime
from typing import List
from pydantic import Field, model_validator
from models.base import Base, utcnow


class SubmitQuizResult(Base):
    quiz_id: int = Field(..., gt=0)
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., gt=0)
    percentage: int = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def score_within_total(self):
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed total_questions")
        return self


class QuizResult(Base):
    id: int
    user_id: int
    quiz_id: int
    score: int = Field(..., ge=0)
    total_questions: int = Field(..., gt=0)
    percentage: int = Field(..., ge=0, le=100)
    completed_at: datetime = Field(default_factory=utcnow)


class QuizResultEntry(Base):
    """A result joined with the player's display name."""
    result_id: int
    user_id: int
    username: str
    score: int
    total_questions: int
    percentage: int
    completed_at: datetime


class QuizLeaderboardEntry(Base):
    quiz_id: int
    quiz_title: str
    results: List[QuizResultEntry] = Field(default_factory=list)


class Leaderboard(Base):
    my_quizzes: List[QuizLeaderboardEntry] = Field(default_factory=list)
    friends_quizzes: List[QuizLeaderboardEntry] = Field(default_factory=list)
    public_quizzes: List[QuizLeaderboardEntry] = Field(default_factory=list)


class MyLeaderboard(Base):
    quizzes: List[QuizLeaderboardEntry] = Field(default_factory=list)
