from typing import List
from pydantic import Field
from models.base import Base, TimestampMixin


class QuestionInput(Base):
    text: str = Field(..., min_length=1)
    correct_answer: bool


class Question(QuestionInput):
    id: int


class QuizInput(Base):
    """Body for creating or replacing a quiz."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    is_public: bool = True
    questions: List[QuestionInput] = Field(default_factory=list)


class Quiz(Base, TimestampMixin):
    id: int
    title: str
    description: str = ""
    is_public: bool = True
    user_id: int
    username: str
    questions: List[Question] = Field(default_factory=list)


class PlayQuestion(Base):
    id: int
    text: str


class PlayQuiz(Base):
    """Quiz as shown to a player: no answer key."""
    id: int
    title: str
    questions: List[PlayQuestion]


class GroupedQuizzes(Base):
    my_quizzes: List[Quiz] = Field(default_factory=list)
    friends_quizzes: List[Quiz] = Field(default_factory=list)
    public_quizzes: List[Quiz] = Field(default_factory=list)
