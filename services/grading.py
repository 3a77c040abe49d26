from typing import Mapping
from models.quiz import Quiz
from models.result import SubmitQuizResult


def grade_answers(quiz: Quiz, answers: Mapping[int, bool]) -> SubmitQuizResult:
    """Score submitted answers (question id -> answer) against the quiz's answer key."""
    total = len(quiz.questions)
    if total == 0:
        raise ValueError("Quiz has no questions")

    # Ids that no longer belong to the quiz (e.g. after an edit) never score
    score = sum(1 for q in quiz.questions if q.id in answers and answers[q.id] == q.correct_answer)
    return SubmitQuizResult(
        quiz_id=quiz.id,
        score=score,
        total_questions=total,
        percentage=round(score * 100 / total),
    )
