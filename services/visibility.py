from typing import Iterable, Optional, Set
from models.quiz import GroupedQuizzes, Quiz


def group_quizzes(quizzes: Iterable[Quiz], viewer_id: Optional[int], friend_ids: Set[int] = frozenset()) -> GroupedQuizzes:
    """
    Split quizzes into the viewer's own, friends' and other public quizzes.

    Friends see each other's private quizzes. Private quizzes of strangers are
    left out entirely. Anonymous viewers (viewer_id None) only get the public group.
    """
    grouped = GroupedQuizzes()
    for quiz in quizzes:
        if viewer_id is not None and quiz.user_id == viewer_id:
            grouped.my_quizzes.append(quiz)
        elif viewer_id is not None and quiz.user_id in friend_ids:
            grouped.friends_quizzes.append(quiz)
        elif quiz.is_public:
            grouped.public_quizzes.append(quiz)
    return grouped


def can_view(quiz: Quiz, viewer_id: int, friend_ids: Set[int]) -> bool:
    return quiz.is_public or quiz.user_id == viewer_id or quiz.user_id in friend_ids
