import pytest

from core.exceptions import NotFound, Unauthenticated, Unauthorized
from models.quiz import QuestionInput, QuizInput
from conftest import login_as


async def test_create_requires_session(ds, capitals):
    with pytest.raises(Unauthenticated):
        await ds.create_quiz(capitals)


async def test_create_and_fetch_round_trip(ds, users, capitals, clock):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)

    fetched = await ds.get_quiz_by_id(quiz.id)
    assert fetched.user_id == users["alice"]
    assert fetched.username == "alice"
    assert fetched.is_public is False
    assert fetched.created_at == clock()
    assert [(q.text, q.correct_answer) for q in fetched.questions] == [
        (q.text, q.correct_answer) for q in capitals.questions
    ]
    assert len({q.id for q in fetched.questions}) == 3


async def test_question_ids_come_from_global_counter(ds, users, capitals, public_quiz):
    await login_as(ds, "alice")
    first = await ds.create_quiz(capitals)
    second = await ds.create_quiz(public_quiz)

    assert [q.id for q in first.questions] == [1, 2, 3]
    assert [q.id for q in second.questions] == [4, 5]


async def test_edit_replaces_questions_with_new_ids(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)
    old_ids = {q.id for q in quiz.questions}

    edited = QuizInput(
        title="Capitals v2",
        description="Shorter",
        is_public=True,
        questions=capitals.questions[:2],
    )
    await ds.update_quiz(quiz.id, edited)

    fetched = await ds.get_quiz_by_id(quiz.id)
    assert fetched.title == "Capitals v2"
    assert fetched.is_public is True
    assert len(fetched.questions) == 2
    assert old_ids.isdisjoint(q.id for q in fetched.questions)
    assert fetched.created_at == quiz.created_at


async def test_update_by_non_owner(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)

    await login_as(ds, "bob")
    with pytest.raises(Unauthorized):
        await ds.update_quiz(quiz.id, capitals)
    with pytest.raises(Unauthorized):
        await ds.delete_quiz(quiz.id)


async def test_update_unknown_quiz(ds, users, capitals):
    await login_as(ds, "alice")
    with pytest.raises(NotFound):
        await ds.update_quiz(404, capitals)
    with pytest.raises(NotFound):
        await ds.delete_quiz(404)


async def test_delete_quiz(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)
    await ds.delete_quiz(quiz.id)

    with pytest.raises(NotFound):
        await ds.get_quiz_by_id(quiz.id)


async def test_ids_not_reused_after_delete(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)
    await ds.delete_quiz(quiz.id)
    again = await ds.create_quiz(capitals)
    assert again.id > quiz.id


async def test_play_withholds_answers(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)
    await ds.logout()

    play = await ds.play_quiz(quiz.id)
    assert play.title == "Capitals"
    assert [q.id for q in play.questions] == [q.id for q in quiz.questions]
    assert all("correctAnswer" not in q.model_dump(by_alias=True) for q in play.questions)


async def test_play_unknown_quiz(ds):
    with pytest.raises(NotFound):
        await ds.play_quiz(1)


async def test_my_quizzes(ds, users, capitals, public_quiz):
    await login_as(ds, "alice")
    await ds.create_quiz(capitals)
    await login_as(ds, "bob")
    mine = await ds.create_quiz(public_quiz)

    assert [q.id for q in await ds.get_my_quizzes()] == [mine.id]


async def test_my_quizzes_requires_session(ds):
    with pytest.raises(Unauthenticated):
        await ds.get_my_quizzes()


async def test_visibility_defaults_to_public(ds, users):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(QuizInput(title="T", questions=[QuestionInput(text="q", correct_answer=True)]))
    assert quiz.is_public is True


async def test_grade_quiz(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)
    q1, q2, q3 = quiz.questions

    graded = await ds.grade_quiz(quiz.id, {q1.id: True, q2.id: True, q3.id: True})
    assert (graded.score, graded.total_questions, graded.percentage) == (2, 3, 67)


async def test_grade_ignores_stale_question_ids(ds, users, capitals):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(capitals)
    answers = {q.id: q.correct_answer for q in quiz.questions}
    await ds.update_quiz(quiz.id, capitals)

    graded = await ds.grade_quiz(quiz.id, answers)
    assert graded.score == 0
    assert graded.total_questions == 3


async def test_grade_empty_quiz(ds, users):
    await login_as(ds, "alice")
    quiz = await ds.create_quiz(QuizInput(title="Empty"))
    with pytest.raises(ValueError):
        await ds.grade_quiz(quiz.id, {})
