"""
Pytest configuration and fixtures for the local quiz data layer tests.
"""
import sys
import os
from datetime import datetime, timedelta, timezone
import pytest
import pytest_asyncio

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db.kv import MemoryKeyValueStore
from db.storage import LocalStorage
from models.quiz import QuestionInput, QuizInput
from services.data_source import LocalQuizDataSource


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 17, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def storage(kv):
    return LocalStorage(kv, prefix="test")


@pytest.fixture
def ds(storage, clock):
    return LocalQuizDataSource(storage, clock=clock)


@pytest.fixture
def capitals():
    """Three-question private quiz used across scenarios"""
    return QuizInput(
        title="Capitals",
        description="European capitals",
        is_public=False,
        questions=[
            QuestionInput(text="Paris is the capital of France", correct_answer=True),
            QuestionInput(text="Oslo is the capital of Sweden", correct_answer=False),
            QuestionInput(text="Rome is the capital of Italy", correct_answer=True),
        ],
    )


@pytest.fixture
def public_quiz():
    return QuizInput(
        title="Math",
        description="Basics",
        is_public=True,
        questions=[
            QuestionInput(text="2+2 is 4", correct_answer=True),
            QuestionInput(text="3*3 is 6", correct_answer=False),
        ],
    )


@pytest_asyncio.fixture
async def users(ds):
    """Registers alice, bob and carol; leaves nobody logged in."""
    accounts = {}
    for name in ("alice", "bob", "carol"):
        auth = await ds.register(name, f"{name}@x.com", f"{name}-pw")
        accounts[name] = auth.user_id
    await ds.logout()
    return accounts


async def login_as(ds, name: str):
    return await ds.login(f"{name}@x.com", f"{name}-pw")


async def make_friends(ds, requester: str, addressee: str):
    await login_as(ds, requester)
    invite = await ds.send_friend_invite(f"{addressee}@x.com")
    await login_as(ds, addressee)
    return await ds.accept_friend_invite(invite.id)
