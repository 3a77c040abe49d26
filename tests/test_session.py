import base64
import json
import pytest

from core.exceptions import Unauthenticated
from core.security import decode_capsule, encode_capsule
from services.session_service import SessionService


@pytest.fixture
def sessions(storage, clock):
    return SessionService(storage, clock=clock, ttl_seconds=7 * 24 * 3600)


async def test_issue_and_resolve(sessions, storage):
    token = await sessions.issue_session(3, "alice", "alice@x.com")

    assert await storage.get_token() == token
    user = await sessions.resolve_current_user()
    assert (user.user_id, user.username, user.email) == (3, "alice", "alice@x.com")


async def test_capsule_is_plain_base64_json(sessions, clock):
    token = sessions.encode(3, "alice", "alice@x.com")
    payload = json.loads(base64.b64decode(token))

    assert payload["userId"] == 3
    assert payload["exp"] == int((clock().timestamp() + 7 * 24 * 3600) * 1000)


async def test_expired_session_resolves_to_none_but_is_kept(sessions, storage, clock):
    token = await sessions.issue_session(3, "alice", "alice@x.com")
    clock.advance(days=7, seconds=1)

    assert await sessions.resolve_current_user() is None
    assert await storage.get_token() == token


async def test_session_valid_just_before_expiry(sessions, clock):
    await sessions.issue_session(3, "alice", "alice@x.com")
    clock.advance(days=6, hours=23)
    assert await sessions.resolve_current_user() is not None


@pytest.mark.parametrize("token", [
    "not base64 at all!",
    base64.b64encode(b"{broken json").decode(),
    base64.b64encode(b"[1, 2, 3]").decode(),
    encode_capsule({"userId": 1, "username": "a"}),
    encode_capsule({"username": "a", "email": "a@x.com", "exp": 10 ** 15}),
    encode_capsule({"userId": "x", "username": "a", "email": "a@x.com", "exp": 10 ** 15}),
    "",
])
async def test_malformed_capsule_is_no_session(sessions, storage, token):
    await storage.set_token(token)
    assert await sessions.resolve_current_user() is None


async def test_forged_capsule_is_accepted(sessions, storage):
    # Capsules are unsigned: anyone can mint one
    await storage.set_token(encode_capsule({"userId": 99, "username": "eve", "email": "e@x.com", "exp": 10 ** 15}))
    user = await sessions.resolve_current_user()
    assert user.user_id == 99


async def test_require_user_raises_without_session(sessions):
    with pytest.raises(Unauthenticated):
        await sessions.require_user()


async def test_end_session(sessions):
    await sessions.issue_session(3, "alice", "alice@x.com")
    await sessions.end_session()
    assert await sessions.resolve_current_user() is None


def test_decode_capsule_rejects_non_string():
    assert decode_capsule(None) is None


async def test_zero_ttl_is_not_replaced_by_default(storage, clock):
    sessions = SessionService(storage, clock=clock, ttl_seconds=0)
    await sessions.issue_session(3, "alice", "alice@x.com")
    assert await sessions.resolve_current_user() is None
