from datetime import datetime, timedelta
from typing import Callable, Optional
from core.config import settings
from core.exceptions import Unauthenticated
from core.logger import logger
from core.security import decode_capsule, encode_capsule
from db.storage import LocalStorage
from models.base import utcnow
from models.user import CurrentUser


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class SessionService:
    """
    Issues and resolves the local session capsule.

    The capsule is base64-encoded JSON holding the user id, username, email and
    an absolute expiry in epoch milliseconds. It is not signed.
    """

    def __init__(self, storage: LocalStorage, clock: Callable[[], datetime] = utcnow, ttl_seconds: int = None):
        self.storage = storage
        self.clock = clock
        if ttl_seconds is None:
            ttl_seconds = settings.SESSION_TTL_SECONDS
        self.ttl = timedelta(seconds=ttl_seconds)

    def encode(self, user_id: int, username: str, email: str) -> str:
        return encode_capsule({
            "userId": user_id,
            "username": username,
            "email": email,
            "exp": _epoch_ms(self.clock() + self.ttl),
        })

    def decode(self, token: Optional[str]) -> Optional[CurrentUser]:
        if not token:
            return None
        payload = decode_capsule(token)
        if payload is None:
            return None
        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or exp <= _epoch_ms(self.clock()):
            return None
        try:
            return CurrentUser(
                user_id=int(payload["userId"]),
                username=str(payload["username"]),
                email=str(payload["email"]),
            )
        except (KeyError, TypeError, ValueError):
            return None

    async def issue_session(self, user_id: int, username: str, email: str) -> str:
        token = self.encode(user_id, username, email)
        await self.storage.set_token(token)
        logger.debug("Session issued", user_id=user_id)
        return token

    async def resolve_current_user(self) -> Optional[CurrentUser]:
        return self.decode(await self.storage.get_token())

    async def require_user(self) -> CurrentUser:
        user = await self.resolve_current_user()
        if user is None:
            logger.warning("Rejected request without a valid session")
            raise Unauthenticated()
        return user

    async def end_session(self):
        await self.storage.clear_token()
        logger.info("Session ended")
