from typing import Optional
from core.exceptions import DuplicateEmail, InvalidCredentials, NotFound
from core.logger import logger
from core.security import hash_password, verify_password
from db.storage import LocalStorage
from models.user import AuthResponse, StoredUser
from services.session_service import SessionService

class UserService:
    def __init__(self, storage: LocalStorage, sessions: SessionService):
        self.storage = storage
        self.sessions = sessions

    async def _authenticated(self, user: StoredUser) -> AuthResponse:
        token = await self.sessions.issue_session(user.id, user.username, user.email)
        return AuthResponse(token=token, user_id=user.id, username=user.username, email=user.email)

    async def get_user(self, user_id: int) -> Optional[StoredUser]:
        users = await self.storage.load_users()
        return next((u for u in users if u.id == user_id), None)

    async def register(self, username: str, email: str, password: str) -> AuthResponse:
        users = await self.storage.load_users()
        if any(u.email == email for u in users):
            logger.warning("Registration rejected, email taken", email=email)
            raise DuplicateEmail("Email already registered")

        user = StoredUser(
            id=await self.storage.next_id("user"),
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        users.append(user)
        await self.storage.save_users(users)
        logger.info("New user registered", user_id=user.id)
        return await self._authenticated(user)

    async def login(self, email: str, password: str) -> AuthResponse:
        users = await self.storage.load_users()
        user = next((u for u in users if u.email == email), None)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Login rejected", email=email)
            raise InvalidCredentials()

        logger.info("User logged in", user_id=user.id)
        return await self._authenticated(user)

    async def update_profile(self, username: Optional[str] = None, email: Optional[str] = None) -> AuthResponse:
        current = await self.sessions.require_user()
        users = await self.storage.load_users()
        user = next((u for u in users if u.id == current.user_id), None)
        if not user:
            raise NotFound("User not found")

        if email and email != user.email:
            if any(u.email == email and u.id != user.id for u in users):
                logger.warning("Profile update rejected, email taken", user_id=user.id)
                raise DuplicateEmail()

        if username:
            user.username = username
        if email:
            user.email = email
        await self.storage.save_users(users)
        logger.info("Profile updated", user_id=user.id)
        return await self._authenticated(user)

    async def change_password(self, current_password: str, new_password: str):
        current = await self.sessions.require_user()
        users = await self.storage.load_users()
        user = next((u for u in users if u.id == current.user_id), None)
        if not user:
            raise NotFound("User not found")

        if not verify_password(current_password, user.password_hash):
            logger.warning("Password change rejected", user_id=user.id)
            raise InvalidCredentials("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self.storage.save_users(users)
        logger.info("Password changed", user_id=user.id)
