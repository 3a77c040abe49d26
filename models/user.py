from models.base import Base


class StoredUser(Base):
    id: int
    username: str
    email: str
    password_hash: str


class CurrentUser(Base):
    """Identity carried inside a session capsule."""
    user_id: int
    username: str
    email: str


class AuthResponse(Base):
    token: str
    user_id: int
    username: str
    email: str
