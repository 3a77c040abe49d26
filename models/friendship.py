from datetime import datetime
from enum import Enum
from typing import Optional
from models.base import Base, TimestampMixin


class FriendshipStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"


class Friendship(Base, TimestampMixin):
    id: int
    requester_id: int
    requester_username: str
    requester_email: str
    addressee_id: int
    addressee_username: str
    addressee_email: str
    status: FriendshipStatus = FriendshipStatus.PENDING
    accepted_at: Optional[datetime] = None

    def involves(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.addressee_id)

    def other_id(self, user_id: int) -> int:
        return self.addressee_id if self.requester_id == user_id else self.requester_id

    def connects(self, a: int, b: int) -> bool:
        return {self.requester_id, self.addressee_id} == {a, b}
