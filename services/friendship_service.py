from datetime import datetime
from typing import Callable, List, Set
from core.exceptions import AlreadyFriends, AlreadyPending, NotFound, SelfInvite
from core.logger import logger
from db.storage import LocalStorage
from models.base import utcnow
from models.friendship import Friendship, FriendshipStatus
from services.session_service import SessionService

class FriendshipService:
    def __init__(self, storage: LocalStorage, sessions: SessionService, clock: Callable[[], datetime] = utcnow):
        self.storage = storage
        self.sessions = sessions
        self.clock = clock

    async def resolve_friend_ids(self, user_id: int) -> Set[int]:
        """Ids of everyone with an accepted friendship to user_id. Always read fresh from storage."""
        friendships = await self.storage.load_friendships()
        return {
            f.other_id(user_id)
            for f in friendships
            if f.status == FriendshipStatus.ACCEPTED and f.involves(user_id)
        }

    async def send_invite(self, email: str) -> Friendship:
        current = await self.sessions.require_user()
        users = await self.storage.load_users()
        addressee = next((u for u in users if u.email == email), None)
        if not addressee:
            raise NotFound("No user with this email")
        if addressee.id == current.user_id:
            raise SelfInvite()

        friendships = await self.storage.load_friendships()
        existing = next((f for f in friendships if f.connects(current.user_id, addressee.id)), None)
        if existing:
            logger.warning("Friend invite rejected", friendship_id=existing.id, status=existing.status.value)
            if existing.status == FriendshipStatus.ACCEPTED:
                raise AlreadyFriends()
            raise AlreadyPending()

        friendship = Friendship(
            id=await self.storage.next_id("friendship"),
            requester_id=current.user_id,
            requester_username=current.username,
            requester_email=current.email,
            addressee_id=addressee.id,
            addressee_username=addressee.username,
            addressee_email=addressee.email,
            status=FriendshipStatus.PENDING,
            created_at=self.clock(),
        )
        friendships.append(friendship)
        await self.storage.save_friendships(friendships)
        logger.info("Friend invite sent", friendship_id=friendship.id, requester_id=current.user_id, addressee_id=addressee.id)
        return friendship

    async def _find_pending_for_addressee(self, friendship_id: int):
        current = await self.sessions.require_user()
        friendships = await self.storage.load_friendships()
        for index, f in enumerate(friendships):
            if f.id == friendship_id and f.addressee_id == current.user_id and f.status == FriendshipStatus.PENDING:
                return friendships, index
        raise NotFound("Invite not found")

    async def accept_invite(self, friendship_id: int) -> Friendship:
        friendships, index = await self._find_pending_for_addressee(friendship_id)
        friendship = friendships[index]
        friendship.status = FriendshipStatus.ACCEPTED
        friendship.accepted_at = self.clock()
        await self.storage.save_friendships(friendships)
        logger.info("Friend invite accepted", friendship_id=friendship_id)
        return friendship

    async def decline_invite(self, friendship_id: int):
        friendships, index = await self._find_pending_for_addressee(friendship_id)
        del friendships[index]
        await self.storage.save_friendships(friendships)
        logger.info("Friend invite declined", friendship_id=friendship_id)

    async def remove_friend(self, friendship_id: int):
        current = await self.sessions.require_user()
        friendships = await self.storage.load_friendships()
        index = next(
            (i for i, f in enumerate(friendships)
             if f.id == friendship_id and f.status == FriendshipStatus.ACCEPTED and f.involves(current.user_id)),
            None,
        )
        if index is None:
            raise NotFound("Friendship not found")

        del friendships[index]
        await self.storage.save_friendships(friendships)
        logger.info("Friend removed", friendship_id=friendship_id, user_id=current.user_id)

    async def get_pending_invites(self) -> List[Friendship]:
        current = await self.sessions.require_user()
        friendships = await self.storage.load_friendships()
        return [f for f in friendships if f.addressee_id == current.user_id and f.status == FriendshipStatus.PENDING]

    async def get_sent_invites(self) -> List[Friendship]:
        current = await self.sessions.require_user()
        friendships = await self.storage.load_friendships()
        return [f for f in friendships if f.requester_id == current.user_id and f.status == FriendshipStatus.PENDING]

    async def get_friends(self) -> List[Friendship]:
        current = await self.sessions.require_user()
        friendships = await self.storage.load_friendships()
        return [f for f in friendships if f.status == FriendshipStatus.ACCEPTED and f.involves(current.user_id)]
