class QuizAppError(Exception):
    """Base class for business-rule rejections raised by the local data layer."""
    default_message = "Request rejected"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(QuizAppError):
    """No session, or the session capsule has expired."""
    default_message = "Not authenticated"


class Unauthorized(QuizAppError):
    """Valid session, but the caller is not the owning or addressed party."""
    default_message = "Unauthorized"


class NotFound(QuizAppError):
    default_message = "Not found"


class DuplicateEmail(QuizAppError):
    default_message = "Email already in use"


class InvalidCredentials(QuizAppError):
    default_message = "Invalid email or password"


class FriendshipConflict(QuizAppError):
    """An invite cannot be created for this pair of users."""
    default_message = "Friend invite not allowed"


class AlreadyPending(FriendshipConflict):
    default_message = "An invite already exists"


class AlreadyFriends(FriendshipConflict):
    default_message = "You are already friends"


class SelfInvite(FriendshipConflict):
    default_message = "You cannot invite yourself"
