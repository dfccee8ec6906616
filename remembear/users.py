"""
Remembear - Users

User records and the lookup used to resolve assignee ids.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Protocol


class UserNotFoundError(LookupError):
    """No user exists with the requested uid."""

    def __init__(self, uid: int):
        super().__init__(f"No user with uid {uid}")
        self.uid = uid


@dataclass(frozen=True)
class User:
    """A person who can be assigned to reminders."""
    uid: int
    name: str


class UserProvider(Protocol):
    """Read-only user lookup."""

    def get_by_uid(self, uid: int) -> User:
        ...


class UserDirectory:
    """
    In-memory user lookup.

    Usage:
        users = UserDirectory([User(1, "Laura"), User(2, "Donna")])
        users.get_by_uid(2).name  # "Donna"
    """

    def __init__(self, users: Iterable[User] = ()):
        self._users: Dict[int, User] = {user.uid: user for user in users}

    def get_by_uid(self, uid: int) -> User:
        """
        Get user by uid.

        Raises:
            UserNotFoundError: Unknown uid
        """
        try:
            return self._users[uid]
        except KeyError:
            raise UserNotFoundError(uid) from None

    def get_all(self) -> List[User]:
        """All users ordered by uid."""
        return [self._users[uid] for uid in sorted(self._users)]

    def __len__(self) -> int:
        return len(self._users)
