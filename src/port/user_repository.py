from typing import Any, Protocol

from domain.model.user import ActivityEntry, Address, User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, email: str, password_hash: str, address: Address | None = None) -> User | None:
        """Create a new user. Return User or None if the email is taken.

        Accounts are registered by the identity service; this is the seeding
        path used by fixtures and local setup.
        """
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def merge_preferences(
        self, user_id: str, preferences: dict[str, Any], entry: ActivityEntry | None = None,
    ) -> User | None:
        """Shallow-merge preferences (and append entry) atomically. Return updated User or None if not found."""
        ...

    def append_activity(self, user_id: str, entry: ActivityEntry) -> bool:
        """Append an activity log entry. Return False if the user does not exist."""
        ...
