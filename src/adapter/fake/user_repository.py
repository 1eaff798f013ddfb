"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from domain.model.user import ActivityEntry, Address, User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self.write_count = 0

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, address: Address | None = None) -> User | None:
        if any(u.email == email for u in self.store.values()):
            return None

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
            last_login_date=now,
            address=address,
        )
        self.store[user_id] = user
        self.write_count += 1
        return user

    def merge_preferences(
        self, user_id: str, preferences: dict[str, Any], entry: ActivityEntry | None = None,
    ) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        activity_log = list(user.activity_log)
        if entry is not None:
            activity_log.append(entry)

        updated = replace(
            user,
            preferences={**user.preferences, **preferences},
            activity_log=activity_log,
            updated_at=datetime.now(timezone.utc),
        )
        self.store[user_id] = updated
        self.write_count += 1
        return updated

    def append_activity(self, user_id: str, entry: ActivityEntry) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        user.activity_log = [*user.activity_log, entry]
        user.updated_at = datetime.now(timezone.utc)
        self.write_count += 1
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)
