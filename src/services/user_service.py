"""User service: statistics, preferences and activity log business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
from typing import Any

from domain.model.errors import NotFoundError, ValidationError
from domain.model.user import (
    ActivityEntry,
    RecentActivity,
    User,
    UserStats,
    validate_preferences,
)
from port.order_data import OrderDataPort
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10
PREFERENCES_UPDATED_ACTION = 'update_preferences'
ACTION_MAX_LENGTH = 100


def _get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def _newest_first(entries: list[ActivityEntry]) -> list[ActivityEntry]:
    # sorted() is stable: entries sharing a timestamp keep reverse append order
    return sorted(reversed(entries), key=lambda e: e.timestamp, reverse=True)


def get_user_stats(repo: UserRepository, orders: OrderDataPort, user_id: str) -> UserStats:
    """Aggregate order and activity data for a user.

    Raises:
        NotFoundError: user does not exist
        StoreUnavailableError: the user store or the order data source failed
    """
    user = _get_user(repo, user_id)

    recent = [
        RecentActivity(id=entry.id, action=entry.action, timestamp=entry.timestamp)
        for entry in _newest_first(user.activity_log)[:RECENT_ACTIVITY_LIMIT]
    ]

    return UserStats(
        total_orders=orders.count_orders(user_id),
        recent_activity=recent,
        account_balance=orders.get_account_balance(user_id),
    )


def update_preferences(repo: UserRepository, user_id: str, preferences: dict[str, Any]) -> User:
    """Shallow-merge a preferences update into the user's stored preferences.

    Keys in the update overwrite stored keys; stored keys not in the
    update are preserved. An activity entry listing the changed keys is
    appended in the same write.

    Raises:
        ValidationError: unknown preference key or wrong value type
        NotFoundError: user does not exist (nothing is written)
    """
    update = validate_preferences(preferences)
    _get_user(repo, user_id)

    entry = ActivityEntry.create(PREFERENCES_UPDATED_ACTION, {'keys': sorted(update)})
    user = repo.merge_preferences(user_id, update, entry)
    if not user:
        # removed between the existence check and the write
        raise NotFoundError(f"User {user_id} not found")

    logger.info("Preferences updated", extra={"userId": user_id, "keys": sorted(update)})
    return user


def get_user_activity(repo: UserRepository, user_id: str) -> list[ActivityEntry]:
    """Return the user's full activity log, newest first.

    Raises:
        NotFoundError: user does not exist
    """
    user = _get_user(repo, user_id)
    return _newest_first(user.activity_log)


def record_activity(
    repo: UserRepository,
    user_id: str,
    action: str,
    details: dict[str, Any] | None = None,
) -> ActivityEntry:
    """Append an entry to the user's activity log.

    Raises:
        ValidationError: blank or over-long action
        NotFoundError: user does not exist
    """
    if not action or not action.strip():
        raise ValidationError("Activity action must not be empty")
    if len(action.strip()) > ACTION_MAX_LENGTH:
        raise ValidationError(f"Activity action exceeds {ACTION_MAX_LENGTH} characters")

    entry = ActivityEntry.create(action.strip(), details)
    if not repo.append_activity(user_id, entry):
        raise NotFoundError(f"User {user_id} not found")

    logger.info("Activity recorded", extra={"userId": user_id, "action": entry.action})
    return entry
