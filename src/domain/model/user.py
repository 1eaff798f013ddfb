from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from domain.model.errors import ValidationError


# ── Value Objects ────────────────────────────────────────


@dataclass(frozen=True)
class Address:
    """Postal address attached to a user."""
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class ActivityEntry:
    """A single entry of a user's activity log. Never modified once appended."""
    id: str
    action: str
    timestamp: datetime
    details: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(action: str, details: dict[str, Any] | None = None) -> 'ActivityEntry':
        """Create a new entry stamped with the current time."""
        return ActivityEntry(
            id=uuid.uuid4().hex,
            action=action,
            timestamp=datetime.now(timezone.utc),
            details=dict(details or {}),
        )


@dataclass(frozen=True)
class RecentActivity:
    """Activity summary item shown on the dashboard."""
    id: str
    action: str
    timestamp: datetime


@dataclass(frozen=True)
class UserStats:
    """Per-user statistics derived on demand, never persisted."""
    total_orders: int
    recent_activity: list[RecentActivity]
    account_balance: Decimal


# ── User Domain Model ────────────────────────────────────


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    last_login_date: datetime
    is_verified: bool = False
    address: Address | None = None
    activity_log: list[ActivityEntry] = field(default_factory=list)
    preferences: dict[str, Any] = field(default_factory=dict)


# ── Preferences ──────────────────────────────────────────

THEMES = ('light', 'dark', 'system')

# key -> (type, max length for strings)
PREFERENCE_SCHEMA: dict[str, tuple[type, int | None]] = {
    'theme': (str, None),
    'notifications': (bool, None),
    'emailDigest': (bool, None),
    'language': (str, 35),
    'timezone': (str, 64),
    'currency': (str, 3),
}


def validate_preferences(preferences: dict[str, Any]) -> dict[str, Any]:
    """Check a preference update against the known keys.

    Returns a copy of the update. Raises ValidationError on an empty map,
    an unknown key or a value of the wrong type.
    """
    if not isinstance(preferences, dict) or not preferences:
        raise ValidationError("Preferences update must be a non-empty object")

    for key, value in preferences.items():
        if key not in PREFERENCE_SCHEMA:
            raise ValidationError(f"Unknown preference: {key}")

        expected_type, max_length = PREFERENCE_SCHEMA[key]
        # bool is a subclass of int, compare the exact type
        if type(value) is not expected_type:
            raise ValidationError(f"Preference '{key}' must be of type {expected_type.__name__}")
        if max_length is not None and len(value) > max_length:
            raise ValidationError(f"Preference '{key}' is too long")

    if 'theme' in preferences and preferences['theme'] not in THEMES:
        raise ValidationError(f"Preference 'theme' must be one of {', '.join(THEMES)}")
    if 'currency' in preferences and len(preferences['currency']) != 3:
        raise ValidationError("Preference 'currency' must be a 3-letter code")

    return dict(preferences)
