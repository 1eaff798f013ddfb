"""Pydantic models for API request/response."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from domain.model.user import ActivityEntry, User, UserStats


# Balances are exact in the service layer, plain JSON numbers on the wire
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressResponse(CamelModel):
    """Postal address."""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class ActivityEntryResponse(CamelModel):
    """Activity log entry."""
    id: str = Field(..., description="Entry ID")
    action: str = Field(..., description="Action name, e.g. login or purchase")
    timestamp: datetime
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, entry: ActivityEntry) -> 'ActivityEntryResponse':
        return cls(id=entry.id, action=entry.action, timestamp=entry.timestamp, details=entry.details)


class UserResponse(CamelModel):
    """User record as returned by the API (never includes the password hash)."""
    id: str = Field(..., description="User ID (MongoDB _id)")
    email: str = Field(..., description="User email")
    is_verified: bool = False
    address: Optional[AddressResponse] = None
    activity_log: list[ActivityEntryResponse] = Field(default_factory=list)
    preferences: dict[str, Any] = Field(default_factory=dict)
    last_login_date: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        address = user.address
        return cls(
            id=user.id,
            email=user.email,
            is_verified=user.is_verified,
            address=AddressResponse(
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
            ) if address else None,
            activity_log=[ActivityEntryResponse.from_domain(e) for e in user.activity_log],
            preferences=dict(user.preferences),
            last_login_date=user.last_login_date,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class RecentActivityResponse(CamelModel):
    """Activity summary item for the dashboard."""
    id: str
    action: str
    timestamp: datetime


class UserStatsResponse(CamelModel):
    """Derived per-user statistics."""
    total_orders: int = Field(..., ge=0, description="Number of orders placed")
    recent_activity: list[RecentActivityResponse] = Field(default_factory=list)
    account_balance: JsonDecimal = Field(..., description="Account balance")

    @classmethod
    def from_domain(cls, stats: UserStats) -> 'UserStatsResponse':
        return cls(
            total_orders=stats.total_orders,
            recent_activity=[
                RecentActivityResponse(id=a.id, action=a.action, timestamp=a.timestamp)
                for a in stats.recent_activity
            ],
            account_balance=stats.account_balance,
        )


class UpdatePreferencesResponse(BaseModel):
    """Response envelope for a preferences update."""
    success: bool = True
    user: UserResponse


class UserActivityResponse(BaseModel):
    """Response envelope for the activity log."""
    success: bool = True
    activity: list[ActivityEntryResponse]


class RecordActivityRequest(BaseModel):
    """Request model for appending an activity entry."""
    action: str = Field(..., description="Action name")
    details: dict[str, Any] = Field(default_factory=dict, description="Free-form details")


class RecordActivityResponse(BaseModel):
    """Response envelope for an appended activity entry."""
    success: bool = True
    entry: ActivityEntryResponse
