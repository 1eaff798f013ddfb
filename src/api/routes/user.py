"""User API routes.

Endpoints:
- GET /user/stats: Statistics for the authenticated user
- POST /user/update-preferences: Shallow-merge a preferences update
- GET /user/activity/{user_id}: Activity log, newest first
- POST /user/activity/{user_id}: Append an activity entry

Failures are answered with one fixed message per endpoint; the status code
reflects the error kind, the cause is only logged. This includes failures
before the endpoint body runs (malformed request, store down while the
repositories are resolved).
"""

import logging
from typing import Any, Callable, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from api.dependencies import get_order_data, get_user_repo
from api.models import (
    ActivityEntryResponse,
    RecordActivityRequest,
    RecordActivityResponse,
    UpdatePreferencesResponse,
    UserActivityResponse,
    UserResponse,
    UserStatsResponse,
)
from api.security import get_current_user_required
from domain.model.errors import (
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from port.order_data import OrderDataPort
from port.user_repository import UserRepository
from services import user_service

logger = logging.getLogger(__name__)

STATS_ERROR = "Failed to fetch user statistics"
PREFERENCES_ERROR = "Failed to update user preferences"
ACTIVITY_ERROR = "Failed to fetch user activity"
RECORD_ACTIVITY_ERROR = "Failed to record user activity"

# Keyed by endpoint function name
_ERROR_BY_ROUTE = {
    "get_user_stats": STATS_ERROR,
    "update_preferences": PREFERENCES_ERROR,
    "get_user_activity": ACTIVITY_ERROR,
    "record_user_activity": RECORD_ACTIVITY_ERROR,
}

_STATUS_BY_ERROR = {
    RequestValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
}


def _fail(message: str, error: Exception, user_id: Optional[str]) -> NoReturn:
    """Log the cause and raise an HTTPException carrying only the fixed message."""
    status_code = _STATUS_BY_ERROR.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR)
    extra = {"userId": user_id, "error": str(error), "errorType": type(error).__name__}
    if isinstance(error, (DomainError, RequestValidationError)):
        logger.warning(message, extra=extra)
    else:
        logger.exception(message, extra=extra)
    raise HTTPException(status_code=status_code, detail=message) from error


class FixedMessageRoute(APIRoute):
    """Route that answers request-level failures with the endpoint's fixed message.

    Covers what fails before the endpoint body runs: request validation and
    dependencies raising domain errors (e.g. StoreUnavailableError).
    """

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()
        message = _ERROR_BY_ROUTE.get(self.name)
        if message is None:
            return handler

        async def fixed_message_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except (DomainError, RequestValidationError) as e:
                _fail(message, e, request.path_params.get("user_id"))

        return fixed_message_handler


router = APIRouter(prefix="/user", tags=["user"], route_class=FixedMessageRoute)


def _check_owner(current_user: UserResponse, user_id: str) -> None:
    if user_id != current_user.id:
        raise PermissionDeniedError("Users may only access their own records")


@router.get("/stats", response_model=UserStatsResponse)
def get_user_stats(
    current_user: UserResponse = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
    orders: OrderDataPort = Depends(get_order_data),
):
    """Get order and activity statistics for the authenticated user."""
    try:
        stats = user_service.get_user_stats(repo, orders, current_user.id)
    except Exception as e:
        _fail(STATS_ERROR, e, current_user.id)

    return UserStatsResponse.from_domain(stats)


@router.post("/update-preferences", response_model=UpdatePreferencesResponse)
def update_preferences(
    preferences: dict[str, Any] = Body(...),
    user_id: Optional[str] = Query(None, alias="userId", description="Defaults to the authenticated user"),
    current_user: UserResponse = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Merge a preferences update into the user's stored preferences."""
    user_id = user_id or current_user.id
    try:
        _check_owner(current_user, user_id)
        user = user_service.update_preferences(repo, user_id, preferences)
    except Exception as e:
        _fail(PREFERENCES_ERROR, e, user_id)

    return UpdatePreferencesResponse(success=True, user=UserResponse.from_domain(user))


@router.get("/activity/{user_id}", response_model=UserActivityResponse)
def get_user_activity(
    user_id: str,
    current_user: UserResponse = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Get the user's activity log, newest first."""
    try:
        _check_owner(current_user, user_id)
        activity = user_service.get_user_activity(repo, user_id)
    except Exception as e:
        _fail(ACTIVITY_ERROR, e, user_id)

    return UserActivityResponse(
        success=True,
        activity=[ActivityEntryResponse.from_domain(entry) for entry in activity],
    )


@router.post("/activity/{user_id}", response_model=RecordActivityResponse, status_code=status.HTTP_201_CREATED)
def record_user_activity(
    user_id: str,
    request: RecordActivityRequest,
    current_user: UserResponse = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Append an entry to the user's activity log."""
    try:
        _check_owner(current_user, user_id)
        entry = user_service.record_activity(repo, user_id, request.action, request.details)
    except Exception as e:
        _fail(RECORD_ACTIVITY_ERROR, e, user_id)

    return RecordActivityResponse(success=True, entry=ActivityEntryResponse.from_domain(entry))
