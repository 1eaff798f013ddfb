"""Dashboard view model: loading → error | loaded."""

import logging
from enum import Enum
from typing import Awaitable, Callable

from api.models import UserStatsResponse

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to fetch user statistics"

StatsFetcher = Callable[[], Awaitable[UserStatsResponse]]


class DashboardState(str, Enum):
    """Enumeration of dashboard view states."""
    LOADING = 'loading'
    ERROR = 'error'
    LOADED = 'loaded'


class UserDashboard:
    """Holds the dashboard state for one mounted view.

    The stats are fetched once on mount. Both ERROR and LOADED are final;
    there is no retry.
    """

    def __init__(self, fetch_stats: StatsFetcher):
        self._fetch_stats = fetch_stats
        self._mounted = False
        self.state = DashboardState.LOADING
        self.stats: UserStatsResponse | None = None
        self.error: str | None = None

    async def mount(self) -> DashboardState:
        if self._mounted:
            return self.state
        self._mounted = True

        try:
            stats = await self._fetch_stats()
        except Exception as e:
            logger.warning(FETCH_ERROR_MESSAGE, extra={"error": str(e), "errorType": type(e).__name__})
            self.error = FETCH_ERROR_MESSAGE
            self.state = DashboardState.ERROR
            return self.state

        self.stats = stats
        self.state = DashboardState.LOADED
        return self.state

    def render(self) -> str:
        from dashboard.render import render_dashboard
        return render_dashboard(self)
