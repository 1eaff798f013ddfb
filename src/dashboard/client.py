"""HTTP client for the user statistics endpoint."""

import logging

import httpx

from api.models import UserStatsResponse

logger = logging.getLogger(__name__)

STATS_PATH = "/user/stats"
API_TIMEOUT_SECONDS = 5.0


async def fetch_user_stats(client: httpx.AsyncClient) -> UserStatsResponse:
    """GET the stats endpoint and parse the body.

    Raises httpx.HTTPError on transport or status failures and
    pydantic.ValidationError on a malformed body.
    """
    response = await client.get(STATS_PATH)
    response.raise_for_status()
    return UserStatsResponse.model_validate(response.json())


def build_client(base_url: str, token: str | None = None) -> httpx.AsyncClient:
    """Create a client for the API at base_url, sending token as bearer credential."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=base_url, headers=headers, timeout=API_TIMEOUT_SECONDS)
