"""Render the user dashboard from a running API.

Usage:
    python -m dashboard --api-url https://app.example.com/api --token <jwt> [-o dashboard.html]

DASHBOARD_API_URL and DASHBOARD_API_TOKEN are used when the flags are omitted.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from dashboard.client import build_client, fetch_user_stats
from dashboard.render import render_page
from dashboard.view_model import DashboardState, UserDashboard
from utils.logging import setup_structured_logging


async def _run(api_url: str, token: str | None) -> UserDashboard:
    async with build_client(api_url, token) as client:
        view = UserDashboard(lambda: fetch_user_stats(client))
        await view.mount()
    return view


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Render the user dashboard as HTML")
    parser.add_argument("--api-url", default=os.getenv("DASHBOARD_API_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.getenv("DASHBOARD_API_TOKEN"))
    parser.add_argument("-o", "--output", type=Path, help="Write HTML here instead of stdout")
    args = parser.parse_args(argv)

    setup_structured_logging("WARNING")
    view = asyncio.run(_run(args.api_url, args.token))
    page = render_page(view)

    if args.output:
        args.output.write_text(page, encoding="utf-8")
    else:
        sys.stdout.write(page)

    return 0 if view.state == DashboardState.LOADED else 1


if __name__ == "__main__":
    sys.exit(main())
