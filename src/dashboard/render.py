"""HTML rendering for the user dashboard."""

from datetime import datetime
from html import escape
from typing import TYPE_CHECKING

from dashboard.view_model import DashboardState

if TYPE_CHECKING:
    from dashboard.view_model import UserDashboard


def _format_balance(amount) -> str:
    return f"${amount:,.2f}"


def _format_date(timestamp: datetime) -> str:
    """Date in the current locale's representation."""
    return timestamp.astimezone().strftime('%x')


def render_dashboard(view: 'UserDashboard') -> str:
    """Render the view for its current state."""
    if view.state == DashboardState.LOADING:
        return "<div>Loading...</div>"
    if view.state == DashboardState.ERROR:
        return f'<div class="error-message text-red-700 p-4">{escape(view.error or "")}</div>'
    if view.stats is None:
        return ""

    stats = view.stats
    items = "".join(
        f"""
                <li class="flex justify-between py-2 border-b border-gray-100" data-id="{escape(activity.id)}">
                    <span class="text-gray-900">{escape(activity.action)}</span>
                    <span class="text-gray-500">{_format_date(activity.timestamp)}</span>
                </li>"""
        for activity in stats.recent_activity
    )
    if not items:
        items = "<li class='text-gray-500 text-center py-4'>No recent activity</li>"

    return f"""
    <div class="dashboard-container max-w-4xl mx-auto p-8">
        <h1 class="text-3xl font-bold text-gray-900 mb-6">Your Dashboard</h1>
        <div class="stats-grid grid grid-cols-1 md:grid-cols-2 gap-6 mb-8">
            <div class="stat-card bg-blue-50 rounded-lg p-4 border border-blue-200">
                <h3 class="text-sm text-blue-600 font-medium mb-1">Total Orders</h3>
                <p class="text-3xl font-bold text-blue-900">{stats.total_orders:,}</p>
            </div>
            <div class="stat-card bg-emerald-50 rounded-lg p-4 border border-emerald-200">
                <h3 class="text-sm text-emerald-600 font-medium mb-1">Account Balance</h3>
                <p class="text-3xl font-bold text-emerald-900">{_format_balance(stats.account_balance)}</p>
            </div>
        </div>
        <div class="recent-activity bg-white rounded-lg shadow-lg p-6">
            <h2 class="text-xl font-semibold text-gray-900 mb-4">Recent Activity</h2>
            <ul>{items}
            </ul>
        </div>
    </div>
    """


def render_page(view: 'UserDashboard') -> str:
    """Wrap the rendered view in a standalone HTML document."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Your Dashboard</title>
    <script src="https://cdn.tailwindcss.com"></script>
</head>
<body class="bg-gray-50">
{render_dashboard(view)}
</body>
</html>
"""
