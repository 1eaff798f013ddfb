from decimal import Decimal
from typing import Protocol


class OrderDataPort(Protocol):
    """Protocol for the order/account data source used by user statistics."""
    def count_orders(self, user_id: str) -> int:
        """Return the number of orders placed by the user."""
        ...

    def get_account_balance(self, user_id: str) -> Decimal:
        """Return the user's account balance (zero when no account exists)."""
        ...
