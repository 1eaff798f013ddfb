"""In-memory implementation of OrderDataPort for testing."""

from decimal import Decimal


class FakeOrderDataAdapter:
    def __init__(self):
        self.orders: dict[str, int] = {}
        self.balances: dict[str, Decimal] = {}

    def count_orders(self, user_id: str) -> int:
        return self.orders.get(user_id, 0)

    def get_account_balance(self, user_id: str) -> Decimal:
        return self.balances.get(user_id, Decimal('0.00'))
