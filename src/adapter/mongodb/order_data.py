"""MongoDB implementation of OrderDataPort.

Reads the `orders` and `accounts` collections, which are written by the
ordering system. Balances are stored as Decimal128.
"""

from decimal import Decimal
from logging import getLogger

from bson.decimal128 import Decimal128
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import ACCOUNTS_COLLECTION_NAME, ORDERS_COLLECTION_NAME
from domain.model.errors import StoreUnavailableError

logger = getLogger(__name__)


class MongoOrderDataAdapter:
    def __init__(self, db: Database):
        self.orders = db[ORDERS_COLLECTION_NAME]
        self.accounts = db[ACCOUNTS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create the index used for per-user order counts."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.orders, [('user_id', 1)], 'idx_orders_user_id')
            return True
        except Exception as e:
            logger.error("Failed to create orders indexes", extra={"error": str(e)})
            return False

    def count_orders(self, user_id: str) -> int:
        try:
            return self.orders.count_documents({'user_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to count orders", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Order data unavailable") from e

    def get_account_balance(self, user_id: str) -> Decimal:
        try:
            account = self.accounts.find_one({'_id': user_id}, {'balance': 1})
        except PyMongoError as e:
            logger.error("Failed to read account balance", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Order data unavailable") from e

        if not account or account.get('balance') is None:
            return Decimal('0.00')

        balance = account['balance']
        if isinstance(balance, Decimal128):
            return balance.to_decimal()
        return Decimal(str(balance))
