from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.order_data import MongoOrderDataAdapter
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import StoreUnavailableError
from port.order_data import OrderDataPort
from port.user_repository import UserRepository


def _get_db():
    """Get MongoDB database, raising StoreUnavailableError if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise StoreUnavailableError("MongoDB unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_order_data() -> OrderDataPort:
    return MongoOrderDataAdapter(_get_db())
