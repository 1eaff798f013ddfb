"""MongoDB implementation of UserRepository."""

import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import StoreUnavailableError
from domain.model.user import ActivityEntry, Address, User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('address.zip_code', 1)], 'idx_users_address_zip_code')
            return True
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── document mapping ─────────────────────────────────────

    @staticmethod
    def _entry_to_doc(entry: ActivityEntry) -> dict:
        return {
            'id': entry.id,
            'action': entry.action,
            'timestamp': entry.timestamp,
            'details': entry.details,
        }

    @staticmethod
    def _entry_from_doc(doc: dict) -> ActivityEntry:
        return ActivityEntry(
            id=doc.get('id') or '',
            action=doc['action'],
            timestamp=doc['timestamp'],
            details=doc.get('details') or {},
        )

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        address = doc.get('address')
        return User(
            id=doc['_id'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            last_login_date=doc.get('last_login_date', doc['created_at']),
            is_verified=doc.get('is_verified', False),
            address=Address(**address) if address else None,
            activity_log=[self._entry_from_doc(e) for e in doc.get('activity_log') or []],
            preferences=doc.get('preferences') or {},
        )

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, address: Address | None = None) -> User | None:
        """Create a new user and return the User object, or None if the email is taken."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'is_verified': False,
            'address': asdict(address) if address else None,
            'activity_log': [],
            'preferences': {},
            'last_login_date': now,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            return None
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreUnavailableError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id})
        return self._to_domain(user_doc)

    def merge_preferences(
        self, user_id: str, preferences: dict[str, Any], entry: ActivityEntry | None = None,
    ) -> User | None:
        """Shallow-merge preferences into the stored map in one atomic update.

        Each key is written with its own dotted $set path, so keys absent
        from the update are left untouched.
        """
        now = datetime.now(timezone.utc)
        update: dict[str, Any] = {
            '$set': {
                **{f'preferences.{key}': value for key, value in preferences.items()},
                'updated_at': now,
            },
        }
        if entry is not None:
            update['$push'] = {'activity_log': self._entry_to_doc(entry)}

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id}, update, return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to merge preferences", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to update preferences") from e

        if doc is None:
            return None
        logger.debug("Preferences merged", extra={"userId": user_id, "keys": sorted(preferences)})
        return self._to_domain(doc)

    def append_activity(self, user_id: str, entry: ActivityEntry) -> bool:
        """Append an activity entry. Return False if the user does not exist."""
        try:
            result = self.collection.update_one(
                {'_id': user_id},
                {
                    '$push': {'activity_log': self._entry_to_doc(entry)},
                    '$set': {'updated_at': datetime.now(timezone.utc)},
                },
            )
        except PyMongoError as e:
            logger.error("Failed to append activity", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to append activity") from e
        return result.matched_count > 0

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to read user") from e
        return self._to_domain(doc) if doc else None
