"""
User records.

Credentials live with the account service; this service only keeps the
profile fields the interview flow needs (name and e-mail).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from mock_me.core.errors import DatabaseQueryError, UserNotFound
from mock_me.core.persistence import PersistenceGateway, get_persistence_gateway, to_object_id
from mock_me.core.result import Result, failure, success

logger = logging.getLogger(__name__)

USERS = "users"


class UserService:
    """CRUD over the ``users`` collection."""

    def __init__(self, gateway: Optional[PersistenceGateway] = None):
        self.db = gateway or get_persistence_gateway()

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
    ) -> Result[Dict[str, Any], DatabaseQueryError]:
        now = datetime.now(timezone.utc)
        result = await self.db.insert_one(USERS, {
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "email": email.strip().lower(),
            "created_at": now,
            "updated_at": now,
        })
        if result.is_success():
            logger.info(f"Created user {result.value['id']}")
        return result

    async def get_user_by_id(self, user_id: str) -> Result[Dict[str, Any], UserNotFound]:
        oid = to_object_id(user_id)
        if oid is None:
            return failure(UserNotFound(f"User not found: {user_id}"))

        result = await self.db.find_one(USERS, {"_id": oid})
        if result.is_error():
            return result
        if result.value is None:
            return failure(UserNotFound(f"User not found: {user_id}"))
        return success(result.value)

    async def get_user_by_email(self, email: str) -> Result[Dict[str, Any], UserNotFound]:
        result = await self.db.find_one(USERS, {"email": email.strip().lower()})
        if result.is_error():
            return result
        if result.value is None:
            return failure(UserNotFound(f"No user with e-mail {email}"))
        return success(result.value)


# Global instance (lazy loaded)
_user_service: Optional[UserService] = None


def get_user_service() -> UserService:
    """Get or create the user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
