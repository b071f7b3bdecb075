"""
MongoDB database connection and utilities.

Uses Motor for async MongoDB operations.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import CollectionInvalid, ServerSelectionTimeoutError

from mock_me.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


# $jsonSchema validators; "required" turns a missing field into a
# document validation failure (code 121) reported as a not-null violation.
COLLECTION_VALIDATORS = {
    "users": {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["first_name", "last_name", "email"],
            "properties": {
                "first_name": {"bsonType": "string"},
                "last_name": {"bsonType": "string"},
                "email": {"bsonType": "string"},
            },
        }
    },
    "interviews": {
        "$jsonSchema": {
            "bsonType": "object",
            "required": [
                "role",
                "level",
                "number_of_questions",
                "company_name",
                "job_description",
                "user_id",
            ],
            "properties": {
                "number_of_questions": {"bsonType": "int", "minimum": 1},
                "tech_stack": {"bsonType": "array"},
                "interview_focus": {"bsonType": "array"},
            },
        }
    },
    "interview_questions": {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["interview_id", "question", "question_order"],
            "properties": {
                "question": {"bsonType": "string"},
                "answer": {"bsonType": "string"},
                "question_order": {"bsonType": "int", "minimum": 1},
            },
        }
    },
}


class MongoDBClient:
    """
    Async MongoDB client wrapper with connection management.
    """

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def client(self) -> AsyncIOMotorClient:
        """Get the MongoDB client instance."""
        if self._client is None:
            raise RuntimeError("MongoDB client not initialized. Call connect() first.")
        return self._client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the database instance."""
        if self._db is None:
            raise RuntimeError("MongoDB database not initialized. Call connect() first.")
        return self._db

    async def connect(self) -> None:
        """
        Establish connection to MongoDB.
        """
        try:
            self._client = AsyncIOMotorClient(
                settings.mongodb_uri,
                serverSelectionTimeoutMS=5000,
                tz_aware=True,
            )
            # Verify connection
            await self._client.admin.command("ping")
            self._db = self._client[settings.mongodb_db_name]
            logger.info(f"Connected to MongoDB: {settings.mongodb_db_name}")
        except ServerSelectionTimeoutError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("MongoDB connection closed")

    async def ensure_schema(self) -> None:
        """Create collections with validators and the indexes the service relies on."""
        existing = set(await self.db.list_collection_names())
        for name, validator in COLLECTION_VALIDATORS.items():
            if name in existing:
                await self.db.command("collMod", name, validator=validator)
                continue
            try:
                await self.db.create_collection(name, validator=validator)
            except CollectionInvalid:
                # Created concurrently by another worker
                await self.db.command("collMod", name, validator=validator)

        await self.users.create_index([("email", ASCENDING)], unique=True)
        await self.interviews.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
        await self.interview_questions.create_index(
            [("interview_id", ASCENDING), ("question_order", ASCENDING)],
            unique=True,
        )
        logger.info("MongoDB schema ensured")

    async def health_check(self) -> bool:
        """Check if MongoDB connection is healthy."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
            return True
        except Exception:
            return False

    # Collection accessors
    @property
    def users(self):
        """Access the users collection."""
        return self.db["users"]

    @property
    def interviews(self):
        """Access the interviews collection."""
        return self.db["interviews"]

    @property
    def interview_questions(self):
        """Access the interview_questions collection."""
        return self.db["interview_questions"]


# Global client instance
mongodb_client = MongoDBClient()
