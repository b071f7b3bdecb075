"""
Persistence gateway over MongoDB.

Wraps Motor collection calls so that every query returns a ``Result``:
low-level driver errors are classified into the typed database errors and
result documents are normalized (``_id`` exposed as string ``id``, ObjectIds
as strings, camelCase keys as snake_case, strings trimmed).
"""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from mock_me.core.database import MongoDBClient, mongodb_client
from mock_me.core.errors import (
    DatabaseDuplicateKeyError,
    DatabaseErrorDetails,
    DatabaseForeignKeyError,
    DatabaseNotNullError,
    DatabaseQueryError,
)
from mock_me.core.result import Result, failure, success

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODES = (11000, 11001)
DOCUMENT_VALIDATION_FAILURE = 121

SortSpec = List[Tuple[str, int]]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Convert an identifier to an ObjectId, or None when it cannot be one."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def camel_to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _normalize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        return normalize_document(value)
    if isinstance(value, list):
        return [_normalize_value(item) for item in value]
    return value


def normalize_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize a raw MongoDB document for consumption by services."""
    normalized: Dict[str, Any] = {}
    for key, value in document.items():
        name = "id" if key == "_id" else camel_to_snake(key)
        normalized[name] = _normalize_value(value)
    return normalized


def _missing_properties(raw: Mapping[str, Any]) -> List[str]:
    rules = (
        raw.get("errInfo", {})
        .get("details", {})
        .get("schemaRulesNotSatisfied", [])
    )
    for rule in rules:
        if rule.get("operatorName") == "required" and rule.get("missingProperties"):
            return list(rule["missingProperties"])
    return []


def classify_error(exc: PyMongoError, table: str) -> DatabaseQueryError:
    """Map a driver error onto the database error taxonomy."""
    code = getattr(exc, "code", None)
    raw = getattr(exc, "details", None) or {}
    details = DatabaseErrorDetails(
        error_message=str(exc),
        detail=raw.get("errmsg"),
        name=type(exc).__name__,
        code=str(code) if code is not None else None,
        table=table,
    )

    if code in DUPLICATE_KEY_CODES:
        key = raw.get("keyValue") or raw.get("keyPattern") or {}
        details.column = next(iter(key), None)
        return DatabaseDuplicateKeyError(details=details)

    if code == DOCUMENT_VALIDATION_FAILURE:
        missing = _missing_properties(raw)
        if missing:
            details.column = missing[0]
            details.detail = f"Missing required field(s): {', '.join(missing)}"
            return DatabaseNotNullError(details=details)

    return DatabaseQueryError(details=details)


class PersistenceGateway:
    """
    Executes queries against MongoDB collections and returns Results.

    Identifiers in filters and documents are expected as ObjectIds;
    use ``to_object_id`` to convert external ids first.
    """

    def __init__(self, db_client: MongoDBClient):
        self._db_client = db_client

    def _collection(self, name: str):
        return self._db_client.db[name]

    def _fail(self, exc: PyMongoError, collection: str, operation: str):
        error = classify_error(exc, collection)
        logger.error(f"Database {operation} on '{collection}' failed: {error.code} {exc}")
        return failure(error)

    async def find_one(
        self,
        collection: str,
        query: Dict[str, Any],
    ) -> Result[Optional[Dict[str, Any]], DatabaseQueryError]:
        """Fetch a single document, ``None`` when nothing matches."""
        try:
            document = await self._collection(collection).find_one(query)
        except PyMongoError as e:
            return self._fail(e, collection, "find_one")
        return success(normalize_document(document) if document is not None else None)

    async def find_many(
        self,
        collection: str,
        query: Dict[str, Any],
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> Result[List[Dict[str, Any]], DatabaseQueryError]:
        try:
            cursor = self._collection(collection).find(query)
            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            return self._fail(e, collection, "find")
        return success([normalize_document(doc) for doc in documents])

    async def insert_one(
        self,
        collection: str,
        document: Dict[str, Any],
        references: Optional[Dict[str, str]] = None,
    ) -> Result[Dict[str, Any], DatabaseQueryError]:
        """
        Insert a document and return it normalized, including its new id.

        ``references`` maps a field of ``document`` to the collection whose
        ``_id`` it must point at. A dangling reference fails with a
        foreign key error before anything is written.
        """
        try:
            for field_name, target in (references or {}).items():
                value = document.get(field_name)
                exists = isinstance(value, ObjectId) and await self._collection(
                    target
                ).count_documents({"_id": value}, limit=1) > 0
                if not exists:
                    error = DatabaseForeignKeyError(
                        details=DatabaseErrorDetails(
                            error_message=f"{field_name} does not reference an existing {target} document",
                            detail=f"Key ({field_name})=({value}) is not present in '{target}'",
                            name="ForeignKeyViolation",
                            column=field_name,
                            table=collection,
                        )
                    )
                    logger.error(f"Database insert on '{collection}' failed: {error.code} {field_name}={value}")
                    return failure(error)

            stored = dict(document)
            inserted = await self._collection(collection).insert_one(stored)
            stored["_id"] = inserted.inserted_id
        except PyMongoError as e:
            return self._fail(e, collection, "insert")
        return success(normalize_document(stored))

    async def update_one(
        self,
        collection: str,
        query: Dict[str, Any],
        set_fields: Dict[str, Any],
    ) -> Result[Optional[Dict[str, Any]], DatabaseQueryError]:
        """Apply ``$set`` to one document; returns the updated document or ``None``."""
        try:
            document = await self._collection(collection).find_one_and_update(
                query,
                {"$set": set_fields},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            return self._fail(e, collection, "update")
        return success(normalize_document(document) if document is not None else None)

    async def delete_one(
        self,
        collection: str,
        query: Dict[str, Any],
    ) -> Result[bool, DatabaseQueryError]:
        try:
            deleted = await self._collection(collection).delete_one(query)
        except PyMongoError as e:
            return self._fail(e, collection, "delete")
        return success(deleted.deleted_count > 0)

    async def delete_many(
        self,
        collection: str,
        query: Dict[str, Any],
    ) -> Result[int, DatabaseQueryError]:
        try:
            deleted = await self._collection(collection).delete_many(query)
        except PyMongoError as e:
            return self._fail(e, collection, "delete")
        return success(deleted.deleted_count)


# Global gateway instance (lazy loaded)
_gateway: Optional[PersistenceGateway] = None


def get_persistence_gateway() -> PersistenceGateway:
    """Get or create the gateway bound to the global MongoDB client."""
    global _gateway
    if _gateway is None:
        _gateway = PersistenceGateway(mongodb_client)
    return _gateway
