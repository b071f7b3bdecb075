"""
Unit tests for the MongoDB persistence gateway.

Motor collections are replaced with mocks; no database is needed.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, OperationFailure, WriteError

from mock_me.core.errors import (
    DatabaseDuplicateKeyError,
    DatabaseForeignKeyError,
    DatabaseNotNullError,
    DatabaseQueryError,
)
from mock_me.core.persistence import (
    PersistenceGateway,
    camel_to_snake,
    normalize_document,
    to_object_id,
)


@pytest.fixture
def collections():
    return {}


@pytest.fixture
def gateway(collections):
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: collections.setdefault(name, MagicMock())
    client = MagicMock()
    client.db = db
    return PersistenceGateway(client)


class TestNormalization:
    """Tests for result document normalization."""

    def test_normalize_document(self):
        oid = ObjectId()
        ref = ObjectId()
        doc = {
            "_id": oid,
            "firstName": "  Ada  ",
            "interviewId": ref,
            "tags": [" python ", ref],
            "meta": {"questionOrder": 2, "noteText": " hi "},
            "count": 3,
        }

        normalized = normalize_document(doc)

        assert normalized == {
            "id": str(oid),
            "first_name": "Ada",
            "interview_id": str(ref),
            "tags": ["python", str(ref)],
            "meta": {"question_order": 2, "note_text": "hi"},
            "count": 3,
        }

    def test_camel_to_snake_leaves_snake_case_alone(self):
        assert camel_to_snake("question_order") == "question_order"
        assert camel_to_snake("createdAt") == "created_at"

    def test_to_object_id(self):
        oid = ObjectId()
        assert to_object_id(str(oid)) == oid
        assert to_object_id(oid) is oid
        assert to_object_id("not-an-id") is None
        assert to_object_id(None) is None


class TestQueries:
    """Tests for successful gateway queries."""

    @pytest.mark.asyncio
    async def test_find_one_returns_normalized_document(self, gateway, collections):
        oid = ObjectId()
        gateway._collection("users").find_one = AsyncMock(
            return_value={"_id": oid, "first_name": "Ada "}
        )

        result = await gateway.find_one("users", {"_id": oid})

        assert result.is_success()
        assert result.value == {"id": str(oid), "first_name": "Ada"}

    @pytest.mark.asyncio
    async def test_find_one_absent_is_success_none(self, gateway):
        gateway._collection("users").find_one = AsyncMock(return_value=None)

        result = await gateway.find_one("users", {"_id": ObjectId()})

        assert result.is_success()
        assert result.value is None

    @pytest.mark.asyncio
    async def test_find_many_applies_sort(self, gateway):
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[
            {"_id": ObjectId(), "question": "Q1", "question_order": 1},
            {"_id": ObjectId(), "question": "Q2", "question_order": 2},
        ])
        collection = gateway._collection("interview_questions")
        collection.find = MagicMock(return_value=cursor)

        result = await gateway.find_many(
            "interview_questions", {"interview_id": ObjectId()}, sort=[("question_order", 1)]
        )

        assert result.is_success()
        assert [d["question"] for d in result.value] == ["Q1", "Q2"]
        cursor.sort.assert_called_once_with([("question_order", 1)])

    @pytest.mark.asyncio
    async def test_insert_one_returns_document_with_id(self, gateway):
        oid = ObjectId()
        gateway._collection("users").insert_one = AsyncMock(return_value=MagicMock(inserted_id=oid))
        document = {"first_name": "Ada", "email": "ada@example.com"}

        result = await gateway.insert_one("users", document)

        assert result.is_success()
        assert result.value["id"] == str(oid)
        assert "_id" not in document

    @pytest.mark.asyncio
    async def test_update_one_no_match_returns_none(self, gateway):
        gateway._collection("interview_questions").find_one_and_update = AsyncMock(return_value=None)

        result = await gateway.update_one("interview_questions", {"_id": ObjectId()}, {"answer": "x"})

        assert result.is_success()
        assert result.value is None

    @pytest.mark.asyncio
    async def test_delete_one_reports_whether_deleted(self, gateway):
        gateway._collection("interviews").delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))

        result = await gateway.delete_one("interviews", {"_id": ObjectId()})

        assert result.value is True


class TestErrorClassification:
    """Tests for mapping driver errors onto the database error taxonomy."""

    @pytest.mark.asyncio
    async def test_duplicate_key(self, gateway):
        gateway._collection("users").insert_one = AsyncMock(side_effect=DuplicateKeyError(
            "E11000 duplicate key error collection: mock_me.users index: email_1",
            code=11000,
            details={"keyValue": {"email": "ada@example.com"}, "errmsg": "E11000 duplicate key"},
        ))

        result = await gateway.insert_one("users", {"email": "ada@example.com"})

        assert result.is_error()
        error = result.error
        assert isinstance(error, DatabaseDuplicateKeyError)
        assert error.status_code == 409
        assert error.details.column == "email"
        assert error.details.table == "users"
        assert error.details.code == "11000"

    @pytest.mark.asyncio
    async def test_missing_required_field_is_not_null_violation(self, gateway):
        gateway._collection("users").insert_one = AsyncMock(side_effect=WriteError(
            "Document failed validation",
            code=121,
            details={
                "errmsg": "Document failed validation",
                "errInfo": {
                    "details": {
                        "schemaRulesNotSatisfied": [
                            {
                                "operatorName": "required",
                                "specifiedAs": {"required": ["first_name", "last_name", "email"]},
                                "missingProperties": ["email"],
                            }
                        ]
                    }
                },
            },
        ))

        result = await gateway.insert_one("users", {"first_name": "Ada", "last_name": "L"})

        assert isinstance(result.error, DatabaseNotNullError)
        assert result.error.status_code == 400
        assert result.error.details.column == "email"
        assert result.error.message == "A not-null constraint was violated"

    @pytest.mark.asyncio
    async def test_dangling_reference_is_foreign_key_violation(self, gateway):
        gateway._collection("users").count_documents = AsyncMock(return_value=0)
        insert = gateway._collection("interviews").insert_one = AsyncMock()

        result = await gateway.insert_one(
            "interviews", {"user_id": ObjectId(), "role": "Engineer"}, references={"user_id": "users"}
        )

        assert isinstance(result.error, DatabaseForeignKeyError)
        assert result.error.details.column == "user_id"
        insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_reference_is_foreign_key_violation(self, gateway):
        count = gateway._collection("users").count_documents = AsyncMock(return_value=1)

        result = await gateway.insert_one(
            "interviews", {"user_id": "nope"}, references={"user_id": "users"}
        )

        assert isinstance(result.error, DatabaseForeignKeyError)
        count.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_errors_are_generic_query_errors(self, gateway):
        gateway._collection("interviews").find_one = AsyncMock(
            side_effect=OperationFailure("unknown operator: $bogus", code=2)
        )

        result = await gateway.find_one("interviews", {"$bogus": 1})

        assert type(result.error) is DatabaseQueryError
        assert result.error.status_code == 500
        assert result.error.to_dict()["details"]["table"] == "interviews"
