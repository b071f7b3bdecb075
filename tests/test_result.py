"""
Unit tests for the Result type.
"""
import pytest

from mock_me.core.errors import InterviewNotFound, VoiceInterviewSessionNotFound
from mock_me.core.result import Failure, Success, failure, success


class TestResult:
    """Tests for Success and Failure."""

    def test_success_carries_value(self):
        result = success(42)

        assert isinstance(result, Success)
        assert result.is_success()
        assert not result.is_error()
        assert result.value == 42

    def test_failure_carries_error_and_no_value(self):
        error = InterviewNotFound("missing")
        result = failure(error)

        assert isinstance(result, Failure)
        assert result.is_error()
        assert result.error is error
        with pytest.raises(AttributeError):
            result.value

    def test_map_transforms_success_only(self):
        assert success(2).map(lambda v: v * 10).value == 20

        err = failure(InterviewNotFound())
        assert err.map(lambda v: v * 10) is err

    def test_map_error_transforms_failure_only(self):
        wrapped = failure(InterviewNotFound("gone")).map_error(
            lambda e: VoiceInterviewSessionNotFound(f"context: {e.message}")
        )
        assert isinstance(wrapped.error, VoiceInterviewSessionNotFound)
        assert wrapped.error.message == "context: gone"

        ok = success("x")
        assert ok.map_error(lambda e: e) is ok

    def test_results_are_immutable(self):
        result = success(1)
        with pytest.raises(Exception):
            result.value = 2


class TestErrors:
    """Tests for the error taxonomy serialization."""

    def test_to_dict_has_code_and_message(self):
        error = VoiceInterviewSessionNotFound()
        assert error.status_code == 404
        assert error.to_dict() == {
            "code": "INTERVIEW_SESSION_NOT_FOUND",
            "message": "Voice interview session not found",
        }
