"""
pytest configuration and shared fixtures.
"""
import os
import tempfile

import pytest
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; configure before any mock_me import
os.environ["AUTH_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="mock-me-uploads-")
os.environ["TTS_PROVIDER"] = "piper"
os.environ["STT_PROVIDER"] = "deepgram"
os.environ["LLM_PROVIDER"] = "gemini"
os.environ["LOG_LEVEL"] = "WARNING"

from mock_me.core.result import success  # noqa: E402
from mock_me.core.storage import AudioAssetStore  # noqa: E402
from mock_me.providers.stt import TranscriptionResult  # noqa: E402


USER_ID = "665f1c2e8b3e4a0012345601"
INTERVIEW_ID = "665f1c2e8b3e4a0012345602"


@pytest.fixture
def asset_store(tmp_path):
    """Audio asset store rooted in a temporary directory."""
    store = AudioAssetStore(str(tmp_path / "uploads"))
    store.audio_dir.mkdir(parents=True, exist_ok=True)
    return store


@pytest.fixture
def sample_user():
    return {
        "id": USER_ID,
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
    }


@pytest.fixture
def sample_questions():
    """Stored questions, deliberately out of order."""
    return [
        {"id": "q-2", "interview_id": INTERVIEW_ID, "question": "Describe a hard bug you fixed.", "answer": "", "question_order": 2},
        {"id": "q-1", "interview_id": INTERVIEW_ID, "question": "Tell me about yourself.", "answer": "", "question_order": 1},
        {"id": "q-3", "interview_id": INTERVIEW_ID, "question": "Why do you want this role?", "answer": "", "question_order": 3},
    ]


@pytest.fixture
def mock_user_service(sample_user):
    service = MagicMock()
    service.get_user_by_id = AsyncMock(return_value=success(sample_user))
    return service


@pytest.fixture
def mock_interview_service(sample_questions):
    service = MagicMock()
    service.get_interview_questions = AsyncMock(return_value=success(sample_questions))
    service.update_interview_question_answer = AsyncMock(
        side_effect=lambda question_id, answer: success({"id": question_id, "answer": answer})
    )
    service.generate_and_save_feedback_for_question = AsyncMock(
        return_value=success("- Add a concrete example.")
    )
    return service


@pytest.fixture
def mock_tts():
    tts = MagicMock()
    tts.name = "mock"
    tts.synthesize = AsyncMock(return_value=success("/uploads/audio/audio_1_abc.mp3"))
    return tts


@pytest.fixture
def mock_stt():
    stt = MagicMock()
    stt.name = "mock"
    stt.transcribe = AsyncMock(
        return_value=success(TranscriptionResult(transcript="I build reliable services.", confidence=0.92))
    )
    return stt
