"""
Tests for the voice interview orchestrator.

Collaborators are mocked; the session store is the real in-memory store.
"""
import asyncio
from datetime import timedelta

import pytest
from unittest.mock import AsyncMock

from mock_me.core.errors import (
    DatabaseQueryError,
    FeedbackGenerationError,
    InterviewNotFound,
    InterviewQuestionNotFound,
    SpeechSynthesisError,
    TranscriptionError,
    UserNotFound,
    VoiceInterviewSessionNotFound,
)
from mock_me.core.result import failure, success
from mock_me.providers.stt import TranscriptionResult
from mock_me.services.session_store import SessionStore
from mock_me.services.voice_interview_orchestrator import (
    ALL_COMPLETED_MESSAGE,
    ANSWER_RECORDED_MESSAGE,
    VoiceInterviewOrchestrator,
)


INTERVIEW_ID = "665f1c2e8b3e4a0012345602"
USER_ID = "665f1c2e8b3e4a0012345601"


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def orchestrator(store, mock_user_service, mock_interview_service, mock_tts, mock_stt):
    return VoiceInterviewOrchestrator(
        session_store=store,
        user_service=mock_user_service,
        interview_service=mock_interview_service,
        tts_provider=mock_tts,
        stt_provider=mock_stt,
        feedback_in_background=False,
    )


async def start_session(orchestrator):
    result = await orchestrator.start(INTERVIEW_ID, USER_ID)
    assert result.is_success()
    return result.value.session_id


class TestStart:
    """Tests for starting a voice interview."""

    @pytest.mark.asyncio
    async def test_start_greets_user_and_orders_questions(self, orchestrator, store, mock_tts):
        result = await orchestrator.start(INTERVIEW_ID, USER_ID)

        assert result.is_success()
        response = result.value
        assert response.greeting_message.startswith("Hello Ada! Welcome to your interview.")
        assert response.greeting_audio == "/uploads/audio/audio_1_abc.mp3"
        mock_tts.synthesize.assert_awaited_once_with(response.greeting_message)

        session = store.get(response.session_id)
        assert [q.id for q in session.questions] == ["q-1", "q-2", "q-3"]
        assert [q.question_order for q in session.questions] == [1, 2, 3]
        assert session.current_question_index == 0
        assert session.is_completed is False

    @pytest.mark.asyncio
    async def test_unknown_user(self, orchestrator, store, mock_user_service):
        mock_user_service.get_user_by_id.return_value = failure(UserNotFound())

        result = await orchestrator.start(INTERVIEW_ID, USER_ID)

        assert isinstance(result.error, UserNotFound)
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_interview_without_questions(self, orchestrator, store, mock_interview_service):
        mock_interview_service.get_interview_questions.return_value = success([])

        result = await orchestrator.start(INTERVIEW_ID, USER_ID)

        assert isinstance(result.error, InterviewNotFound)
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_greeting_failure_discards_session(self, orchestrator, store, mock_tts):
        mock_tts.synthesize.return_value = failure(SpeechSynthesisError("piper down"))

        result = await orchestrator.start(INTERVIEW_ID, USER_ID)

        assert isinstance(result.error, SpeechSynthesisError)
        assert len(store) == 0


class TestNextQuestion:
    """Tests for fetching the current question."""

    @pytest.mark.asyncio
    async def test_does_not_advance(self, orchestrator, store):
        session_id = await start_session(orchestrator)

        first = await orchestrator.next_question(session_id)
        again = await orchestrator.next_question(session_id)

        assert first.value.question_id == "q-1"
        assert first.value.question == "Tell me about yourself."
        assert first.value.question_number == 1
        assert first.value.total_questions == 3
        assert first.value.is_last_question is False
        assert again.value.question_id == "q-1"
        assert store.get(session_id).current_question_index == 0

    @pytest.mark.asyncio
    async def test_unknown_session(self, orchestrator):
        result = await orchestrator.next_question("session_0_missing00")

        assert isinstance(result.error, VoiceInterviewSessionNotFound)

    @pytest.mark.asyncio
    async def test_synthesis_failure(self, orchestrator, mock_tts):
        session_id = await start_session(orchestrator)
        mock_tts.synthesize.return_value = failure(SpeechSynthesisError("quota"))

        result = await orchestrator.next_question(session_id)

        assert isinstance(result.error, SpeechSynthesisError)


class TestSubmitAnswer:
    """Tests for answer submission."""

    @pytest.mark.asyncio
    async def test_records_transcript_and_advances(
        self, orchestrator, store, mock_interview_service, tmp_path
    ):
        session_id = await start_session(orchestrator)
        audio = tmp_path / "answer.webm"

        result = await orchestrator.submit_answer(session_id, "q-1", audio)

        assert result.is_success()
        assert result.value.success is True
        assert result.value.message == ANSWER_RECORDED_MESSAGE
        assert result.value.next_question_available is True
        assert result.value.transcript == "I build reliable services."
        assert result.value.confidence == 0.92

        mock_interview_service.update_interview_question_answer.assert_awaited_once_with(
            "q-1", "I build reliable services."
        )
        mock_interview_service.generate_and_save_feedback_for_question.assert_awaited_once_with(
            "q-1", "I build reliable services."
        )
        session = store.get(session_id)
        assert session.current_question_index == 1
        assert session.questions[0].answer == "I build reliable services."
        assert session.questions[0].audio_file == str(audio)

    @pytest.mark.asyncio
    async def test_transcription_failure_changes_nothing(
        self, orchestrator, store, mock_stt, mock_interview_service
    ):
        session_id = await start_session(orchestrator)
        mock_stt.transcribe.return_value = failure(TranscriptionError("bad audio"))

        result = await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        assert isinstance(result.error, TranscriptionError)
        mock_interview_service.update_interview_question_answer.assert_not_awaited()
        mock_interview_service.generate_and_save_feedback_for_question.assert_not_awaited()
        assert store.get(session_id).current_question_index == 0

    @pytest.mark.asyncio
    async def test_unknown_session_writes_nothing(self, orchestrator, mock_stt, mock_interview_service):
        result = await orchestrator.submit_answer("session_0_missing00", "q-1", "/tmp/a.mp3")

        assert isinstance(result.error, VoiceInterviewSessionNotFound)
        mock_stt.transcribe.assert_not_awaited()
        mock_interview_service.update_interview_question_answer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_question_outside_session(self, orchestrator, store, mock_stt):
        session_id = await start_session(orchestrator)

        result = await orchestrator.submit_answer(session_id, "q-99", "/tmp/a.mp3")

        assert isinstance(result.error, InterviewQuestionNotFound)
        mock_stt.transcribe.assert_not_awaited()
        assert store.get(session_id).current_question_index == 0

    @pytest.mark.asyncio
    async def test_persistence_failure_aborts(self, orchestrator, store, mock_interview_service):
        session_id = await start_session(orchestrator)
        mock_interview_service.update_interview_question_answer.side_effect = None
        mock_interview_service.update_interview_question_answer.return_value = failure(DatabaseQueryError())

        result = await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        assert isinstance(result.error, DatabaseQueryError)
        mock_interview_service.generate_and_save_feedback_for_question.assert_not_awaited()
        assert store.get(session_id).current_question_index == 0

    @pytest.mark.asyncio
    async def test_feedback_failure_does_not_fail_submission(self, orchestrator, mock_interview_service):
        session_id = await start_session(orchestrator)
        mock_interview_service.generate_and_save_feedback_for_question.return_value = failure(
            FeedbackGenerationError("model down")
        )

        result = await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        assert result.is_success()

    @pytest.mark.asyncio
    async def test_feedback_exception_does_not_fail_submission(self, orchestrator, mock_interview_service):
        session_id = await start_session(orchestrator)
        mock_interview_service.generate_and_save_feedback_for_question.side_effect = RuntimeError("boom")

        result = await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        assert result.is_success()

    @pytest.mark.asyncio
    async def test_empty_transcript_skips_feedback(self, orchestrator, store, mock_stt, mock_interview_service):
        session_id = await start_session(orchestrator)
        mock_stt.transcribe.return_value = success(TranscriptionResult(transcript="", confidence=0.0))

        result = await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        assert result.is_success()
        mock_interview_service.generate_and_save_feedback_for_question.assert_not_awaited()
        assert store.get(session_id).current_question_index == 1

    @pytest.mark.asyncio
    async def test_background_feedback_is_drained(
        self, store, mock_user_service, mock_interview_service, mock_tts, mock_stt
    ):
        gate = asyncio.Event()

        async def slow_feedback(question_id, answer):
            await gate.wait()
            return success("- Good.")

        mock_interview_service.generate_and_save_feedback_for_question = AsyncMock(side_effect=slow_feedback)
        orchestrator = VoiceInterviewOrchestrator(
            store, mock_user_service, mock_interview_service, mock_tts, mock_stt,
            feedback_in_background=True,
        )
        session_id = await start_session(orchestrator)

        result = await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        assert result.is_success()
        assert orchestrator.pending_feedback == 1

        gate.set()
        await orchestrator.drain_feedback()

        assert orchestrator.pending_feedback == 0
        mock_interview_service.generate_and_save_feedback_for_question.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_submissions_are_serialized(self, orchestrator, store, mock_stt):
        session_id = await start_session(orchestrator)

        async def slow_transcribe(path):
            await asyncio.sleep(0.01)
            return success(TranscriptionResult(transcript=f"answer for {path}", confidence=0.9))

        mock_stt.transcribe.side_effect = slow_transcribe

        first, second = await asyncio.gather(
            orchestrator.submit_answer(session_id, "q-1", "a1.mp3"),
            orchestrator.submit_answer(session_id, "q-2", "a2.mp3"),
        )

        assert first.is_success() and second.is_success()
        session = store.get(session_id)
        assert session.current_question_index == 2
        assert session.questions[0].answer == "answer for a1.mp3"
        assert session.questions[1].answer == "answer for a2.mp3"


class TestEnd:
    """Tests for ending a voice interview."""

    @pytest.mark.asyncio
    async def test_end_summarizes_and_removes_session(self, orchestrator, store):
        session_id = await start_session(orchestrator)
        await orchestrator.submit_answer(session_id, "q-1", "/tmp/a.mp3")

        session = store.get(session_id)
        session.started_at -= timedelta(minutes=5, seconds=30)
        store.put(session_id, session)

        result = await orchestrator.end(session_id)

        assert result.is_success()
        assert result.value.message.startswith("Thank you Ada!")
        assert result.value.farewell_audio == "/uploads/audio/audio_1_abc.mp3"
        summary = result.value.interview_summary
        assert summary.total_questions == 3
        assert summary.answered_questions == 1
        assert summary.duration == "5 minutes"
        assert session_id not in store

    @pytest.mark.asyncio
    async def test_farewell_uses_fallback_name(self, orchestrator, mock_user_service):
        session_id = await start_session(orchestrator)
        mock_user_service.get_user_by_id.return_value = failure(UserNotFound())

        result = await orchestrator.end(session_id)

        assert result.value.message.startswith("Thank you there!")

    @pytest.mark.asyncio
    async def test_farewell_failure_keeps_session(self, orchestrator, store, mock_tts):
        session_id = await start_session(orchestrator)
        mock_tts.synthesize.return_value = failure(SpeechSynthesisError("down"))

        result = await orchestrator.end(session_id)

        assert isinstance(result.error, SpeechSynthesisError)
        assert session_id in store

    @pytest.mark.asyncio
    async def test_unknown_session(self, orchestrator):
        result = await orchestrator.end("session_0_missing00")

        assert isinstance(result.error, VoiceInterviewSessionNotFound)


class TestFullInterview:

    @pytest.mark.asyncio
    async def test_three_question_walkthrough(self, orchestrator, mock_interview_service):
        session_id = await start_session(orchestrator)
        availability = []

        for expected_id in ["q-1", "q-2", "q-3"]:
            question = await orchestrator.next_question(session_id)
            assert question.value.question_id == expected_id
            assert question.value.is_last_question is (expected_id == "q-3")

            answer = await orchestrator.submit_answer(session_id, expected_id, f"/tmp/{expected_id}.mp3")
            availability.append(answer.value.next_question_available)

        assert availability == [True, True, False]
        assert answer.value.message == ALL_COMPLETED_MESSAGE

        after = await orchestrator.next_question(session_id)
        assert isinstance(after.error, VoiceInterviewSessionNotFound)

        late = await orchestrator.submit_answer(session_id, "q-3", "/tmp/late.mp3")
        assert isinstance(late.error, VoiceInterviewSessionNotFound)

        ended = await orchestrator.end(session_id)
        assert ended.value.interview_summary.total_questions == 3
        assert ended.value.interview_summary.answered_questions == 3

        again = await orchestrator.end(session_id)
        assert isinstance(again.error, VoiceInterviewSessionNotFound)

        assert mock_interview_service.update_interview_question_answer.await_count == 3
