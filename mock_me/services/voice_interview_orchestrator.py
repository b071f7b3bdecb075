"""
Voice Interview Orchestrator.

Owns the lifecycle of a voice interview session:

    start -> next_question -> submit_answer -> ... -> end

Each transition returns a ``Result``. Transcription failure aborts an
answer submission before anything is written; feedback generation is
best-effort and never affects the outcome of a submission.
"""
import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Set, Union

from mock_me.core.errors import (
    InterviewNotFound,
    InterviewQuestionNotFound,
    ResourceError,
    VoiceInterviewSessionNotFound,
)
from mock_me.core.result import Result, failure, success
from mock_me.models.voice_interview import (
    EndVoiceInterviewResponse,
    InterviewSummary,
    NextQuestionResponse,
    QuestionState,
    StartVoiceInterviewResponse,
    SubmitAnswerResponse,
    VoiceInterviewSession,
)
from mock_me.providers.stt import BaseTranscriber
from mock_me.providers.tts import BaseTTSProvider
from mock_me.services.interviews import InterviewService
from mock_me.services.prompts import FALLBACK_NAME, FAREWELL_TEMPLATE, GREETING_TEMPLATE
from mock_me.services.session_store import SessionStore, generate_session_id
from mock_me.services.users import UserService

logger = logging.getLogger(__name__)

ANSWER_RECORDED_MESSAGE = "Answer recorded. Ready for next question."
ALL_COMPLETED_MESSAGE = "All questions completed!"


def _session_not_found(session_id: str) -> VoiceInterviewSessionNotFound:
    return VoiceInterviewSessionNotFound(f"Voice interview session not found: {session_id}")


class VoiceInterviewOrchestrator:
    """
    State machine driving voice interview sessions.

    Collaborators are injected so each can be replaced in tests.
    """

    def __init__(
        self,
        session_store: SessionStore,
        user_service: UserService,
        interview_service: InterviewService,
        tts_provider: BaseTTSProvider,
        stt_provider: BaseTranscriber,
        feedback_in_background: bool = True,
    ):
        self.sessions = session_store
        self.users = user_service
        self.interviews = interview_service
        self.tts = tts_provider
        self.stt = stt_provider
        self.feedback_in_background = feedback_in_background
        self._feedback_tasks: Set[asyncio.Task] = set()

    async def start(
        self,
        interview_id: str,
        user_id: str,
    ) -> Result[StartVoiceInterviewResponse, ResourceError]:
        """
        Create a session for an interview and synthesize the greeting.
        """
        user = await self.users.get_user_by_id(user_id)
        if user.is_error():
            return user

        stored = await self.interviews.get_interview_questions(interview_id)
        if stored.is_error():
            return stored
        if not stored.value:
            return failure(InterviewNotFound(f"Interview not found or has no questions: {interview_id}"))

        ordered = sorted(stored.value, key=lambda q: q.get("question_order", 0))
        session = VoiceInterviewSession(
            session_id=generate_session_id(),
            interview_id=interview_id,
            user_id=user_id,
            questions=[
                QuestionState(id=q["id"], question=q["question"], question_order=position)
                for position, q in enumerate(ordered, start=1)
            ],
        )
        self.sessions.create(session)

        first_name = user.value.get("first_name") or FALLBACK_NAME
        greeting = GREETING_TEMPLATE.format(first_name=first_name)
        audio = await self.tts.synthesize(greeting)
        if audio.is_error():
            logger.error(f"Greeting synthesis failed for {session.session_id}: {audio.error.message}")
            self.sessions.delete(session.session_id)
            return audio

        logger.info(
            f"Started voice interview {session.session_id} "
            f"(interview={interview_id}, questions={session.total_questions})"
        )
        return success(StartVoiceInterviewResponse(
            session_id=session.session_id,
            greeting_message=greeting,
            greeting_audio=audio.value,
        ))

    async def next_question(
        self,
        session_id: str,
    ) -> Result[NextQuestionResponse, ResourceError]:
        """
        Synthesize the current question. Does not advance the session.
        """
        session = self.sessions.get(session_id)
        question = session.current_question if session else None
        if question is None:
            return failure(_session_not_found(session_id))

        index = session.current_question_index
        audio = await self.tts.synthesize(question.question)
        if audio.is_error():
            logger.error(f"Question synthesis failed for {session_id}: {audio.error.message}")
            return audio

        return success(NextQuestionResponse(
            question_id=question.id,
            question=question.question,
            question_audio=audio.value,
            question_number=index + 1,
            total_questions=session.total_questions,
            is_last_question=index == session.total_questions - 1,
        ))

    async def submit_answer(
        self,
        session_id: str,
        question_id: str,
        audio_file: Union[str, Path],
    ) -> Result[SubmitAnswerResponse, ResourceError]:
        """
        Transcribe a recorded answer, store it and advance the session.
        """
        if session_id not in self.sessions:
            return failure(_session_not_found(session_id))

        async with self.sessions.lock(session_id):
            session = self.sessions.get(session_id)
            if session is None or session.is_exhausted:
                return failure(_session_not_found(session_id))

            question = session.find_question(question_id)
            if question is None:
                return failure(InterviewQuestionNotFound(
                    f"Question {question_id} is not part of session {session_id}"
                ))

            transcription = await self.stt.transcribe(audio_file)
            if transcription.is_error():
                logger.warning(f"Transcription failed for {session_id}: {transcription.error.message}")
                return transcription
            transcript = transcription.value.transcript

            saved = await self.interviews.update_interview_question_answer(question_id, transcript)
            if saved.is_error():
                return saved

            await self._schedule_feedback(question_id, transcript)

            question.answer = transcript
            question.audio_file = str(audio_file)
            session.current_question_index = min(
                session.current_question_index + 1, session.total_questions
            )
            session.is_completed = session.is_exhausted
            self.sessions.put(session_id, session)

        next_available = not session.is_completed
        logger.info(
            f"Recorded answer for question {question_id} in {session_id} "
            f"({session.current_question_index}/{session.total_questions})"
        )
        return success(SubmitAnswerResponse(
            success=True,
            message=ANSWER_RECORDED_MESSAGE if next_available else ALL_COMPLETED_MESSAGE,
            next_question_available=next_available,
            transcript=transcript,
            confidence=transcription.value.confidence,
        ))

    async def end(
        self,
        session_id: str,
    ) -> Result[EndVoiceInterviewResponse, ResourceError]:
        """
        Synthesize the farewell, remove the session and summarize it.
        """
        if session_id not in self.sessions:
            return failure(_session_not_found(session_id))

        async with self.sessions.lock(session_id):
            session = self.sessions.get(session_id)
            if session is None:
                return failure(_session_not_found(session_id))

            first_name = FALLBACK_NAME
            user = await self.users.get_user_by_id(session.user_id)
            if user.is_success() and user.value.get("first_name"):
                first_name = user.value["first_name"]
            elif user.is_error():
                logger.warning(f"Could not load user {session.user_id} for farewell: {user.error.message}")

            farewell = FAREWELL_TEMPLATE.format(first_name=first_name)
            audio = await self.tts.synthesize(farewell)
            if audio.is_error():
                logger.error(f"Farewell synthesis failed for {session_id}: {audio.error.message}")
                return audio

            elapsed = datetime.now(timezone.utc) - session.started_at
            summary = InterviewSummary(
                total_questions=session.total_questions,
                answered_questions=session.answered_questions,
                duration=f"{int(elapsed.total_seconds() // 60)} minutes",
            )
            self.sessions.delete(session_id)

        logger.info(
            f"Ended voice interview {session_id}: "
            f"{summary.answered_questions}/{summary.total_questions} answered in {summary.duration}"
        )
        return success(EndVoiceInterviewResponse(
            message=farewell,
            farewell_audio=audio.value,
            interview_summary=summary,
        ))

    async def _schedule_feedback(self, question_id: str, answer: str) -> None:
        if not answer.strip():
            logger.debug(f"Skipping feedback for empty answer to question {question_id}")
            return
        if not self.feedback_in_background:
            await self._run_feedback(question_id, answer)
            return
        task = asyncio.create_task(self._run_feedback(question_id, answer))
        self._feedback_tasks.add(task)
        task.add_done_callback(self._feedback_tasks.discard)

    async def _run_feedback(self, question_id: str, answer: str) -> None:
        try:
            result = await self.interviews.generate_and_save_feedback_for_question(question_id, answer)
        except Exception as e:
            logger.warning(f"Feedback for question {question_id} raised: {e}")
            return
        if result.is_error():
            logger.warning(f"Feedback for question {question_id} failed: {result.error.message}")

    @property
    def pending_feedback(self) -> int:
        return len(self._feedback_tasks)

    async def drain_feedback(self) -> None:
        """Wait for outstanding feedback tasks."""
        if self._feedback_tasks:
            await asyncio.gather(*list(self._feedback_tasks), return_exceptions=True)


# Global instance, created at application startup
_voice_orchestrator: Optional[VoiceInterviewOrchestrator] = None


def init_voice_orchestrator(
    session_store: SessionStore,
    user_service: UserService,
    interview_service: InterviewService,
    tts_provider: BaseTTSProvider,
    stt_provider: BaseTranscriber,
    feedback_in_background: bool = True,
) -> VoiceInterviewOrchestrator:
    """Create the global orchestrator."""
    global _voice_orchestrator
    _voice_orchestrator = VoiceInterviewOrchestrator(
        session_store=session_store,
        user_service=user_service,
        interview_service=interview_service,
        tts_provider=tts_provider,
        stt_provider=stt_provider,
        feedback_in_background=feedback_in_background,
    )
    return _voice_orchestrator


def get_voice_orchestrator() -> VoiceInterviewOrchestrator:
    """Get the global orchestrator (FastAPI dependency)."""
    if _voice_orchestrator is None:
        raise RuntimeError("Voice interview orchestrator not initialized. Call init_voice_orchestrator() first.")
    return _voice_orchestrator
