"""
Voice interview endpoints.

Drives a session through start, next-question, submit-answer and end.
Responses use camelCase keys.
"""
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from mock_me.api.errors import unwrap
from mock_me.core.errors import InvalidAudioUpload
from mock_me.core.storage import AudioAssetStore, audio_store
from mock_me.models.voice_interview import (
    EndVoiceInterviewRequest,
    EndVoiceInterviewResponse,
    NextQuestionResponse,
    StartVoiceInterviewRequest,
    StartVoiceInterviewResponse,
    SubmitAnswerResponse,
)
from mock_me.services.voice_interview_orchestrator import (
    VoiceInterviewOrchestrator,
    get_voice_orchestrator,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_AUDIO_SIZE = 25 * 1024 * 1024  # 25 MB


def get_audio_store() -> AudioAssetStore:
    """FastAPI dependency for the audio asset store."""
    return audio_store


@router.post("/start", response_model=StartVoiceInterviewResponse)
async def start_voice_interview(
    request: StartVoiceInterviewRequest,
    orchestrator: VoiceInterviewOrchestrator = Depends(get_voice_orchestrator),
):
    """
    Start a voice interview session and return the spoken greeting.
    """
    return unwrap(await orchestrator.start(request.interview_id, request.user_id))


@router.get("/{session_id}/next-question", response_model=NextQuestionResponse)
async def get_next_question(
    session_id: str,
    orchestrator: VoiceInterviewOrchestrator = Depends(get_voice_orchestrator),
):
    """
    Return the current question with its audio. Does not advance the session.
    """
    return unwrap(await orchestrator.next_question(session_id))


@router.post("/submit-answer", response_model=SubmitAnswerResponse)
async def submit_answer(
    session_id: str = Form(..., alias="sessionId"),
    question_id: str = Form(..., alias="questionId"),
    audio_file: UploadFile = File(..., alias="audioFile", description="Recorded answer"),
    orchestrator: VoiceInterviewOrchestrator = Depends(get_voice_orchestrator),
    store: AudioAssetStore = Depends(get_audio_store),
):
    """
    Store and transcribe a recorded answer, then advance the session.

    The stored recording is removed again if the submission fails.
    """
    content = await audio_file.read()
    if not content:
        raise InvalidAudioUpload("Empty audio file")
    if len(content) > MAX_AUDIO_SIZE:
        raise InvalidAudioUpload(
            f"Audio file too large. Maximum size: {MAX_AUDIO_SIZE // (1024 * 1024)} MB"
        )

    path = await store.save_upload(content, audio_file.filename)

    result = await orchestrator.submit_answer(session_id, question_id, path)
    if result.is_error():
        logger.info(f"Discarding recording {path.name}: {result.error.code}")
        await store.delete(path)
    return unwrap(result)


@router.post("/end", response_model=EndVoiceInterviewResponse)
async def end_voice_interview(
    request: EndVoiceInterviewRequest,
    orchestrator: VoiceInterviewOrchestrator = Depends(get_voice_orchestrator),
):
    """
    End a session: farewell audio plus a summary of the interview.
    """
    return unwrap(await orchestrator.end(request.session_id))
