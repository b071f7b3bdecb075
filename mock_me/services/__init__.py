"""
Services package.
"""
from mock_me.services.interviews import InterviewService, get_interview_service
from mock_me.services.users import UserService, get_user_service
from mock_me.services.session_store import SessionStore, generate_session_id
from mock_me.services.voice_interview_orchestrator import (
    VoiceInterviewOrchestrator,
    get_voice_orchestrator,
    init_voice_orchestrator,
)

__all__ = [
    "InterviewService",
    "get_interview_service",
    "UserService",
    "get_user_service",
    "SessionStore",
    "generate_session_id",
    "VoiceInterviewOrchestrator",
    "get_voice_orchestrator",
    "init_voice_orchestrator",
]
