"""
Models package.
"""
from mock_me.models.interview import (
    InterviewFocus,
    InterviewCreateRequest,
    InterviewResponse,
    InterviewQuestionResponse,
)
from mock_me.models.users import UserCreateRequest, UserResponse
from mock_me.models.voice_interview import (
    QuestionState,
    VoiceInterviewSession,
    StartVoiceInterviewRequest,
    StartVoiceInterviewResponse,
    NextQuestionResponse,
    SubmitAnswerResponse,
    EndVoiceInterviewRequest,
    EndVoiceInterviewResponse,
    InterviewSummary,
)

__all__ = [
    "InterviewFocus",
    "InterviewCreateRequest",
    "InterviewResponse",
    "InterviewQuestionResponse",
    "UserCreateRequest",
    "UserResponse",
    "QuestionState",
    "VoiceInterviewSession",
    "StartVoiceInterviewRequest",
    "StartVoiceInterviewResponse",
    "NextQuestionResponse",
    "SubmitAnswerResponse",
    "EndVoiceInterviewRequest",
    "EndVoiceInterviewResponse",
    "InterviewSummary",
]
