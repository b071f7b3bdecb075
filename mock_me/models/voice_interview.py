"""
Models for voice interview sessions.

``VoiceInterviewSession`` and ``QuestionState`` are the in-memory session
state owned by the session store; the remaining models are the request and
response bodies of the voice interview API.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import Field

from mock_me.models.common import CamelModel


@dataclass
class QuestionState:
    """Point-in-time copy of an interview question within a session."""
    id: str
    question: str
    question_order: int
    answer: str = ""
    audio_file: Optional[str] = None


@dataclass
class VoiceInterviewSession:
    """Ephemeral state of one candidate's voice interview."""
    session_id: str
    interview_id: str
    user_id: str
    questions: List[QuestionState]
    current_question_index: int = 0
    is_completed: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def is_exhausted(self) -> bool:
        return self.current_question_index >= len(self.questions)

    @property
    def current_question(self) -> Optional[QuestionState]:
        if self.is_exhausted:
            return None
        return self.questions[self.current_question_index]

    def find_question(self, question_id: str) -> Optional[QuestionState]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    @property
    def answered_questions(self) -> int:
        return sum(1 for q in self.questions if q.answer.strip())


# API request/response models

class StartVoiceInterviewRequest(CamelModel):
    interview_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class StartVoiceInterviewResponse(CamelModel):
    session_id: str
    greeting_message: str
    greeting_audio: str


class NextQuestionResponse(CamelModel):
    question_id: str
    question: str
    question_audio: str
    question_number: int = Field(..., description="1-based position of the question")
    total_questions: int
    is_last_question: bool


class SubmitAnswerResponse(CamelModel):
    success: bool
    message: str
    next_question_available: bool
    transcript: str
    confidence: float


class EndVoiceInterviewRequest(CamelModel):
    session_id: str = Field(..., min_length=1)


class InterviewSummary(CamelModel):
    total_questions: int
    answered_questions: int
    duration: str = Field(..., description="Elapsed time, e.g. '12 minutes'")


class EndVoiceInterviewResponse(CamelModel):
    message: str
    farewell_audio: str
    interview_summary: InterviewSummary
