"""
Typed error taxonomy for the Mock-Me service.

All errors share ``ResourceError``, which carries the HTTP status and a
stable machine code. Errors are returned inside ``Failure`` values by the
service layer and translated to HTTP responses at the router boundary.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class DatabaseErrorDetails:
    """Structured context attached to persistence errors."""
    error_message: str
    detail: Optional[str] = None
    name: Optional[str] = None
    code: Optional[str] = None
    column: Optional[str] = None
    table: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class ResourceError(Exception):
    """Base class for every error the service reports to clients."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[DatabaseErrorDetails] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details.to_dict()
        return body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ResourceNotFound(ResourceError):
    status_code = 404
    code = "RESOURCE_NOT_FOUND"
    default_message = "The requested resource could not be found"


class UserNotFound(ResourceNotFound):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class InterviewNotFound(ResourceNotFound):
    code = "INTERVIEW_NOT_FOUND"
    default_message = "Interview not found"


class InterviewQuestionNotFound(ResourceNotFound):
    code = "QUESTION_NOT_FOUND"
    default_message = "Interview question not found"


class VoiceInterviewSessionNotFound(ResourceNotFound):
    code = "INTERVIEW_SESSION_NOT_FOUND"
    default_message = "Voice interview session not found"


class TranscriptionError(ResourceError):
    status_code = 500
    code = "TRANSCRIPTION_ERROR"
    default_message = "Audio transcription failed"


class SpeechSynthesisError(ResourceError):
    status_code = 500
    code = "SPEECH_SYNTHESIS_ERROR"
    default_message = "Speech synthesis failed"


class FeedbackGenerationError(ResourceError):
    status_code = 500
    code = "FEEDBACK_GENERATION_ERROR"
    default_message = "Feedback generation failed"


class QuestionGenerationError(ResourceError):
    status_code = 500
    code = "QUESTION_GENERATION_ERROR"
    default_message = "Question generation failed"


class DatabaseQueryError(ResourceError):
    status_code = 500
    code = "DATABASE_QUERY_ERROR"
    default_message = "The database query could not be fulfilled."


class DatabaseNotNullError(DatabaseQueryError):
    status_code = 400
    code = "NOT_NULL_VIOLATION"
    default_message = "A not-null constraint was violated"


class DatabaseForeignKeyError(DatabaseQueryError):
    status_code = 400
    code = "FOREIGN_KEY_VIOLATION"
    default_message = "A foreign key constraint was violated"


class DatabaseDuplicateKeyError(DatabaseQueryError):
    status_code = 409
    code = "DUPLICATE_KEY"
    default_message = "A unique key constraint was violated"


class InvalidToken(ResourceError):
    status_code = 401
    code = "INVALID_TOKEN"
    default_message = "Invalid or missing authentication token"


class InvalidAudioUpload(ResourceError):
    status_code = 400
    code = "INVALID_AUDIO_UPLOAD"
    default_message = "The uploaded audio file is empty or unreadable"
