"""
Interview Service.

Creates interviews with generated questions, serves them back, and writes
candidate answers and feedback onto the stored questions.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId

from mock_me.core.errors import (
    DatabaseQueryError,
    InterviewNotFound,
    InterviewQuestionNotFound,
    ResourceError,
)
from mock_me.core.persistence import PersistenceGateway, get_persistence_gateway, to_object_id
from mock_me.core.result import Result, failure, success
from mock_me.models.interview import InterviewCreateRequest
from mock_me.services.feedback_generator import (
    FeedbackContext,
    FeedbackGenerator,
    get_feedback_generator,
)
from mock_me.services.question_generator import QuestionGenerator, get_question_generator

logger = logging.getLogger(__name__)

INTERVIEWS = "interviews"
QUESTIONS = "interview_questions"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InterviewService:
    """
    Service owning interviews and their questions.
    """

    def __init__(
        self,
        gateway: Optional[PersistenceGateway] = None,
        question_generator: Optional[QuestionGenerator] = None,
        feedback_generator: Optional[FeedbackGenerator] = None,
    ):
        self.db = gateway or get_persistence_gateway()
        self._question_generator = question_generator
        self._feedback_generator = feedback_generator

    @property
    def question_generator(self) -> QuestionGenerator:
        if self._question_generator is None:
            self._question_generator = get_question_generator()
        return self._question_generator

    @property
    def feedback_generator(self) -> FeedbackGenerator:
        if self._feedback_generator is None:
            self._feedback_generator = get_feedback_generator()
        return self._feedback_generator

    async def create_interview(
        self,
        request: InterviewCreateRequest,
    ) -> Result[Dict[str, Any], ResourceError]:
        """
        Store a new interview and generate its questions.

        The interview row is removed again if question generation or
        storage fails, so no interview exists without questions.
        """
        focus = list(request.interview_focus)
        inserted = await self.db.insert_one(
            INTERVIEWS,
            {
                "role": request.role.strip(),
                "level": request.level.strip(),
                "tech_stack": [t.strip() for t in request.tech_stack if t.strip()],
                "number_of_questions": request.number_of_questions,
                "company_name": request.company_name.strip(),
                "job_description": request.job_description.strip(),
                "company_website": request.company_website,
                "interview_focus": focus,
                "user_id": to_object_id(request.user_id) or request.user_id,
                "created_at": _now(),
            },
            references={"user_id": "users"},
        )
        if inserted.is_error():
            return inserted
        interview = inserted.value

        generated = await self.question_generator.generate_questions(
            role=interview["role"],
            level=interview["level"],
            company_name=interview["company_name"],
            job_description=interview["job_description"],
            number_of_questions=interview["number_of_questions"],
            tech_stack=interview["tech_stack"],
            interview_focus=focus,
        )
        if generated.is_error():
            await self._discard_interview(interview["id"])
            return generated

        interview_oid = ObjectId(interview["id"])
        questions: List[str] = []
        for order, text in enumerate(generated.value, start=1):
            now = _now()
            stored = await self.db.insert_one(
                QUESTIONS,
                {
                    "interview_id": interview_oid,
                    "question": text,
                    "answer": "",
                    "feedback": None,
                    "question_order": order,
                    "created_at": now,
                    "updated_at": now,
                },
                references={"interview_id": INTERVIEWS},
            )
            if stored.is_error():
                await self._discard_interview(interview["id"])
                return stored
            questions.append(stored.value["question"])

        interview["questions"] = questions
        logger.info(f"Created interview {interview['id']} with {len(questions)} questions")
        return success(interview)

    async def _discard_interview(self, interview_id: str) -> None:
        oid = ObjectId(interview_id)
        removed = await self.db.delete_many(QUESTIONS, {"interview_id": oid})
        if removed.is_error():
            logger.error(f"Could not remove questions of interview {interview_id}")
        deleted = await self.db.delete_one(INTERVIEWS, {"_id": oid})
        if deleted.is_error():
            logger.error(f"Could not remove interview {interview_id}")

    async def get_interview_by_id(
        self,
        interview_id: str,
    ) -> Result[Dict[str, Any], InterviewNotFound]:
        """Fetch an interview together with its ordered question texts."""
        oid = to_object_id(interview_id)
        if oid is None:
            return failure(InterviewNotFound(f"Interview not found: {interview_id}"))

        found = await self.db.find_one(INTERVIEWS, {"_id": oid})
        if found.is_error():
            return found
        if found.value is None:
            return failure(InterviewNotFound(f"Interview not found: {interview_id}"))

        questions = await self.get_interview_questions(interview_id)
        if questions.is_error():
            return questions

        interview = found.value
        interview["questions"] = [q["question"] for q in questions.value]
        return success(interview)

    async def list_interviews(
        self,
        user_id: str,
    ) -> Result[List[Dict[str, Any]], DatabaseQueryError]:
        """Interviews owned by ``user_id``, newest first."""
        oid = to_object_id(user_id)
        if oid is None:
            return success([])
        return await self.db.find_many(INTERVIEWS, {"user_id": oid}, sort=[("created_at", -1)])

    async def get_interview_questions(
        self,
        interview_id: str,
    ) -> Result[List[Dict[str, Any]], DatabaseQueryError]:
        """Questions of an interview sorted by ``question_order``; empty if none."""
        oid = to_object_id(interview_id)
        if oid is None:
            return success([])
        return await self.db.find_many(
            QUESTIONS,
            {"interview_id": oid},
            sort=[("question_order", 1)],
        )

    async def get_interview_question(
        self,
        question_id: str,
    ) -> Result[Dict[str, Any], InterviewQuestionNotFound]:
        oid = to_object_id(question_id)
        if oid is None:
            return failure(InterviewQuestionNotFound(f"Question not found: {question_id}"))

        found = await self.db.find_one(QUESTIONS, {"_id": oid})
        if found.is_error():
            return found
        if found.value is None:
            return failure(InterviewQuestionNotFound(f"Question not found: {question_id}"))
        return success(found.value)

    async def _update_question(
        self,
        question_id: str,
        fields: Dict[str, Any],
    ) -> Result[Dict[str, Any], InterviewQuestionNotFound]:
        oid = to_object_id(question_id)
        if oid is None:
            return failure(InterviewQuestionNotFound(f"Question not found: {question_id}"))

        updated = await self.db.update_one(QUESTIONS, {"_id": oid}, {**fields, "updated_at": _now()})
        if updated.is_error():
            return updated
        if updated.value is None:
            return failure(InterviewQuestionNotFound(f"Question not found: {question_id}"))
        return success(updated.value)

    async def update_interview_question_answer(
        self,
        question_id: str,
        answer: str,
    ) -> Result[Dict[str, Any], InterviewQuestionNotFound]:
        return await self._update_question(question_id, {"answer": answer})

    async def update_interview_question_feedback(
        self,
        question_id: str,
        feedback: str,
    ) -> Result[Dict[str, Any], InterviewQuestionNotFound]:
        return await self._update_question(question_id, {"feedback": feedback})

    async def generate_and_save_feedback_for_question(
        self,
        question_id: str,
        answer: str,
    ) -> Result[str, ResourceError]:
        """
        Generate feedback for an answer and store it on the question.

        Loads the question and its interview to build the feedback context.
        """
        question = await self.get_interview_question(question_id)
        if question.is_error():
            return question

        interview = await self.get_interview_by_id(question.value["interview_id"])
        if interview.is_error():
            return interview

        meta = interview.value
        context = FeedbackContext(
            role=meta["role"],
            level=meta["level"],
            company_name=meta["company_name"],
            job_description=meta["job_description"],
            interview_focus=meta.get("interview_focus") or [],
        )

        feedback = await self.feedback_generator.generate_feedback(
            question.value["question"], answer, context
        )
        if feedback.is_error():
            return feedback

        saved = await self.update_interview_question_feedback(question_id, feedback.value)
        if saved.is_error():
            return saved

        logger.info(f"Saved feedback for question {question_id}")
        return success(feedback.value)


# Global instance (lazy loaded)
_interview_service: Optional[InterviewService] = None


def get_interview_service() -> InterviewService:
    """Get or create the interview service instance."""
    global _interview_service
    if _interview_service is None:
        _interview_service = InterviewService()
    return _interview_service
