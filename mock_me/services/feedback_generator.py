"""
Answer Feedback Generator.

Produces a short critique of a candidate's answer with the configured LLM.
Feedback is best-effort: callers receive a ``Failure`` instead of an
exception and decide whether to surface it.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from mock_me.core.errors import FeedbackGenerationError
from mock_me.core.result import Result, failure, success
from mock_me.providers.llm import (
    BaseLLMProvider,
    GenerationConfig,
    get_llm_provider,
    user_message,
)
from mock_me.services.prompts import FEEDBACK_PROMPT, PERFECT_ANSWER_FEEDBACK

logger = logging.getLogger(__name__)


@dataclass
class FeedbackContext:
    """Interview metadata the feedback prompt is built from."""
    role: str
    level: str
    company_name: str
    job_description: str
    interview_focus: List[str] = field(default_factory=list)


class FeedbackGenerator:
    """
    Service for generating answer feedback using an LLM.
    """

    def __init__(self, llm_provider: Optional[BaseLLMProvider] = None):
        self.llm = llm_provider or get_llm_provider()
        self._generation_config = GenerationConfig(
            max_tokens=400,
            temperature=0.4,
            top_p=0.9,
        )

    def build_prompt(self, question: str, answer: str, context: FeedbackContext) -> str:
        focus_line = ""
        if context.interview_focus:
            focus_line = f"Focus areas: {', '.join(context.interview_focus)}\n"

        return FEEDBACK_PROMPT.format(
            level=context.level,
            role=context.role,
            company_name=context.company_name,
            perfect_answer=PERFECT_ANSWER_FEEDBACK,
            question=question,
            answer=answer,
            job_description=context.job_description,
            focus_line=focus_line,
        )

    async def generate_feedback(
        self,
        question: str,
        answer: str,
        context: FeedbackContext,
    ) -> Result[str, FeedbackGenerationError]:
        """
        Generate feedback for one answer.

        Returns the feedback text, or exactly ``PERFECT_ANSWER_FEEDBACK``
        when the model judges the answer excellent.
        """
        if not answer or not answer.strip():
            return failure(FeedbackGenerationError("Cannot generate feedback for an empty answer"))

        prompt = self.build_prompt(question, answer.strip(), context)
        try:
            response = await self.llm.generate([user_message(prompt)], self._generation_config)
        except Exception as e:
            logger.warning(f"Feedback generation failed: {e}")
            return failure(FeedbackGenerationError(f"Feedback generation failed: {e}"))

        feedback = response.content.strip()
        if not feedback:
            return failure(FeedbackGenerationError("The model returned empty feedback"))

        if feedback.strip('"') == PERFECT_ANSWER_FEEDBACK:
            feedback = PERFECT_ANSWER_FEEDBACK

        return success(feedback)


# Global instance (lazy loaded)
_feedback_generator: Optional[FeedbackGenerator] = None


def get_feedback_generator() -> FeedbackGenerator:
    """Get or create the feedback generator instance."""
    global _feedback_generator
    if _feedback_generator is None:
        _feedback_generator = FeedbackGenerator()
    return _feedback_generator
