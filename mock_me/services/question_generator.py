"""
Interview Question Generator.

Asks the configured LLM for a numbered list of questions tailored to the
role, seniority, company and focus areas of a new interview.
"""
import logging
import re
from typing import List, Optional

from mock_me.core.errors import QuestionGenerationError
from mock_me.core.result import Result, failure, success
from mock_me.providers.llm import (
    BaseLLMProvider,
    GenerationConfig,
    get_llm_provider,
    user_message,
)
from mock_me.services.prompts import QUESTION_GENERATION_PROMPT

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re.compile(r"^\d+[.)]\s*")


def parse_numbered_questions(text: str, limit: int) -> List[str]:
    """Split model output into question texts, dropping numbering and blank lines."""
    questions = []
    for line in text.splitlines():
        question = _NUMBER_PREFIX.sub("", line.strip()).strip()
        if question:
            questions.append(question)
    return questions[:limit]


class QuestionGenerator:
    """
    Service for generating interview questions using an LLM.
    """

    def __init__(self, llm_provider: Optional[BaseLLMProvider] = None):
        self.llm = llm_provider or get_llm_provider()
        self._generation_config = GenerationConfig(
            max_tokens=2048,
            temperature=0.7,  # Some creativity in questions
            top_p=0.9,
        )

    async def generate_questions(
        self,
        role: str,
        level: str,
        company_name: str,
        job_description: str,
        number_of_questions: int,
        tech_stack: Optional[List[str]] = None,
        interview_focus: Optional[List[str]] = None,
    ) -> Result[List[str], QuestionGenerationError]:
        """
        Generate up to ``number_of_questions`` question texts.
        """
        prompt = QUESTION_GENERATION_PROMPT.format(
            level=level,
            role=role,
            company_name=company_name,
            job_description=job_description,
            tech_stack=", ".join(tech_stack) if tech_stack else "not specified",
            focus_areas=", ".join(interview_focus) if interview_focus else "general",
            number_of_questions=number_of_questions,
        )

        try:
            response = await self.llm.generate([user_message(prompt)], self._generation_config)
        except Exception as e:
            logger.error(f"Failed to generate questions: {e}")
            return failure(QuestionGenerationError(f"Question generation failed: {e}"))

        questions = parse_numbered_questions(response.content, number_of_questions)
        if not questions:
            logger.error("Question generation returned no usable questions")
            return failure(QuestionGenerationError("The model returned no questions"))

        if len(questions) < number_of_questions:
            logger.warning(
                f"Requested {number_of_questions} questions, model returned {len(questions)}"
            )

        logger.info(f"Generated {len(questions)} questions for {level} {role}")
        return success(questions)


# Global instance (lazy loaded)
_question_generator: Optional[QuestionGenerator] = None


def get_question_generator() -> QuestionGenerator:
    """Get or create the question generator instance."""
    global _question_generator
    if _question_generator is None:
        _question_generator = QuestionGenerator()
    return _question_generator
