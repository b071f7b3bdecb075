"""
Pydantic models for interviews and their questions.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from mock_me.models.common import CamelModel


class InterviewFocus(str, Enum):
    """Areas an interview can concentrate on."""
    BEHAVIORAL = "Behavioral"
    SITUATIONAL = "Situational"
    EXPERIENCE_BASED = "Experience-Based"
    TECHNICAL = "Technical"
    PROBLEM_SOLVING = "Problem-Solving"
    LEADERSHIP = "Leadership"
    CULTURAL_FIT = "Cultural-Fit"


class InterviewCreateRequest(CamelModel):
    """Request to create an interview and generate its questions."""
    role: str = Field(..., min_length=1, description="Job title, e.g. 'Backend Engineer'")
    level: str = Field(..., min_length=1, description="Seniority, e.g. 'Senior'")
    tech_stack: List[str] = Field(default_factory=list)
    number_of_questions: int = Field(..., ge=1, le=20)
    company_name: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)
    company_website: Optional[str] = None
    interview_focus: List[InterviewFocus] = Field(default_factory=list)
    user_id: str = Field(..., description="Owner of the interview")


class InterviewResponse(CamelModel):
    """Interview as returned by the API."""
    id: str
    role: str
    level: str
    tech_stack: List[str] = Field(default_factory=list)
    number_of_questions: int
    company_name: str
    job_description: str
    company_website: Optional[str] = None
    interview_focus: List[str] = Field(default_factory=list)
    user_id: str
    created_at: Optional[datetime] = None
    questions: List[str] = Field(default_factory=list)


class InterviewQuestionResponse(CamelModel):
    """A stored interview question with the candidate's answer and feedback."""
    id: str
    interview_id: str
    question: str
    answer: str = ""
    feedback: Optional[str] = None
    question_order: int
