"""
Interview endpoints.

Create interviews (questions are generated on creation), list a user's
interviews and read back questions with answers and feedback.
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status

from mock_me.api.errors import unwrap
from mock_me.models.interview import (
    InterviewCreateRequest,
    InterviewQuestionResponse,
    InterviewResponse,
)
from mock_me.services.interviews import InterviewService, get_interview_service

router = APIRouter()


@router.post("", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
async def create_interview(
    request: InterviewCreateRequest,
    interviews: InterviewService = Depends(get_interview_service),
):
    """
    Create an interview and generate its questions.
    """
    interview = unwrap(await interviews.create_interview(request))
    return InterviewResponse(**interview)


@router.get("", response_model=List[InterviewResponse])
async def list_interviews(
    user_id: str = Query(..., alias="userId", description="Owner of the interviews"),
    interviews: InterviewService = Depends(get_interview_service),
):
    """List a user's interviews, newest first."""
    found = unwrap(await interviews.list_interviews(user_id))
    return [InterviewResponse(**item) for item in found]


@router.get("/{interview_id}/questions", response_model=List[InterviewQuestionResponse])
async def get_interview_questions(
    interview_id: str,
    interviews: InterviewService = Depends(get_interview_service),
):
    """Questions of an interview in presentation order."""
    questions = unwrap(await interviews.get_interview_questions(interview_id))
    return [InterviewQuestionResponse(**q) for q in questions]


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: str,
    interviews: InterviewService = Depends(get_interview_service),
):
    interview = unwrap(await interviews.get_interview_by_id(interview_id))
    return InterviewResponse(**interview)
