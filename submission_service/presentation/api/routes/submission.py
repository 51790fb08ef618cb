"""
제출 API 라우터

서비스 예외(NotFoundError 등)는 main.py의 예외 핸들러가 공통 에러 응답으로 변환합니다.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from submission_service.application.services.submission_service import SubmissionService
from submission_service.domain.submission.models import SubmissionStatus
from submission_service.presentation.api.dependencies import get_submission_service
from submission_service.presentation.schemas.common import ErrorResponse
from submission_service.presentation.schemas.submission import (
    CreateSubmissionRequest,
    SubmissionResponse,
    UpdateSubmissionStatusRequest,
)

router = APIRouter(prefix="/submissions", tags=["Submission"])


@router.post(
    "",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="코드 제출",
    description="""
    제출을 저장하고 채점 큐에 발행합니다.

    **처리 과정:**
    1. 제출 저장 (status=pending)
    2. 제출 큐에 메시지 발행
    3. 저장된 제출 반환

    **참고:**
    - 발행에 실패하면 500을 반환하지만 제출 레코드는 pending으로 남습니다.
    """
)
async def create_submission(
    request: CreateSubmissionRequest,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    submission = await service.create_submission(request.to_domain())
    return SubmissionResponse.from_domain(submission)


@router.get(
    "",
    response_model=List[SubmissionResponse],
    summary="제출 목록 조회",
)
async def list_submissions(
    problemId: Optional[str] = Query(None, description="문제 ID"),
    userId: Optional[str] = Query(None, description="사용자 ID"),
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status", description="상태"),
    limit: int = Query(50, ge=1, le=200, description="최대 개수"),
    service: SubmissionService = Depends(get_submission_service),
) -> List[SubmissionResponse]:
    submissions = await service.list_submissions(
        problem_id=problemId,
        user_id=userId,
        status=status_filter,
        limit=limit,
    )
    return [SubmissionResponse.from_domain(s) for s in submissions]


@router.get(
    "/{submission_id}",
    response_model=SubmissionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="제출 조회",
)
async def get_submission(
    submission_id: str,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    submission = await service.get_submission(submission_id)
    return SubmissionResponse.from_domain(submission)


@router.patch(
    "/{submission_id}",
    response_model=SubmissionResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="제출 상태 변경 (채점 워커 콜백)",
)
async def update_submission_status(
    submission_id: str,
    request: UpdateSubmissionStatusRequest,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionResponse:
    submission = await service.update_submission_status(submission_id, request.to_domain())
    return SubmissionResponse.from_domain(submission)
