"""
제출 서비스
제출 저장 → 큐 발행 → 채점 워커 콜백으로 상태 갱신

[플로우]
1. create_submission: 저장(status=pending) 성공 후에만 발행
2. 채점 워커가 큐에서 메시지 소비 후 실행
3. update_submission_status: 워커 콜백으로 상태/결과 갱신 (전이 테이블 검증)

[발행 실패]
- 기본 모드: 레코드는 pending으로 남고 롤백/재시도 없음 (별도 정합성 점검 대상)
- confirm 모드: 레코드를 failed(INTERNAL_ERROR)로 보정한 뒤 BrokerError
"""
import logging
from typing import List, Optional

from submission_service.core.exceptions import (
    BrokerError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.message import QueueMessage
from submission_service.domain.repositories.submission_repository import SubmissionRepository
from submission_service.domain.submission.models import (
    MAX_ID_LENGTH,
    NewSubmission,
    StatusUpdate,
    Submission,
    SubmissionResult,
    SubmissionStatus,
    SupportedLanguage,
    Verdict,
)
from submission_service.domain.submission.state_machine import (
    ensure_result_consistency,
    ensure_transition,
)

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 200


class SubmissionService:
    """제출 오케스트레이터"""

    def __init__(
        self,
        repository: SubmissionRepository,
        publisher: MessagePublisher,
        queue_name: str,
        confirm_delivery: bool = False,
    ):
        """
        Args:
            repository: 제출 저장소
            publisher: 큐 발행 어댑터
            queue_name: 제출 큐 이름
            confirm_delivery: True면 발행 실패 시 제출을 failed로 보정
        """
        self.repository = repository
        self.publisher = publisher
        self.queue_name = queue_name
        self.confirm_delivery = confirm_delivery

    async def create_submission(self, data: NewSubmission) -> Submission:
        """
        제출 생성 및 큐 발행

        Returns:
            저장된 제출 (status=pending)

        Raises:
            ValidationError: 필수 필드 누락/형식 오류
            StorageError: 저장 실패 (발행하지 않음)
            BrokerError: 발행 실패 (레코드는 이미 저장됨)
        """
        self._validate_new_submission(data)

        try:
            submission = await self.repository.create(data)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to persist submission: {e}", cause=e) from e
        logger.info(
            f"[SubmissionService] 제출 생성 - id: {submission.id}, "
            f"problem_id: {submission.problem_id}, lang: {submission.lang.value}"
        )

        message = QueueMessage.from_submission(submission)
        try:
            await self.publisher.publish(self.queue_name, message)
        except Exception as e:
            error = e if isinstance(e, BrokerError) else BrokerError(
                f"Failed to publish submission {submission.id}: {e}", cause=e
            )
            if self.confirm_delivery:
                await self._mark_delivery_failed(submission, error)
            else:
                logger.error(
                    f"[SubmissionService] 발행 실패, pending 상태로 남음 - id: {submission.id}, error: {e}"
                )
            if error is e:
                raise
            raise error from e

        return submission

    async def get_submission(self, submission_id: str) -> Submission:
        """ID로 제출 조회"""
        submission = await self.repository.find_by_id(submission_id)
        if submission is None:
            raise NotFoundError(f"Submission not found with id: {submission_id}")
        return submission

    async def update_submission_status(
        self,
        submission_id: str,
        update_data: StatusUpdate,
    ) -> Submission:
        """
        채점 워커 콜백: 상태와 결과 갱신

        Raises:
            NotFoundError: 제출 없음
            InvalidTransitionError: 허용되지 않는 전이
            ValidationError: 상태와 result 조합이 맞지 않음
        """
        ensure_result_consistency(update_data.status, update_data.result)

        current = await self.get_submission(submission_id)
        ensure_transition(current.status, update_data.status)

        updated = await self.repository.update_by_id(
            submission_id, update_data, expected_status=current.status
        )
        if updated is None:
            # 조회와 갱신 사이에 삭제되었거나 다른 콜백이 먼저 상태를 바꿈
            latest = await self.repository.find_by_id(submission_id)
            if latest is None:
                raise NotFoundError(f"Submission not found with id: {submission_id}")
            raise InvalidTransitionError(
                f"Submission {submission_id} changed concurrently "
                f"(now '{latest.status.value}'), update to '{update_data.status.value}' rejected"
            )

        logger.info(
            f"[SubmissionService] 상태 갱신 - id: {submission_id}, "
            f"{current.status.value} -> {updated.status.value}"
        )
        return updated

    async def list_submissions(
        self,
        problem_id: Optional[str] = None,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        limit: int = 50,
    ) -> List[Submission]:
        """문제/사용자/상태별 제출 목록 (최신순)"""
        if limit < 1 or limit > MAX_LIST_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
        return await self.repository.find_many(
            problem_id=problem_id,
            user_id=user_id,
            status=status,
            limit=limit,
        )

    @staticmethod
    def _validate_new_submission(data: NewSubmission) -> None:
        if not isinstance(data.problem_id, str) or not data.problem_id.strip():
            raise ValidationError("problemId is required")
        if len(data.problem_id) > MAX_ID_LENGTH:
            raise ValidationError(f"problemId must be at most {MAX_ID_LENGTH} characters")
        if not isinstance(data.code, str) or not data.code.strip():
            raise ValidationError("code is required")
        if not isinstance(data.lang, SupportedLanguage):
            raise ValidationError(f"unsupported language: {data.lang}")
        if data.user_id is not None:
            if not isinstance(data.user_id, str) or not data.user_id.strip():
                raise ValidationError("userId must be a non-empty string")
            if len(data.user_id) > MAX_ID_LENGTH:
                raise ValidationError(f"userId must be at most {MAX_ID_LENGTH} characters")
        # 큐 본문은 UTF-8 JSON: 인코딩할 수 없는 문자(짝 없는 surrogate)는 저장 전에 거부
        try:
            data.code.encode("utf-8")
        except UnicodeEncodeError:
            raise ValidationError("code must be valid UTF-8 text") from None

    async def _mark_delivery_failed(self, submission: Submission, error: BrokerError) -> None:
        update_data = StatusUpdate(
            status=SubmissionStatus.FAILED,
            result=SubmissionResult(
                verdict=Verdict.INTERNAL_ERROR,
                error=f"delivery failed: {error.message}",
            ),
        )
        try:
            updated = await self.repository.update_by_id(
                submission.id, update_data, expected_status=SubmissionStatus.PENDING
            )
        except Exception as e:
            logger.error(
                f"[SubmissionService] 보정 실패, pending 상태로 남음 - id: {submission.id}, error: {e}"
            )
            return
        if updated is None:
            logger.warning(
                f"[SubmissionService] 보정 생략, 이미 삭제되었거나 상태가 바뀜 - id: {submission.id}"
            )
            return
        logger.warning(
            f"[SubmissionService] 발행 확인 실패, failed로 보정 - id: {submission.id}"
        )
