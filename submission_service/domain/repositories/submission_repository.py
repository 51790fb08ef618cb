"""
제출 저장소 인터페이스

구현체:
- SqlAlchemySubmissionRepository (PostgreSQL)
- MemorySubmissionRepository (개발/테스트)
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from submission_service.domain.submission.models import (
    NewSubmission,
    StatusUpdate,
    Submission,
    SubmissionStatus,
)


class SubmissionRepository(ABC):
    """제출 데이터 접근 계층"""

    @abstractmethod
    async def create(self, data: NewSubmission) -> Submission:
        """
        status=pending으로 저장하고 ID를 부여

        Raises:
            StorageError: 저장 실패
        """
        pass

    @abstractmethod
    async def find_by_id(self, submission_id: str) -> Optional[Submission]:
        pass

    @abstractmethod
    async def update_by_id(
        self,
        submission_id: str,
        update_data: StatusUpdate,
        expected_status: Optional[SubmissionStatus] = None,
    ) -> Optional[Submission]:
        """
        상태와 결과를 갱신하고 updated_at을 현재 시각으로 변경

        Args:
            submission_id: 제출 ID
            update_data: 새 상태와 결과
            expected_status: 지정하면 현재 상태가 일치할 때만 갱신 (compare-and-set)

        Returns:
            갱신된 레코드, 없거나 expected_status가 다르면 None
        """
        pass

    @abstractmethod
    async def find_many(
        self,
        problem_id: Optional[str] = None,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        limit: int = 50,
    ) -> List[Submission]:
        """조건에 맞는 제출 목록 (최신순)"""
        pass
