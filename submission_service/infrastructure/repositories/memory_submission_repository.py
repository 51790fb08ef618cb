"""
메모리 기반 제출 저장소 (개발/테스트용)
"""
import asyncio
import uuid
from typing import Dict, List, Optional

from submission_service.domain.repositories.submission_repository import SubmissionRepository
from submission_service.domain.submission.models import (
    NewSubmission,
    StatusUpdate,
    Submission,
    SubmissionStatus,
    utcnow,
)


class MemorySubmissionRepository(SubmissionRepository):
    """메모리 기반 저장소 (개발/테스트용)"""

    def __init__(self):
        self.records: Dict[str, Submission] = {}
        self.lock = asyncio.Lock()

    async def create(self, data: NewSubmission) -> Submission:
        now = utcnow()
        submission = Submission(
            id=str(uuid.uuid4()),
            problem_id=data.problem_id,
            lang=data.lang,
            code=data.code,
            user_id=data.user_id,
            status=SubmissionStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        async with self.lock:
            self.records[submission.id] = submission
        return submission.copy()

    async def find_by_id(self, submission_id: str) -> Optional[Submission]:
        record = self.records.get(submission_id)
        return record.copy() if record else None

    async def update_by_id(
        self,
        submission_id: str,
        update_data: StatusUpdate,
        expected_status: Optional[SubmissionStatus] = None,
    ) -> Optional[Submission]:
        async with self.lock:
            record = self.records.get(submission_id)
            if record is None:
                return None
            if expected_status is not None and record.status != expected_status:
                return None
            record.status = update_data.status
            if update_data.result is not None:
                record.result = update_data.result
            record.updated_at = utcnow()
            return record.copy()

    async def find_many(
        self,
        problem_id: Optional[str] = None,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        limit: int = 50,
    ) -> List[Submission]:
        matches = [
            record
            for record in self.records.values()
            if (problem_id is None or record.problem_id == problem_id)
            and (user_id is None or record.user_id == user_id)
            and (status is None or record.status == status)
        ]
        matches.sort(key=lambda r: r.created_at, reverse=True)
        return [record.copy() for record in matches[:limit]]
