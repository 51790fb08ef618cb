"""
제출 Repository
PostgreSQL(SQLAlchemy async)에 제출 레코드를 저장하고 조회

[주요 기능]
- 제출 생성 (status=pending, ID 부여)
- ID 조회
- 상태/결과 갱신 (expected_status로 compare-and-set)
- 문제/사용자/상태별 목록 조회
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from submission_service.core.exceptions import StorageError
from submission_service.domain.repositories.submission_repository import SubmissionRepository
from submission_service.domain.submission.models import (
    NewSubmission,
    StatusUpdate,
    Submission,
    SubmissionResult,
    SubmissionStatus,
    SupportedLanguage,
    utcnow,
)
from submission_service.infrastructure.persistence.models.submissions import SubmissionRecord
from submission_service.infrastructure.persistence.session import Database

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite는 tzinfo 없이 돌려줌
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(record: SubmissionRecord) -> Submission:
    return Submission(
        id=record.id,
        problem_id=record.problem_id,
        lang=SupportedLanguage(record.lang),
        code=record.code,
        user_id=record.user_id,
        status=SubmissionStatus(record.status),
        result=SubmissionResult.from_dict(record.result) if record.result else None,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


class SqlAlchemySubmissionRepository(SubmissionRepository):
    """제출 데이터 접근 계층 (PostgreSQL)"""

    def __init__(self, database: Database):
        """
        Args:
            database: 초기화된 Database
        """
        self.database = database

    async def create(self, data: NewSubmission) -> Submission:
        now = utcnow()
        record = SubmissionRecord(
            id=str(uuid.uuid4()),
            problem_id=data.problem_id,
            lang=data.lang.value,
            code=data.code,
            user_id=data.user_id,
            status=SubmissionStatus.PENDING.value,
            result=None,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self.database.session() as session:
                session.add(record)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[SubmissionRepository] 제출 저장 실패: {e}")
            raise StorageError(f"Failed to persist submission: {e}", cause=e) from e
        return _to_domain(record)

    async def find_by_id(self, submission_id: str) -> Optional[Submission]:
        try:
            async with self.database.session() as session:
                record = await session.get(SubmissionRecord, submission_id)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to load submission {submission_id}: {e}", cause=e) from e
        return _to_domain(record) if record else None

    async def update_by_id(
        self,
        submission_id: str,
        update_data: StatusUpdate,
        expected_status: Optional[SubmissionStatus] = None,
    ) -> Optional[Submission]:
        values = {"status": update_data.status.value, "updated_at": utcnow()}
        if update_data.result is not None:
            values["result"] = update_data.result.to_dict()

        stmt = update(SubmissionRecord).where(SubmissionRecord.id == submission_id)
        if expected_status is not None:
            stmt = stmt.where(SubmissionRecord.status == expected_status.value)

        try:
            async with self.database.session() as session:
                result = await session.execute(
                    stmt.values(**values).execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    await session.rollback()
                    return None
                await session.commit()
                record = await session.get(SubmissionRecord, submission_id)
        except SQLAlchemyError as e:
            logger.error(f"[SubmissionRepository] 제출 갱신 실패 - id: {submission_id}, error: {e}")
            raise StorageError(f"Failed to update submission {submission_id}: {e}", cause=e) from e
        return _to_domain(record) if record else None

    async def find_many(
        self,
        problem_id: Optional[str] = None,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        limit: int = 50,
    ) -> List[Submission]:
        query = select(SubmissionRecord)
        if problem_id is not None:
            query = query.where(SubmissionRecord.problem_id == problem_id)
        if user_id is not None:
            query = query.where(SubmissionRecord.user_id == user_id)
        if status is not None:
            query = query.where(SubmissionRecord.status == status.value)
        query = query.order_by(SubmissionRecord.created_at.desc()).limit(limit)

        try:
            async with self.database.session() as session:
                result = await session.execute(query)
                records = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list submissions: {e}", cause=e) from e
        return [_to_domain(record) for record in records]
