"""
제출 테이블 모델
submissions
"""
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from submission_service.domain.submission.models import MAX_ID_LENGTH, utcnow
from submission_service.infrastructure.persistence.session import Base


class SubmissionRecord(Base):
    """제출 테이블"""
    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    problem_id: Mapped[str] = mapped_column(String(MAX_ID_LENGTH), nullable=False)
    lang: Mapped[str] = mapped_column(String(32), nullable=False)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[Optional[str]] = mapped_column(String(MAX_ID_LENGTH), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    result: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    __table_args__ = (
        Index("ix_submissions_problem_id", "problem_id"),
        Index("ix_submissions_user_id", "user_id"),
        Index("ix_submissions_status", "status"),
        Index("ix_submissions_created_at", "created_at"),
    )
