# DB 모델 모듈

from submission_service.infrastructure.persistence.models.submissions import SubmissionRecord

__all__ = ["SubmissionRecord"]
