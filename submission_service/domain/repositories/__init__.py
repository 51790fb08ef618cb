from submission_service.domain.repositories.submission_repository import SubmissionRepository

__all__ = ["SubmissionRepository"]
