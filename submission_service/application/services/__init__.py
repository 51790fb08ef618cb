from submission_service.application.services.submission_service import SubmissionService

__all__ = ["SubmissionService"]
