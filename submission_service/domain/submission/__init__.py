from submission_service.domain.submission.models import (
    NewSubmission,
    StatusUpdate,
    Submission,
    SubmissionResult,
    SubmissionStatus,
    SupportedLanguage,
    Verdict,
)

__all__ = [
    "NewSubmission",
    "StatusUpdate",
    "Submission",
    "SubmissionResult",
    "SubmissionStatus",
    "SupportedLanguage",
    "Verdict",
]
