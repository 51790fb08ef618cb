from submission_service.presentation.schemas.common import ErrorResponse
from submission_service.presentation.schemas.submission import (
    CreateSubmissionRequest,
    SubmissionResponse,
    SubmissionResultSchema,
    UpdateSubmissionStatusRequest,
)

__all__ = [
    "ErrorResponse",
    "CreateSubmissionRequest",
    "SubmissionResponse",
    "SubmissionResultSchema",
    "UpdateSubmissionStatusRequest",
]
