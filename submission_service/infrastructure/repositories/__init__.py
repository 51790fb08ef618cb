from submission_service.infrastructure.repositories.memory_submission_repository import (
    MemorySubmissionRepository,
)
from submission_service.infrastructure.repositories.submission_repository import (
    SqlAlchemySubmissionRepository,
)

__all__ = ["MemorySubmissionRepository", "SqlAlchemySubmissionRepository"]
