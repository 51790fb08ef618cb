from submission_service.presentation.api.routes.health import router as health_router
from submission_service.presentation.api.routes.submission import router as submission_router

__all__ = ["health_router", "submission_router"]
