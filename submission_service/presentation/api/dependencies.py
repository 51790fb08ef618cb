"""
FastAPI 의존성 주입
"""
from fastapi import Request

from submission_service.application.services.submission_service import SubmissionService
from submission_service.bootstrap import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_submission_service(request: Request) -> SubmissionService:
    """SubmissionService 의존성 주입"""
    return get_container(request).service
