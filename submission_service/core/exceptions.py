"""
서비스 예외 정의

모든 예외는 error_code(고정 문자열)와 status_code(HTTP 상태)를 가지며,
presentation 계층의 예외 핸들러가 공통 에러 응답으로 변환합니다.
"""
from typing import Optional


class SubmissionServiceError(Exception):
    """서비스 예외 기본 클래스"""

    error_code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(SubmissionServiceError):
    """입력 필드 누락 또는 형식 오류"""

    error_code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(SubmissionServiceError):
    """존재하지 않는 제출 ID"""

    error_code = "NOT_FOUND"
    status_code = 404


class InvalidTransitionError(SubmissionServiceError):
    """허용되지 않는 상태 전이 (예: completed -> pending)"""

    error_code = "INVALID_STATUS_TRANSITION"
    status_code = 409


class BrokerError(SubmissionServiceError):
    """채널 생성, 큐 선언, 발행 실패"""

    error_code = "BROKER_ERROR"
    status_code = 500


class ChannelPoolError(BrokerError):
    """풀에 사용 가능한 채널이 없음"""

    error_code = "NO_CHANNELS_AVAILABLE"


class StorageError(SubmissionServiceError):
    """저장소 오류"""

    error_code = "STORAGE_ERROR"
    status_code = 500
