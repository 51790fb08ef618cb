"""
공통 스키마
"""
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """에러 응답"""
    error: bool = Field(True, description="에러 여부")
    error_code: str = Field(..., description="에러 코드")
    error_message: str = Field(..., description="에러 메시지")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str = Field(..., description="OK 또는 UNAVAILABLE")
    timestamp: str = Field(..., description="확인 시각 (ISO 8601)")
    service: str = Field(..., description="서비스 이름")
    broker: str = Field(..., description="브로커 상태 (connected, disconnected, disabled)")
    poolSize: int = Field(0, description="채널 풀 크기")
