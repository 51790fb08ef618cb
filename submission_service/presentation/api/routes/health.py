"""
헬스 체크 API
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from submission_service.bootstrap import ServiceContainer
from submission_service.presentation.api.dependencies import get_container
from submission_service.presentation.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="서비스 상태 확인")
async def health_check(
    response: Response,
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """브로커 연결이 끊겼으면 503"""
    if container.broker is None:
        broker_state = "disabled"
    elif container.broker_healthy:
        broker_state = "connected"
    else:
        broker_state = "disconnected"

    healthy = broker_state != "disconnected"
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="OK" if healthy else "UNAVAILABLE",
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=container.settings.APP_NAME,
        broker=broker_state,
        poolSize=container.pool.get_pool_size() if container.pool else 0,
    )
