"""
FastAPI 메인 애플리케이션
Submission Service
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from submission_service.bootstrap import ServiceContainer, build_container
from submission_service.core.config import Settings, get_settings
from submission_service.core.exceptions import SubmissionServiceError
from submission_service.presentation.api.routes import health_router, submission_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _error_body(error_code: str, error_message: str) -> dict:
    return {
        "error": True,
        "error_code": error_code,
        "error_message": error_message,
    }


async def service_error_handler(request: Request, exc: SubmissionServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[{request.method} {request.url.path}] {exc.error_code}: {exc.message}", exc_info=exc)
    else:
        logger.info(f"[{request.method} {request.url.path}] {exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.message),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("VALIDATION_ERROR", "; ".join(messages)),
    )


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    앱 생성

    Args:
        settings: 설정 (없으면 환경 변수에서 로드)
        container: 미리 조립된 컨테이너 (테스트용, 없으면 lifespan에서 조립)
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        애플리케이션 라이프사이클 관리
        - startup: RabbitMQ 연결, 채널 풀 생성, DB 초기화 (실패 시 기동 중단)
        - shutdown: 채널 풀, 연결, DB 종료
        """
        owned: Optional[ServiceContainer] = None
        if getattr(app.state, "container", None) is None:
            logger.info(f"Starting {settings.APP_NAME}...")
            try:
                owned = await build_container(settings)
            except Exception as e:
                logger.error(f"서비스 초기화 실패: {str(e)}")
                raise
            app.state.container = owned
            logger.info(f"서버 시작 완료: http://{settings.API_HOST}:{settings.API_PORT}")

        yield

        if owned is not None:
            logger.info("Shutting down...")
            await owned.shutdown()
            app.state.container = None
            logger.info("서버 종료 완료")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="코드 제출을 저장하고 채점 큐(RabbitMQ)로 전달하는 서비스",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SubmissionServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(health_router, prefix="/api/v1")
    app.include_router(submission_router, prefix="/api/v1")
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level="debug" if settings.DEBUG else "info",
    )
