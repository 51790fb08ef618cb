"""
구성 루트 (Composition Root)

프로세스 시작 시 연결 → 채널 풀 → DB → 저장소/발행기 → 서비스 순서로 조립합니다.
모듈 수준 전역 서비스 인스턴스는 두지 않습니다.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from submission_service.application.services.submission_service import SubmissionService
from submission_service.core.config import Settings
from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.factory import create_publisher
from submission_service.domain.repositories.submission_repository import SubmissionRepository
from submission_service.infrastructure.messaging.channel_pool import ChannelPool
from submission_service.infrastructure.messaging.connection import BrokerConnection
from submission_service.infrastructure.persistence.session import Database
from submission_service.infrastructure.repositories import (
    MemorySubmissionRepository,
    SqlAlchemySubmissionRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """조립된 서비스와 그 자원들"""

    settings: Settings
    service: SubmissionService
    publisher: MessagePublisher
    repository: SubmissionRepository
    broker: Optional[BrokerConnection] = None
    pool: Optional[ChannelPool] = None
    database: Optional[Database] = None

    @property
    def broker_healthy(self) -> bool:
        if self.broker is None:
            return True
        return self.broker.is_healthy and self.pool is not None and self.pool.is_open

    async def shutdown(self) -> None:
        """풀 → 연결 → DB 순서로 종료"""
        if self.pool is not None:
            await self.pool.close()
        if self.broker is not None:
            await self.broker.close()
        if self.database is not None:
            await self.database.close()


async def build_container(settings: Settings) -> ServiceContainer:
    """
    서비스 조립

    채널 풀 생성 실패는 기동 실패로 처리: 연결을 닫고 예외를 그대로 올립니다.
    """
    broker: Optional[BrokerConnection] = None
    pool: Optional[ChannelPool] = None
    database: Optional[Database] = None

    if settings.USE_RABBITMQ:
        broker = BrokerConnection(settings.RABBITMQ_URL)
        connection = await broker.connect()
        pool = ChannelPool(
            connection,
            pool_size=settings.RABBITMQ_POOL_SIZE,
            publisher_confirms=settings.RABBITMQ_PUBLISHER_CONFIRMS,
        )
        try:
            await pool.open()
        except Exception:
            await broker.close()
            raise
        logger.info(f"RabbitMQ 채널 풀 생성 완료 - pool_size: {pool.get_pool_size()}")
    else:
        logger.info("RabbitMQ 비활성화 (USE_RABBITMQ=false), 메모리 발행기 사용")

    try:
        if settings.USE_MEMORY_REPOSITORY:
            repository: SubmissionRepository = MemorySubmissionRepository()
        else:
            database = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
            await database.init()
            repository = SqlAlchemySubmissionRepository(database)
    except Exception:
        if pool is not None:
            await pool.close()
        if broker is not None:
            await broker.close()
        raise

    publisher = create_publisher(settings, pool)
    service = SubmissionService(
        repository,
        publisher,
        queue_name=settings.SUBMISSION_QUEUE,
        confirm_delivery=settings.USE_RABBITMQ and settings.RABBITMQ_PUBLISHER_CONFIRMS,
    )
    return ServiceContainer(
        settings=settings,
        service=service,
        publisher=publisher,
        repository=repository,
        broker=broker,
        pool=pool,
        database=database,
    )
