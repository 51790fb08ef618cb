"""
발행 어댑터 팩토리
환경에 따라 적절한 어댑터 생성
"""
from typing import Optional

from submission_service.core.config import Settings
from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.adapters.memory import MemoryPublisher
from submission_service.domain.queue.adapters.rabbitmq import RabbitMQPublisher
from submission_service.infrastructure.messaging.channel_pool import ChannelPool


def create_publisher(settings: Settings, pool: Optional[ChannelPool] = None) -> MessagePublisher:
    """
    환경에 따라 적절한 발행 어댑터 생성

    설정:
    - USE_RABBITMQ=True: RabbitMQ 어댑터 사용 (프로덕션, pool 필수)
    - USE_RABBITMQ=False: 메모리 어댑터 사용 (개발/테스트)
    """
    if not settings.USE_RABBITMQ:
        return MemoryPublisher()
    if pool is None:
        raise ValueError("RabbitMQ publisher requires an open channel pool")
    return RabbitMQPublisher(
        pool,
        confirm_timeout=settings.RABBITMQ_PUBLISH_TIMEOUT if settings.RABBITMQ_PUBLISHER_CONFIRMS else None,
        exclusive=settings.RABBITMQ_EXCLUSIVE_CHANNELS,
        acquire_timeout=settings.RABBITMQ_ACQUIRE_TIMEOUT,
    )
