"""
RabbitMQ 기반 발행 어댑터 (프로덕션용)
"""
import logging
from typing import Any, Optional

import aio_pika

from submission_service.core.exceptions import BrokerError
from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.message import QueueMessage
from submission_service.infrastructure.messaging.channel_pool import ChannelPool

logger = logging.getLogger(__name__)


class RabbitMQPublisher(MessagePublisher):
    """RabbitMQ 기반 큐 (프로덕션용)"""

    def __init__(
        self,
        pool: ChannelPool,
        confirm_timeout: Optional[float] = None,
        exclusive: bool = False,
        acquire_timeout: Optional[float] = None,
    ):
        """
        Args:
            pool: 채널 풀 (open() 완료 상태)
            confirm_timeout: publisher confirm 대기 시간 (confirm 채널에서만 의미 있음)
            exclusive: True면 채널을 단독 대여해서 발행
            acquire_timeout: 단독 대여 시 빈 채널 대기 시간
        """
        self.pool = pool
        self.confirm_timeout = confirm_timeout
        self.exclusive = exclusive
        self.acquire_timeout = acquire_timeout

    async def publish(self, queue_name: str, message: QueueMessage) -> None:
        """durable 큐 선언 후 persistent 메시지 발행 (재시도 없음)"""
        try:
            body = message.to_bytes()
            if self.exclusive:
                async with self.pool.acquire(self.acquire_timeout) as channel:
                    await self._publish_on(channel, queue_name, body)
            else:
                await self._publish_on(self.pool.get_channel(), queue_name, body)
        except BrokerError:
            raise
        except Exception as e:
            logger.error(f"[Publisher] 발행 실패 - queue: {queue_name}, error: {e}")
            raise BrokerError(f"Failed to publish to {queue_name}: {e}", cause=e) from e

        logger.info(f"[Publisher] Message sent to {queue_name}: {message.to_dict()}")

    async def _publish_on(self, channel: Any, queue_name: str, body: bytes) -> None:
        # 이미 같은 설정으로 존재하면 no-op
        await channel.declare_queue(queue_name, durable=True)
        await channel.default_exchange.publish(
            aio_pika.Message(
                body=body,
                content_type="application/json",
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            ),
            routing_key=queue_name,
            timeout=self.confirm_timeout,
        )
