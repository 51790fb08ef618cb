"""
발행 어댑터 모듈
"""

from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.adapters.memory import MemoryPublisher
from submission_service.domain.queue.adapters.rabbitmq import RabbitMQPublisher

__all__ = [
    "MessagePublisher",
    "MemoryPublisher",
    "RabbitMQPublisher",
]
