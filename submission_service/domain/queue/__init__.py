"""
큐 시스템 모듈
채점 워커에게 제출을 전달하는 발행 어댑터
"""
from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.factory import create_publisher
from submission_service.domain.queue.message import QueueMessage

__all__ = [
    "create_publisher",
    "MessagePublisher",
    "QueueMessage",
]
