"""
발행 어댑터 인터페이스 정의
"""

from abc import ABC, abstractmethod

from submission_service.domain.queue.message import QueueMessage


class MessagePublisher(ABC):
    """메시지 발행 어댑터 인터페이스"""

    @abstractmethod
    async def publish(self, queue_name: str, message: QueueMessage) -> None:
        """
        메시지를 durable 큐에 persistent 모드로 발행

        Args:
            queue_name: 큐 이름 (없으면 durable 큐로 선언)
            message: 발행할 메시지

        Raises:
            BrokerError: 큐 선언, 직렬화, 발행 실패
        """
        pass
