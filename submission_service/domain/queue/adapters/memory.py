"""
메모리 기반 발행 어댑터 (개발/테스트용)
"""

import asyncio
import logging
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional, Set

from submission_service.domain.queue.adapters.base import MessagePublisher
from submission_service.domain.queue.message import QueueMessage

logger = logging.getLogger(__name__)


class MemoryPublisher(MessagePublisher):
    """메모리 기반 큐 (개발/테스트용)"""

    def __init__(self):
        self.queues: Dict[str, Deque[bytes]] = defaultdict(deque)
        self.declared: Set[str] = set()
        self.publish_count = 0
        self.lock = asyncio.Lock()

    async def publish(self, queue_name: str, message: QueueMessage) -> None:
        """큐에 메시지 추가"""
        async with self.lock:
            self.declared.add(queue_name)
            self.queues[queue_name].append(message.to_bytes())
            self.publish_count += 1
        logger.info(f"[Publisher] Message sent to {queue_name}: {message.to_dict()}")

    async def consume(self, queue_name: str) -> Optional[QueueMessage]:
        """큐에서 메시지 하나 꺼내기 (FIFO)"""
        async with self.lock:
            queue = self.queues.get(queue_name)
            if queue:
                return QueueMessage.from_bytes(queue.popleft())
        return None

    def messages(self, queue_name: str) -> List[QueueMessage]:
        """큐에 쌓인 메시지 조회 (소비하지 않음)"""
        return [QueueMessage.from_bytes(body) for body in self.queues.get(queue_name, ())]
