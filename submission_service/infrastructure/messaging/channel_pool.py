"""
RabbitMQ 채널 풀

하나의 연결 위에 고정 개수의 채널을 미리 열어두고 라운드 로빈으로 나눠줍니다.

[특징]
- 채널은 "대여"가 아니라 "공유": get_channel()은 반납 절차가 없음
- get_channel()에는 await가 없으므로 이벤트 루프 안에서 커서 증가가 원자적
- 채널 목록은 open()에서 한 번만 채워지고 이후에는 읽기 전용
- 채널 상태(stale 여부)는 검사하지 않음

[격리 모드]
- acquire(): 사용 중인 채널을 다른 호출자가 받지 않도록 인덱스 free-list로 대여/반납
- 모든 채널이 대여 중이면 timeout까지 대기
"""
import asyncio
import logging
from collections import deque
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Deque, List, Optional

from submission_service.core.exceptions import ChannelPoolError

logger = logging.getLogger(__name__)

MIN_POOL_SIZE = 5
MAX_POOL_SIZE = 1000


class ChannelPool:
    """라운드 로빈 채널 풀"""

    def __init__(
        self,
        connection: Any,
        pool_size: int = MIN_POOL_SIZE,
        publisher_confirms: bool = False,
    ):
        """
        Args:
            connection: 이미 연결된 aio-pika 연결 (풀이 단독으로 사용)
            pool_size: 채널 개수 ([MIN_POOL_SIZE, MAX_POOL_SIZE]로 보정)
            publisher_confirms: 채널의 publisher confirm 사용 여부
        """
        self._connection = connection
        self._pool_size = min(max(pool_size, MIN_POOL_SIZE), MAX_POOL_SIZE)
        self._publisher_confirms = publisher_confirms
        self._channels: List[Any] = []
        self._cursor = 0
        self._free: Deque[int] = deque()
        self._available = asyncio.Condition()

    async def open(self) -> None:
        """
        pool_size 개의 채널을 순차적으로 생성

        하나라도 실패하면 이미 만든 채널을 정리하고 ChannelPoolError.
        호출자는 이 실패를 기동 실패로 취급해야 합니다.
        """
        if self._channels:
            raise ChannelPoolError("Channel pool is already open")

        channels: List[Any] = []
        try:
            for _ in range(self._pool_size):
                channel = await self._connection.channel(
                    publisher_confirms=self._publisher_confirms
                )
                channels.append(channel)
        except Exception as e:
            logger.error(f"[ChannelPool] 채널 생성 실패 ({len(channels)}/{self._pool_size}): {e}")
            await self._close_channels(channels)
            raise ChannelPoolError(f"Failed to initialize channel pool: {e}", cause=e) from e

        self._channels = channels
        self._cursor = 0
        self._free = deque(range(len(channels)))
        logger.info(f"[ChannelPool] 채널 풀 생성 완료 - pool_size: {self._pool_size}")

    def get_channel(self) -> Any:
        """현재 커서의 채널을 반환하고 커서를 한 칸 이동"""
        if not self._channels:
            raise ChannelPoolError("No channels available in the pool.")
        channel = self._channels[self._cursor]
        self._cursor = (self._cursor + 1) % self._pool_size
        return channel

    @asynccontextmanager
    async def acquire(self, timeout: Optional[float] = None) -> AsyncIterator[Any]:
        """
        채널을 단독으로 대여 (격리 모드)

        Args:
            timeout: 빈 채널을 기다릴 최대 시간 (초, None이면 무제한)

        Raises:
            ChannelPoolError: 풀이 닫혀 있거나 timeout 초과
        """
        index = await self._checkout(timeout)
        try:
            yield self._channels[index]
        finally:
            await self._checkin(index)

    async def close(self) -> None:
        """모든 채널 종료 (개별 실패는 로그만 남기고 계속 진행)"""
        channels, self._channels = self._channels, []
        self._cursor = 0
        self._free.clear()
        await self._close_channels(channels)
        async with self._available:
            self._available.notify_all()
        logger.info(f"[ChannelPool] 채널 풀 종료 - closed: {len(channels)}")

    def get_pool_size(self) -> int:
        return self._pool_size

    @property
    def is_open(self) -> bool:
        return bool(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    async def _checkout(self, timeout: Optional[float]) -> int:
        async with self._available:
            if not self._channels:
                raise ChannelPoolError("No channels available in the pool.")
            try:
                await asyncio.wait_for(
                    self._available.wait_for(lambda: bool(self._free) or not self._channels),
                    timeout,
                )
            except asyncio.TimeoutError:
                raise ChannelPoolError(
                    f"Timed out after {timeout}s waiting for a free channel"
                ) from None
            if not self._channels:
                raise ChannelPoolError("Channel pool was closed while waiting")
            return self._free.popleft()

    async def _checkin(self, index: int) -> None:
        async with self._available:
            # close() 이후 반납은 무시
            if self._channels and index not in self._free:
                self._free.append(index)
                self._available.notify()

    @staticmethod
    async def _close_channels(channels: List[Any]) -> None:
        for channel in channels:
            try:
                await channel.close()
            except Exception as e:
                logger.error(f"[ChannelPool] 채널 종료 오류: {e}")
