"""
채널 풀 테스트
"""
import asyncio
from collections import Counter

import pytest

from submission_service.core.exceptions import ChannelPoolError
from submission_service.infrastructure.messaging.channel_pool import (
    MAX_POOL_SIZE,
    MIN_POOL_SIZE,
    ChannelPool,
)


class TestPoolSize:
    """풀 크기 보정 및 채널 생성"""

    @pytest.mark.parametrize(
        "requested, expected",
        [(1, MIN_POOL_SIZE), (5, 5), (7, 7), (64, 64), (5000, MAX_POOL_SIZE)],
    )
    def test_pool_size_is_clamped(self, fake_connection_cls, requested, expected):
        pool = ChannelPool(fake_connection_cls(), pool_size=requested)
        assert pool.get_pool_size() == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pool_size", [5, 8, 32])
    async def test_open_creates_exactly_pool_size_channels(self, fake_connection_cls, pool_size):
        connection = fake_connection_cls()
        pool = ChannelPool(connection, pool_size=pool_size)

        await pool.open()

        assert pool.get_pool_size() == pool_size
        assert len(connection.channels) == pool_size
        assert len(pool) == pool_size
        assert pool.is_open

    @pytest.mark.asyncio
    async def test_open_passes_publisher_confirms_flag(self, fake_connection_cls):
        connection = fake_connection_cls()
        pool = ChannelPool(connection, publisher_confirms=True)

        await pool.open()

        assert connection.confirm_flags == [True] * 5

    @pytest.mark.asyncio
    async def test_open_twice_is_rejected(self, fake_connection_cls):
        connection = fake_connection_cls()
        pool = ChannelPool(connection)
        await pool.open()

        with pytest.raises(ChannelPoolError):
            await pool.open()
        assert len(connection.channels) == 5

    @pytest.mark.asyncio
    async def test_open_failure_leaves_pool_unusable(self, fake_connection_cls):
        """세 번째 채널 생성 실패 → 이미 만든 채널 정리, 풀은 비어 있음"""
        connection = fake_connection_cls(fail_at=2)
        pool = ChannelPool(connection)

        with pytest.raises(ChannelPoolError) as exc_info:
            await pool.open()

        assert isinstance(exc_info.value.cause, ConnectionError)
        assert not pool.is_open
        assert all(channel.closed for channel in connection.channels)
        with pytest.raises(ChannelPoolError):
            pool.get_channel()


class TestRoundRobin:
    """라운드 로빈 분배"""

    @pytest.mark.asyncio
    async def test_get_channel_cycles_in_order(self, fake_connection_cls):
        connection = fake_connection_cls()
        pool = ChannelPool(connection, pool_size=5)
        await pool.open()

        handed_out = [pool.get_channel() for _ in range(12)]

        assert [c.index for c in handed_out] == [0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0, 1]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("pool_size, calls", [(5, 23), (6, 6), (7, 100), (10, 3)])
    async def test_fairness_and_period(self, fake_connection_cls, pool_size, calls):
        pool = ChannelPool(fake_connection_cls(), pool_size=pool_size)
        await pool.open()

        sequence = [pool.get_channel() for _ in range(calls)]
        counts = Counter(id(channel) for channel in sequence)

        low, high = calls // pool_size, -(-calls // pool_size)
        for channel in pool._channels:
            assert counts.get(id(channel), 0) in (low, high)
        for i in range(pool_size, calls):
            assert sequence[i] is sequence[i - pool_size]

    def test_get_channel_before_open_fails(self, fake_connection_cls):
        pool = ChannelPool(fake_connection_cls())

        with pytest.raises(ChannelPoolError, match="No channels available"):
            pool.get_channel()

    @pytest.mark.asyncio
    async def test_get_channel_never_creates_channels(self, fake_connection_cls):
        connection = fake_connection_cls()
        pool = ChannelPool(connection)
        await pool.open()

        for _ in range(50):
            pool.get_channel()

        assert len(connection.channels) == 5


class TestClose:
    """풀 종료"""

    @pytest.mark.asyncio
    async def test_close_continues_past_failing_channel(self, fake_connection_cls):
        """5개 중 1개가 close에서 예외를 던져도 5번 모두 시도"""
        connection = fake_connection_cls(fail_close=[2])
        pool = ChannelPool(connection, pool_size=5)
        await pool.open()

        await pool.close()

        assert [c.close_calls for c in connection.channels] == [1, 1, 1, 1, 1]
        assert [c.closed for c in connection.channels] == [True, True, False, True, True]
        assert len(pool) == 0
        assert not pool.is_open

    @pytest.mark.asyncio
    async def test_get_channel_after_close_fails(self, fake_connection_cls):
        pool = ChannelPool(fake_connection_cls())
        await pool.open()
        await pool.close()

        with pytest.raises(ChannelPoolError):
            pool.get_channel()
        assert pool.get_pool_size() == 5


class TestExclusiveAcquire:
    """격리 모드 대여/반납"""

    @pytest.mark.asyncio
    async def test_acquired_channels_are_distinct(self, fake_connection_cls):
        pool = ChannelPool(fake_connection_cls())
        await pool.open()

        async with pool.acquire() as first, pool.acquire() as second:
            assert first is not second

    @pytest.mark.asyncio
    async def test_acquire_times_out_when_all_checked_out(self, fake_connection_cls):
        pool = ChannelPool(fake_connection_cls())
        await pool.open()

        leases = [pool.acquire() for _ in range(5)]
        for lease in leases:
            await lease.__aenter__()

        with pytest.raises(ChannelPoolError, match="Timed out"):
            async with pool.acquire(timeout=0.05):
                pass

        for lease in leases:
            await lease.__aexit__(None, None, None)

    @pytest.mark.asyncio
    async def test_waiter_gets_released_channel(self, fake_connection_cls):
        pool = ChannelPool(fake_connection_cls())
        await pool.open()

        leases = [pool.acquire() for _ in range(5)]
        held = [await lease.__aenter__() for lease in leases]

        async def waiter():
            async with pool.acquire(timeout=1.0) as channel:
                return channel

        task = asyncio.create_task(waiter())
        await asyncio.sleep(0)
        assert not task.done()

        await leases[3].__aexit__(None, None, None)
        channel = await asyncio.wait_for(task, 1.0)

        assert channel is held[3]
        for i, lease in enumerate(leases):
            if i != 3:
                await lease.__aexit__(None, None, None)

    @pytest.mark.asyncio
    async def test_acquire_on_closed_pool_fails(self, fake_connection_cls):
        pool = ChannelPool(fake_connection_cls())

        with pytest.raises(ChannelPoolError):
            async with pool.acquire(timeout=0.05):
                pass
