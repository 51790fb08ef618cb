"""
Pytest 설정 및 Fixtures
"""
from typing import List, Optional, Sequence

import pytest

from submission_service.application.services.submission_service import SubmissionService
from submission_service.bootstrap import ServiceContainer
from submission_service.core.config import Settings
from submission_service.domain.queue.adapters.memory import MemoryPublisher
from submission_service.infrastructure.repositories.memory_submission_repository import (
    MemorySubmissionRepository,
)


# 테스트용 환경 변수 설정
@pytest.fixture(autouse=True)
def setup_env(monkeypatch):
    """테스트 환경 변수 설정"""
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("USE_RABBITMQ", "false")
    monkeypatch.setenv("USE_MEMORY_REPOSITORY", "true")
    monkeypatch.delenv("RABBITMQ_URL_OVERRIDE", raising=False)


class FakeExchange:
    """aio-pika default exchange 대역"""

    def __init__(self):
        self.published = []
        self.fail_with: Optional[Exception] = None

    async def publish(self, message, routing_key, timeout=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.published.append((routing_key, message, timeout))


class FakeChannel:
    """aio-pika 채널 대역"""

    def __init__(self, index: int, fail_on_close: bool = False):
        self.index = index
        self.fail_on_close = fail_on_close
        self.declared: List[tuple] = []
        self.default_exchange = FakeExchange()
        self.close_calls = 0
        self.closed = False

    async def declare_queue(self, name, durable=False):
        self.declared.append((name, durable))
        return name

    async def close(self):
        self.close_calls += 1
        if self.fail_on_close:
            raise RuntimeError(f"channel {self.index} close failed")
        self.closed = True


class FakeConnection:
    """aio-pika 연결 대역: channel() 호출마다 FakeChannel 생성"""

    def __init__(self, fail_at: Optional[int] = None, fail_close: Sequence[int] = ()):
        self.fail_at = fail_at
        self.fail_close = set(fail_close)
        self.channels: List[FakeChannel] = []
        self.confirm_flags: List[bool] = []

    async def channel(self, publisher_confirms=False):
        index = len(self.channels)
        if self.fail_at is not None and index == self.fail_at:
            raise ConnectionError("broker refused channel")
        channel = FakeChannel(index, fail_on_close=index in self.fail_close)
        self.channels.append(channel)
        self.confirm_flags.append(publisher_confirms)
        return channel


@pytest.fixture
def fake_connection_cls():
    return FakeConnection


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        USE_RABBITMQ=False,
        USE_MEMORY_REPOSITORY=True,
        SUBMISSION_QUEUE="submission_queue",
    )


@pytest.fixture
def repository() -> MemorySubmissionRepository:
    return MemorySubmissionRepository()


@pytest.fixture
def publisher() -> MemoryPublisher:
    return MemoryPublisher()


@pytest.fixture
def service(repository, publisher) -> SubmissionService:
    return SubmissionService(repository, publisher, queue_name="submission_queue")


@pytest.fixture
def container(test_settings, service, repository, publisher) -> ServiceContainer:
    return ServiceContainer(
        settings=test_settings,
        service=service,
        publisher=publisher,
        repository=repository,
    )
