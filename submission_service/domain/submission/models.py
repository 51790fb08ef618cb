"""
제출(Submission) 도메인 모델
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionStatus(str, Enum):
    """제출 상태 (pending -> processing -> completed | failed)"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({SubmissionStatus.COMPLETED, SubmissionStatus.FAILED})

# problem_id, user_id 컬럼 길이
MAX_ID_LENGTH = 255


class SupportedLanguage(str, Enum):
    """채점 워커가 실행할 수 있는 언어"""

    CPP = "c++"
    PYTHON = "python"

    @classmethod
    def parse(cls, value: Any) -> "SupportedLanguage":
        """별칭(cpp, python3)을 포함해 언어 값을 정규화"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"unsupported language: {value!r}")
        normalized = value.strip().lower()
        normalized = _LANGUAGE_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"unsupported language: {value}") from None


_LANGUAGE_ALIASES = {
    "cpp": "c++",
    "python3": "python",
    "py": "python",
}


class Verdict(str, Enum):
    """채점 결과 판정 (대문자 표기가 표준)"""

    ACCEPTED = "ACCEPTED"
    WRONG_ANSWER = "WRONG_ANSWER"
    TIME_LIMIT_EXCEEDED = "TIME_LIMIT_EXCEEDED"
    MEMORY_LIMIT_EXCEEDED = "MEMORY_LIMIT_EXCEEDED"
    RUNTIME_ERROR = "RUNTIME_ERROR"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @classmethod
    def parse(cls, value: Any) -> "Verdict":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"invalid verdict: {value!r}")
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"invalid verdict: {value}") from None


@dataclass
class SubmissionResult:
    """채점 결과"""

    verdict: Verdict
    score: Optional[float] = None
    execution_time: Optional[float] = None  # ms
    memory_used: Optional[float] = None  # KB
    test_cases_passed: Optional[int] = None
    total_test_cases: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase 직렬화 (None 필드 제외)"""
        data = {
            "verdict": self.verdict.value,
            "score": self.score,
            "executionTime": self.execution_time,
            "memoryUsed": self.memory_used,
            "testCasesPassed": self.test_cases_passed,
            "totalTestCases": self.total_test_cases,
            "error": self.error,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubmissionResult":
        return cls(
            verdict=Verdict.parse(data["verdict"]),
            score=data.get("score"),
            execution_time=data.get("executionTime"),
            memory_used=data.get("memoryUsed"),
            test_cases_passed=data.get("testCasesPassed"),
            total_test_cases=data.get("totalTestCases"),
            error=data.get("error"),
        )


@dataclass
class NewSubmission:
    """생성 요청 (아직 저장되지 않은 제출)"""

    problem_id: str
    lang: SupportedLanguage
    code: str
    user_id: Optional[str] = None


@dataclass
class Submission:
    """저장된 제출 레코드"""

    id: str
    problem_id: str
    lang: SupportedLanguage
    code: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    user_id: Optional[str] = None
    result: Optional[SubmissionResult] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def copy(self) -> "Submission":
        return replace(self, result=replace(self.result) if self.result else None)


@dataclass
class StatusUpdate:
    """채점 워커가 보내는 상태 변경"""

    status: SubmissionStatus
    result: Optional[SubmissionResult] = None
