"""
제출 관련 스키마
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from submission_service.domain.submission.models import (
    MAX_ID_LENGTH,
    NewSubmission,
    StatusUpdate,
    Submission,
    SubmissionResult,
    SubmissionStatus,
    SupportedLanguage,
    Verdict,
)

ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


class CreateSubmissionRequest(BaseModel):
    """제출 생성 요청"""
    model_config = ConfigDict(extra="forbid")

    problemId: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH, pattern=ID_PATTERN, description="문제 ID")
    lang: SupportedLanguage = Field(..., description="언어 (c++, python / 별칭 cpp, python3)")
    code: str = Field(..., min_length=1, description="제출 코드")
    userId: Optional[str] = Field(None, min_length=1, max_length=MAX_ID_LENGTH, pattern=ID_PATTERN, description="사용자 ID")

    @field_validator("lang", mode="before")
    @classmethod
    def normalize_lang(cls, value: Any) -> SupportedLanguage:
        return SupportedLanguage.parse(value)

    def to_domain(self) -> NewSubmission:
        return NewSubmission(
            problem_id=self.problemId,
            lang=self.lang,
            code=self.code,
            user_id=self.userId,
        )


class SubmissionResultSchema(BaseModel):
    """채점 결과"""
    model_config = ConfigDict(extra="forbid")

    verdict: Verdict = Field(..., description="판정 (ACCEPTED, WRONG_ANSWER, ...)")
    score: Optional[float] = Field(None, ge=0, le=100, description="점수")
    executionTime: Optional[float] = Field(None, ge=0, description="실행 시간 (ms)")
    memoryUsed: Optional[float] = Field(None, ge=0, description="메모리 사용량 (KB)")
    testCasesPassed: Optional[int] = Field(None, ge=0, description="통과한 테스트 케이스 수")
    totalTestCases: Optional[int] = Field(None, ge=0, description="전체 테스트 케이스 수")
    error: Optional[str] = Field(None, description="에러 메시지")

    @field_validator("verdict", mode="before")
    @classmethod
    def normalize_verdict(cls, value: Any) -> Verdict:
        return Verdict.parse(value)

    @model_validator(mode="after")
    def check_test_case_counts(self) -> "SubmissionResultSchema":
        if (
            self.testCasesPassed is not None
            and self.totalTestCases is not None
            and self.testCasesPassed > self.totalTestCases
        ):
            raise ValueError("testCasesPassed cannot exceed totalTestCases")
        return self

    def to_domain(self) -> SubmissionResult:
        return SubmissionResult(
            verdict=self.verdict,
            score=self.score,
            execution_time=self.executionTime,
            memory_used=self.memoryUsed,
            test_cases_passed=self.testCasesPassed,
            total_test_cases=self.totalTestCases,
            error=self.error,
        )


class UpdateSubmissionStatusRequest(BaseModel):
    """제출 상태 변경 요청 (채점 워커 콜백)"""
    model_config = ConfigDict(extra="forbid")

    status: SubmissionStatus = Field(..., description="새 상태")
    result: Optional[SubmissionResultSchema] = Field(None, description="채점 결과 (종료 상태에서 필수)")

    def to_domain(self) -> StatusUpdate:
        return StatusUpdate(
            status=self.status,
            result=self.result.to_domain() if self.result else None,
        )


class SubmissionResponse(BaseModel):
    """제출 응답"""
    id: str = Field(..., description="제출 ID")
    problemId: str = Field(..., description="문제 ID")
    lang: str = Field(..., description="언어")
    code: str = Field(..., description="제출 코드")
    userId: Optional[str] = Field(None, description="사용자 ID")
    status: str = Field(..., description="상태")
    result: Optional[Dict[str, Any]] = Field(None, description="채점 결과")
    createdAt: str = Field(..., description="생성 시간 (ISO 8601)")
    updatedAt: str = Field(..., description="수정 시간 (ISO 8601)")

    @classmethod
    def from_domain(cls, submission: Submission) -> "SubmissionResponse":
        return cls(
            id=submission.id,
            problemId=submission.problem_id,
            lang=submission.lang.value,
            code=submission.code,
            userId=submission.user_id,
            status=submission.status.value,
            result=submission.result.to_dict() if submission.result else None,
            createdAt=submission.created_at.isoformat(),
            updatedAt=submission.updated_at.isoformat(),
        )
