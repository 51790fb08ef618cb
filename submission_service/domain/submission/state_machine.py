"""
제출 상태 머신

pending -> processing -> completed | failed
종료 상태(completed, failed)에서는 어떤 전이도 허용하지 않습니다.
"""
from typing import Dict, FrozenSet, Optional

from submission_service.core.exceptions import InvalidTransitionError, ValidationError
from submission_service.domain.submission.models import SubmissionResult, SubmissionStatus

S = SubmissionStatus

# processing -> processing: 메시지 재전달(at-least-once) 시 워커 콜백이 중복될 수 있음
ALLOWED_TRANSITIONS: Dict[SubmissionStatus, FrozenSet[SubmissionStatus]] = {
    S.PENDING: frozenset({S.PROCESSING, S.COMPLETED, S.FAILED}),
    S.PROCESSING: frozenset({S.PROCESSING, S.COMPLETED, S.FAILED}),
    S.COMPLETED: frozenset(),
    S.FAILED: frozenset(),
}


def can_transition(current: SubmissionStatus, target: SubmissionStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: SubmissionStatus, target: SubmissionStatus) -> None:
    """허용되지 않는 전이면 InvalidTransitionError"""
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot transition submission from '{current.value}' to '{target.value}'"
        )


def ensure_result_consistency(
    status: SubmissionStatus,
    result: Optional[SubmissionResult],
) -> None:
    """result는 종료 상태일 때만, 그리고 종료 상태면 반드시 존재해야 함"""
    if status.is_terminal and result is None:
        raise ValidationError(f"Status '{status.value}' requires a result")
    if not status.is_terminal and result is not None:
        raise ValidationError(f"Status '{status.value}' must not carry a result")
    if (
        result is not None
        and result.test_cases_passed is not None
        and result.total_test_cases is not None
        and result.test_cases_passed > result.total_test_cases
    ):
        raise ValidationError("testCasesPassed cannot exceed totalTestCases")
