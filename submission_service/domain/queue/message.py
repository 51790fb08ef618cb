"""
큐 메시지 (채점 워커와의 wire 계약)

본문: UTF-8 JSON {"submissionId", "problemId", "code", "lang"}
"""
import json
from dataclasses import dataclass
from typing import Any, Dict

from submission_service.domain.submission.models import Submission


@dataclass(frozen=True)
class QueueMessage:
    """제출 큐로 발행되는 메시지"""

    submission_id: str
    code: str
    lang: str
    problem_id: str

    @classmethod
    def from_submission(cls, submission: Submission) -> "QueueMessage":
        return cls(
            submission_id=submission.id,
            code=submission.code,
            lang=submission.lang.value,
            problem_id=submission.problem_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "submissionId": self.submission_id,
            "problemId": self.problem_id,
            "code": self.code,
            "lang": self.lang,
        }

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_bytes(cls, body: bytes) -> "QueueMessage":
        data = json.loads(body.decode("utf-8"))
        return cls(
            submission_id=data["submissionId"],
            code=data["code"],
            lang=data["lang"],
            problem_id=data.get("problemId", ""),
        )
