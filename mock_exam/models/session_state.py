"""
models/session_state.py

시험 진행 상태를 담는 OMR 카드 모델.
Pydantic BaseModel 기반 — 직렬화/역직렬화 및 타입 안전성 확보.
UI 코드 없음. 상태 전이는 services/exam_session.py 가 담당한다.
"""

import time
from datetime import datetime
from typing import Dict, Optional, Set

from pydantic import BaseModel, Field


class ExamState(BaseModel):
    """
    사용자의 시험 세션 전체 상태를 표현하는 모델.

    Attributes:
        current_quest_index: 현재 풀고 있는 문제의 인덱스 (0-based).
        user_answers:        사용자 답안지. {question.id: 선택한 라벨 집합}
                             키가 없거나 빈 집합이면 미응답.
        flagged:             {question.id: 검토 표시 여부}
        revealed:            {question.id: 정답 보기 토글 여부}
        is_submitted:        최종 제출 여부. 재시작 전까지 False로 돌아가지 않는다.
        time_left:           남은 시간 (초). None이면 타이머 미설정.
        start_time:          시험 시작 시각 (time.time() 기준 Unix timestamp).
    """

    current_quest_index: int = Field(
        default=0,
        ge=0,
        description="현재 풀고 있는 문제 인덱스 (0-based)"
    )
    user_answers: Dict[int, Set[str]] = Field(
        default_factory=dict,
        description="사용자 답안지. key: question.id, value: 선택한 라벨 집합"
    )
    flagged: Dict[int, bool] = Field(default_factory=dict)
    revealed: Dict[int, bool] = Field(default_factory=dict)
    is_submitted: bool = Field(
        default=False,
        description="최종 제출 완료 여부"
    )
    time_left: Optional[int] = Field(
        default=None,
        ge=0,
        description="남은 시간 (초)"
    )
    start_time: float = Field(
        default_factory=time.time,
        description="시험 시작 시각 (Unix timestamp, time.time() 기준)"
    )

    def selected(self, question_id: int) -> Set[str]:
        return self.user_answers.get(question_id, set())

    def is_answered(self, question_id: int) -> bool:
        return bool(self.user_answers.get(question_id))

    def is_revealed(self, question_id: int) -> bool:
        """제출 후에는 모든 문제의 정답이 공개된다."""
        return self.is_submitted or self.revealed.get(question_id, False)

    @property
    def answered_count(self) -> int:
        return sum(1 for labels in self.user_answers.values() if labels)

    @property
    def has_flagged(self) -> bool:
        return any(self.flagged.values())


class AttemptRecord(BaseModel):
    """제출 1회당 1건 기록되는 응시 이력 (메모리 전용, 영속화하지 않음)."""

    user: Optional[str] = None
    timestamp: datetime
    score: int = Field(..., ge=0, le=100)
