"""
services/data_loader.py

정적 JSON 데이터(시험 메타, 문제 은행, 로그인 목록) 로딩.
Public API:
  - load_exam_bundle(exam_path, questions_path) -> ExamBundle : 실패 시 내장 샘플 시험으로 대체
  - load_login_users(path) -> List[LoginUser]                : 실패 시 빈 리스트
  - authenticate(users, username, password) -> LoginUser | None

설계 원칙:
- 로딩 실패는 사용자에게 오류로 노출하지 않는다 (로그만 남김)
- 세션은 항상 유효한 데이터로만 생성된다
"""

import json
import logging
from typing import List, NamedTuple, Optional

from pydantic import TypeAdapter, ValidationError

from config import EXAM_FILE, LOGIN_FILE, QUESTIONS_FILE
from mock_exam.models.question_model import ExamMeta, LoginUser, Question

logger = logging.getLogger(__name__)

_QUESTION_LIST = TypeAdapter(List[Question])
_LOGIN_LIST = TypeAdapter(List[LoginUser])

# ── 내장 샘플 시험 (데이터 로딩 실패 시 사용) ─────────────────────────────────
FALLBACK_EXAM = ExamMeta(
    title="Sample Mock Exam",
    duration_minutes=10,
    shuffle_questions=True,
    shuffle_options=True,
    pass_percentage=60,
)

FALLBACK_QUESTIONS: List[Question] = [
    Question(
        id=1,
        question="2 + 2 = ?",
        options=["3", "4", "5", "22"],
        correct_answers=["B"],
    ),
    Question(
        id=2,
        question="Select all prime numbers:",
        options=["2", "3", "4", "5"],
        correct_answers=["A", "B", "D"],
    ),
]


class ExamBundle(NamedTuple):
    meta: ExamMeta
    questions: List[Question]
    is_fallback: bool


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_exam_bundle(
    exam_path: str = EXAM_FILE,
    questions_path: str = QUESTIONS_FILE,
) -> ExamBundle:
    """
    시험 메타와 문제 은행을 함께 읽는다.
    둘 중 하나라도 실패하면 둘 다 내장 샘플로 대체한다.
    """
    try:
        meta = ExamMeta.model_validate(_read_json(exam_path))
        questions = _QUESTION_LIST.validate_python(_read_json(questions_path))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"시험 데이터 로딩 실패, 내장 샘플 시험 사용: {type(e).__name__}: {e}")
        return ExamBundle(FALLBACK_EXAM, list(FALLBACK_QUESTIONS), True)

    ids = [q.id for q in questions]
    if len(set(ids)) != len(ids):
        logger.warning("문제 id 중복 발견, 내장 샘플 시험 사용")
        return ExamBundle(FALLBACK_EXAM, list(FALLBACK_QUESTIONS), True)

    for q in questions:
        if q.has_duplicate_options():
            # 보기 텍스트가 겹치면 셔플 후 정답 라벨이 첫 번째 일치 항목을 가리킨다
            logger.warning(f"Q{q.id}: 중복된 보기 텍스트가 있습니다 — {q.options}")

    logger.info(f"시험 데이터 로딩 완료: '{meta.title}' ({len(questions)}문항)")
    return ExamBundle(meta, questions, False)


def load_login_users(path: str = LOGIN_FILE) -> List[LoginUser]:
    """로그인 목록을 읽는다. 실패하면 빈 리스트 (아무도 로그인할 수 없음)."""
    try:
        return _LOGIN_LIST.validate_python(_read_json(path))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"로그인 목록 로딩 실패: {type(e).__name__}: {e}")
        return []


def authenticate(users: List[LoginUser], username: str, password: str) -> Optional[LoginUser]:
    """평문 비교. 일치하는 첫 사용자 또는 None."""
    for user in users:
        if user.username == username and user.password == password:
            return user
    return None
