"""
services/exam_service.py

시험 채점 및 결과/화면용 데이터 계산 비즈니스 로직.
순수 Python 함수로 구성 — UI 코드, 전역 상태 변경 없음.
진행 중 미리보기와 최종 채점이 같은 함수를 사용하며, 입력을 절대 변경하지 않는다.
"""

from typing import AbstractSet, Dict, List, Optional, Sequence

from pydantic import BaseModel

from config import TIME_WARNING_SECONDS
from mock_exam.models.question_model import Question, label_for
from mock_exam.models.session_state import ExamState


class QuestionResult(BaseModel):
    id: int
    question: str
    is_correct: bool
    answered: bool
    selected: List[str]
    correct: List[str]


class ExamResult(BaseModel):
    score: int
    correct: int
    incorrect: int
    unanswered: int
    total: int
    passed: bool
    pass_percentage: float
    details: List[QuestionResult]


def is_answer_correct(selected: AbstractSet[str], correct: Sequence[str]) -> bool:
    """
    정답 판정: 선택한 라벨 집합 == 정답 라벨 집합 (순서 무관, 부분 점수 없음).
    미응답(빈 집합)은 정답 집합이 비어 있지 않으므로 항상 오답.
    """
    return set(selected) == set(correct)


def calculate_score(correct_count: int, total: int) -> int:
    """
    100점 만점 환산 점수를 정수로 반환한다.

    round-half-up: 100 * correct / total 의 소수점 첫째 자리에서 반올림.
    부동소수점 오차를 피하기 위해 정수 연산 (200c + t) // 2t 를 사용한다.
    total 이 0이면 0을 반환한다.
    """
    if total <= 0:
        return 0
    return (200 * correct_count + total) // (2 * total)


def is_passed(score: float, pass_percentage: float = 60.0) -> bool:
    """
    합격 여부를 반환한다.

    Returns:
        score >= pass_percentage 이면 True (경계 포함).
    """
    return score >= pass_percentage


def evaluate(
    questions: Sequence[Question],
    user_answers: Dict[int, AbstractSet[str]],
    pass_percentage: float = 60.0,
) -> ExamResult:
    """
    사용자 답안을 채점하여 ExamResult 를 반환한다.

    Args:
        questions:       채점 대상 Question 리스트 (현재 표시 순서).
        user_answers:    사용자 답안지. {question.id: 선택한 라벨 집합}
        pass_percentage: 합격 기준 점수.
    """
    details: List[QuestionResult] = []
    for q in questions:
        selected = user_answers.get(q.id) or set()
        details.append(
            QuestionResult(
                id=q.id,
                question=q.question,
                is_correct=is_answer_correct(selected, q.correct_answers),
                answered=bool(selected),
                selected=sorted(selected),
                correct=sorted(q.correct_answers),
            )
        )

    total = len(details)
    correct = sum(1 for d in details if d.is_correct)
    unanswered = sum(1 for d in details if not d.answered)
    score = calculate_score(correct, total)

    return ExamResult(
        score=score,
        correct=correct,
        incorrect=total - correct,
        unanswered=unanswered,
        total=total,
        passed=is_passed(score, pass_percentage),
        pass_percentage=pass_percentage,
        details=details,
    )


def get_incorrect_questions(
    questions: Sequence[Question],
    user_answers: Dict[int, AbstractSet[str]],
) -> List[Question]:
    """오답 문제 리스트 (미응답 포함, 원본 순서 유지)."""
    return [
        q for q in questions
        if not is_answer_correct(user_answers.get(q.id) or set(), q.correct_answers)
    ]


# ── 화면용 데이터 ────────────────────────────────────────────────────────────

def format_time(seconds: Optional[int]) -> str:
    """남은 초 → "MM:SS". 타이머가 없으면 "--:--"."""
    if seconds is None:
        return "--:--"
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def is_time_warning(seconds: Optional[int]) -> bool:
    return seconds is not None and seconds <= TIME_WARNING_SECONDS


def build_progress(questions: Sequence[Question], state: ExamState) -> Dict[str, int]:
    answered = sum(1 for q in questions if state.is_answered(q.id))
    return {"answered": answered, "total": len(questions)}


def build_question_view(
    questions: Sequence[Question],
    state: ExamState,
    index: int,
) -> Dict[str, object]:
    """
    문제 카드 렌더링용 딕셔너리.
    정답 관련 필드(is_correct, is_wrong_selection 등)는 정답 공개 시에만 채운다.
    """
    q = questions[index]
    selected = state.selected(q.id)
    revealed = state.is_revealed(q.id)

    options = []
    for i, text in enumerate(q.options):
        label = label_for(i)
        checked = label in selected
        option = {"label": label, "text": text, "checked": checked}
        if revealed:
            is_correct = label in q.correct_answers
            option["is_correct"] = is_correct
            option["is_wrong_selection"] = checked and not is_correct
        options.append(option)

    view = {
        "index": index,
        "number": index + 1,
        "total": len(questions),
        "id": q.id,
        "question": q.question,
        "multi_select": q.is_multi_answer,
        "hint": "Select all that apply" if q.is_multi_answer else "Single correct",
        "flagged": state.flagged.get(q.id, False),
        "revealed": revealed,
        "selected": sorted(selected),
        "options": options,
    }
    if revealed:
        view["correct_answers"] = sorted(q.correct_answers)
        view["is_correct"] = is_answer_correct(selected, q.correct_answers)
    return view


def build_navigator(questions: Sequence[Question], state: ExamState) -> List[Dict[str, object]]:
    """
    문제 번호 그리드 상태.

    status:
      - correct / incorrect : 정답 공개 상태이면서 응답한 문제
      - answered            : 응답했으나 공개되지 않은 문제
      - unanswered          : 미응답
    """
    items = []
    for idx, q in enumerate(questions):
        answered = state.is_answered(q.id)
        revealed = state.is_revealed(q.id)
        correct: Optional[bool] = None
        if revealed and answered:
            correct = is_answer_correct(state.selected(q.id), q.correct_answers)

        if correct is True:
            status = "correct"
        elif correct is False:
            status = "incorrect"
        elif answered:
            status = "answered"
        else:
            status = "unanswered"

        items.append({
            "index": idx,
            "number": idx + 1,
            "id": q.id,
            "answered": answered,
            "flagged": state.flagged.get(q.id, False),
            "revealed": revealed,
            "current": idx == state.current_quest_index,
            "correct": correct,
            "status": status,
        })
    return items
