"""
services/exam_session.py

시험 세션 상태 머신.

상태:  진행 중(is_submitted=False) → 제출(is_submitted=True) → (restart) 새 진행 중

ExamSession 이 문제 작업본(셔플/정답 재계산 완료), ExamState, 타이머, 응시 이력을 소유한다.
모든 상태 전이는 RLock 으로 직렬화되므로 타이머 스레드의 틱과
사용자 요청이 상태 변경 도중에 끼어들지 않는다.
"""

import logging
import random
import threading
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence

from config import DEFAULT_CANDIDATE
from mock_exam.models.question_model import ExamMeta, Question, index_for
from mock_exam.models.session_state import AttemptRecord, ExamState
from mock_exam.services import exam_service
from mock_exam.services.shuffle_service import shape_questions
from mock_exam.services.timer import CountdownTimer, Scheduler

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExamSession:
    """
    한 응시자의 시험 세션.

    Args:
        meta:       시험 메타데이터.
        questions:  원본 문제 은행 (변경하지 않음).
        candidate:  응시자 표시 이름 (응시 이력에 기록).
        scheduler:  타이머 스케줄러. 기본은 ThreadScheduler, 테스트는 ManualScheduler.
        rng:        셔플용 난수 생성기.
        clock:      제출 시각을 돌려주는 함수.
        autostart:  생성 즉시 타이머를 시작할지 여부.
    """

    def __init__(
        self,
        meta: ExamMeta,
        questions: Sequence[Question],
        candidate: str = DEFAULT_CANDIDATE,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        autostart: bool = True,
    ) -> None:
        self._lock = threading.RLock()
        self._meta = meta
        self._rng = rng
        self._clock = clock
        self._timer = CountdownTimer(scheduler)
        self._timer_generation = 0
        self.candidate = candidate
        self.attempts: List[AttemptRecord] = []

        self._questions = shape_questions(questions, meta, rng)
        self._state = self._fresh_state()
        logger.info(f"시험 세션 생성: '{meta.title}' ({len(self._questions)}문항, 응시자: {candidate})")

        if autostart:
            self.start_timer()

    # ── 조회 ──────────────────────────────────────────────────────────────

    @property
    def meta(self) -> ExamMeta:
        return self._meta

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    @property
    def state(self) -> ExamState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """문제가 하나 이상 있어야 문제 화면을 보여줄 수 있다."""
        return bool(self._questions)

    @property
    def is_submitted(self) -> bool:
        return self._state.is_submitted

    @property
    def time_left(self) -> Optional[int]:
        return self._state.time_left

    @property
    def timer_running(self) -> bool:
        return self._timer.running

    @property
    def current_question(self) -> Optional[Question]:
        if not self._questions:
            return None
        return self._questions[self._state.current_quest_index]

    def get_question(self, question_id: int) -> Question:
        for q in self._questions:
            if q.id == question_id:
                return q
        raise ValueError(f"존재하지 않는 문제입니다: {question_id}")

    # ── 상태 전이 ─────────────────────────────────────────────────────────

    def select(self, question_id: int, label: str) -> bool:
        """
        보기 선택.

        정답이 1개인 문제는 라디오 버튼처럼 동작한다 (다른 보기를 고르면 교체,
        이미 고른 보기를 다시 고르면 해제). 정답이 여러 개인 문제는 체크박스처럼 토글.

        Returns:
            제출된 상태여서 무시되면 False, 반영되면 True.

        Raises:
            ValueError: 존재하지 않는 문제 id 이거나 보기 범위를 벗어난 라벨.
        """
        with self._lock:
            if self._state.is_submitted:
                return False
            q = self.get_question(question_id)
            if len(label) != 1 or not 0 <= index_for(label) < len(q.options):
                raise ValueError(f"Q{question_id}: 잘못된 보기 라벨입니다: {label!r}")

            current = self._state.selected(question_id)
            if q.is_multi_answer:
                selected = set(current)
                if label in selected:
                    selected.discard(label)
                else:
                    selected.add(label)
            else:
                selected = set() if label in current else {label}

            if selected:
                self._state.user_answers[question_id] = selected
            else:
                self._state.user_answers.pop(question_id, None)
            return True

    def navigate(self, index: int) -> int:
        """현재 위치를 [0, 문항 수-1] 범위로 보정하여 이동. 이동 후 인덱스 반환."""
        with self._lock:
            if self._questions:
                self._state.current_quest_index = max(0, min(index, len(self._questions) - 1))
            return self._state.current_quest_index

    def next(self) -> int:
        with self._lock:
            return self.navigate(self._state.current_quest_index + 1)

    def previous(self) -> int:
        with self._lock:
            return self.navigate(self._state.current_quest_index - 1)

    def toggle_flag(self, question_id: int) -> bool:
        """검토 표시 토글. 제출 후에도 가능. 토글 후 값 반환."""
        with self._lock:
            self.get_question(question_id)
            value = not self._state.flagged.get(question_id, False)
            self._state.flagged[question_id] = value
            return value

    def toggle_reveal(self, question_id: int) -> bool:
        """정답 보기 토글. 제출 후에는 이 값과 무관하게 모든 정답이 공개된다."""
        with self._lock:
            self.get_question(question_id)
            value = not self._state.revealed.get(question_id, False)
            self._state.revealed[question_id] = value
            return value

    def submit(self, auto: bool = False) -> Optional[AttemptRecord]:
        """
        최종 제출. 이미 제출된 상태면 아무것도 하지 않고 None 반환.

        Args:
            auto: 타이머 만료에 의한 자동 제출 여부 (로그용).
        """
        with self._lock:
            if self._state.is_submitted:
                return None
            result = self.preview()
            self._state.is_submitted = True
            self._timer.stop()
            attempt = AttemptRecord(user=self.candidate, timestamp=self._clock(), score=result.score)
            self.attempts.append(attempt)
            logger.info(
                f"{'자동' if auto else '수동'} 제출: {self.candidate} — "
                f"{result.score}% ({result.correct}/{result.total}), "
                f"{'합격' if result.passed else '불합격'}"
            )
            return attempt

    def restart(self) -> bool:
        """
        현재 작업본을 다시 섞고 모든 응답/표시/공개 상태와 타이머를 초기화한다.
        응시 이력은 유지된다. 문제가 없으면 False.
        """
        with self._lock:
            if not self._questions:
                return False
            self._timer.stop()
            self._questions = shape_questions(self._questions, self._meta, self._rng)
            self._state = self._fresh_state()
            self.start_timer()
            logger.info(f"시험 재시작: {self.candidate}")
            return True

    def start_timer(self) -> None:
        """진행 중이고 남은 시간이 양수일 때만 타이머를 (재)시작한다."""
        with self._lock:
            if self._state.is_submitted or not self._state.time_left:
                return
            self._timer_generation += 1
            self._timer.start(partial(self._on_tick, self._timer_generation))

    def tick(self) -> None:
        """타이머 1틱. 시간이 0에 도달하면 자동 제출."""
        with self._lock:
            if self._state.is_submitted:
                self._timer.stop()
                return
            if self._timer.count_down(self._state):
                self.submit(auto=True)

    def close(self) -> None:
        """세션 종료 (페이지 이탈, 세션 만료). 타이머만 멈춘다."""
        with self._lock:
            self._timer.stop()
            self._timer_generation += 1

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            # 재시작 이전 타이머에서 늦게 도착한 틱은 무시
            if generation != self._timer_generation:
                return
            self.tick()

    def _fresh_state(self) -> ExamState:
        return ExamState(time_left=self._meta.duration_seconds)

    # ── 파생 데이터 (매번 새로 계산, 상태 변경 없음) ─────────────────────────

    def preview(self) -> exam_service.ExamResult:
        """진행 중 미리보기 채점. 상태를 바꾸지 않는다."""
        with self._lock:
            return exam_service.evaluate(
                self._questions, self._state.user_answers, self._meta.pass_percentage
            )

    def result(self) -> Optional[exam_service.ExamResult]:
        """제출 후 최종 결과. 제출 전이면 None."""
        with self._lock:
            if not self._state.is_submitted:
                return None
            return self.preview()

    def progress(self) -> Dict[str, int]:
        with self._lock:
            return exam_service.build_progress(self._questions, self._state)

    def question_view(self, index: Optional[int] = None) -> Optional[Dict[str, object]]:
        """문제 카드 데이터. 문제가 없으면 None (로딩 상태 유지)."""
        with self._lock:
            if not self._questions:
                return None
            if index is None:
                index = self._state.current_quest_index
            if not 0 <= index < len(self._questions):
                raise ValueError(f"문제 인덱스 범위를 벗어났습니다: {index}")
            return exam_service.build_question_view(self._questions, self._state, index)

    def navigator(self) -> List[Dict[str, object]]:
        with self._lock:
            return exam_service.build_navigator(self._questions, self._state)

    def submit_confirmation(self) -> Dict[str, object]:
        """제출 확인 대화상자용 정보."""
        with self._lock:
            progress = self.progress()
            return {
                "answered": progress["answered"],
                "total": progress["total"],
                "has_flagged": self._state.has_flagged,
            }

    def snapshot(self) -> Dict[str, object]:
        """화면 헤더(제목, 응시자, 진행률, 타이머)용 요약."""
        with self._lock:
            return {
                "title": self._meta.title,
                "candidate": self.candidate,
                "ready": self.is_ready,
                "current_index": self._state.current_quest_index,
                "total": len(self._questions),
                "is_submitted": self._state.is_submitted,
                "time_left": self._state.time_left,
                "time_display": exam_service.format_time(self._state.time_left),
                "time_warning": exam_service.is_time_warning(self._state.time_left),
                "progress": self.progress(),
                "has_flagged": self._state.has_flagged,
                "pass_percentage": self._meta.pass_percentage,
            }
