"""
views/result_view.py — 시험 결과 화면

표시 내용:
  - 최종 점수 (100점 만점 환산, 대형 숫자)
  - 합격 / 불합격 배지
  - 통계 요약 (정답 수, 오답 수, 미응답 수)
  - 문항별 채점 내역
  - 응시 이력 (세션 메모리 전용)
  - 다시 시험 보기 (재셔플) / 문제 검토 / 로그아웃 버튼
"""

from __future__ import annotations

import streamlit as st

from mock_exam.services.exam_session import ExamSession


def _restart_exam(exam: ExamSession) -> None:
    """현재 문제 세트를 다시 섞어 시험을 다시 시작."""
    exam.restart()
    st.session_state.reviewing = False
    st.session_state.show_summary = False
    st.session_state.confirm_submit = False
    st.session_state.page = "exam"
    st.rerun()


def _go_home() -> None:
    """홈 화면으로 이동하며 세션 정리 (타이머 정지)."""
    exam: ExamSession | None = st.session_state.get("exam")
    if exam is not None:
        exam.close()
    for key in ["exam", "user", "show_summary", "confirm_submit", "reviewing"]:
        if key in st.session_state:
            del st.session_state[key]
    st.session_state.page = "home"
    st.rerun()


def render() -> None:
    """결과 화면 렌더링."""

    # ── 세션 가드 ──────────────────────────────────────────────────────────
    exam: ExamSession | None = st.session_state.get("exam")
    result = exam.result() if exam is not None else None

    if result is None:
        st.warning("결과 정보가 없습니다.")
        if st.button("홈으로", type="primary"):
            _go_home()
        return

    _, col, _ = st.columns([0.8, 2.5, 0.8])

    with col:
        st.markdown(f"### {exam.meta.title} — Exam Summary")

        # 점수 대형 숫자
        score_color = "#10b981" if result.passed else "#ef4444"
        st.markdown(
            f"<div style='font-size:3rem; font-weight:800; color:{score_color};'>{result.score}%</div>",
            unsafe_allow_html=True,
        )
        verdict = "✓ Passed" if result.passed else "✗ Failed"
        st.markdown(f"Pass mark: {result.pass_percentage:g}% — **{verdict}**")

        c1, c2, c3 = st.columns(3)
        c1.metric("Correct", result.correct)
        c2.metric("Incorrect", result.incorrect)
        c3.metric("Unanswered", result.unanswered)

        # ── 문항별 채점 ───────────────────────────────────────────────────
        with st.expander("Answer review", expanded=False):
            for number, d in enumerate(result.details, start=1):
                mark = "✅" if d.is_correct else "❌"
                mine = ", ".join(d.selected) or "—"
                st.markdown(
                    f"{mark} **Q{number}.** {d.question}  \n"
                    f"Your answer: {mine} · Correct: {', '.join(d.correct)}"
                )

        # ── 응시 이력 ─────────────────────────────────────────────────────
        if exam.attempts:
            st.markdown("#### Attempts (session)")
            for attempt in exam.attempts:
                st.markdown(f"- {attempt.timestamp.astimezone():%Y-%m-%d %H:%M:%S} — {attempt.score}%")

        b1, b2, b3 = st.columns(3)
        with b1:
            if st.button("Retake (reshuffle)", type="primary", use_container_width=True):
                _restart_exam(exam)
        with b2:
            if st.button("Review questions", use_container_width=True):
                st.session_state.reviewing = True
                st.session_state.page = "exam"
                st.rerun()
        with b3:
            if st.button("Log out", use_container_width=True):
                _go_home()
