"""
views/exam_view.py — 시험 풀기 화면

레이아웃:
  - st.sidebar : 타이머 + 문제 번호 네비게이터 + 최종 제출
  - 메인 영역  : 현재 문제 카드(또는 요약 그리드) + 이전/다음

상태 관리:
  - st.session_state.exam          (ExamSession)
  - st.session_state.show_summary  요약 화면 토글
  - st.session_state.confirm_submit 제출 확인 대화상자
"""

from __future__ import annotations

import streamlit as st

from mock_exam.services.exam_session import ExamSession
from mock_exam.views.components import question_card as qcard
from mock_exam.views.components import sidebar as nav
from mock_exam.views.components import timer as tmr


def _go_to_result(exam: ExamSession) -> None:
    """채점 후 결과 페이지로 이동."""
    exam.submit()
    st.session_state.confirm_submit = False
    st.session_state.page = "result"
    st.rerun()


def _render_confirm(exam: ExamSession) -> None:
    info = exam.submit_confirmation()
    message = f"Are you sure you want to submit? You answered {info['answered']} of {info['total']} questions."
    if info["has_flagged"]:
        message += "  \nYou still have flagged questions."
    st.warning(message)
    col_no, col_yes = st.columns(2)
    with col_no:
        if st.button("Review More", key="confirm_no"):
            st.session_state.confirm_submit = False
            st.rerun()
    with col_yes:
        if st.button("Yes, Submit", key="confirm_yes", type="primary"):
            _go_to_result(exam)


def render() -> None:
    """시험 화면 렌더링."""

    # ── 세션 가드 ──────────────────────────────────────────────────────────
    exam: ExamSession | None = st.session_state.get("exam")
    if exam is None:
        st.warning("시험 정보가 없습니다. 홈 화면으로 돌아가세요.")
        if st.button("홈으로", type="primary"):
            st.session_state.page = "home"
            st.rerun()
        return

    if not exam.is_ready:
        st.info("Loading exam…")
        return

    snapshot = exam.snapshot()

    # ── 사이드바 ───────────────────────────────────────────────────────────
    with st.sidebar:
        tmr.render(exam)
        st.divider()
        nav.render(exam)
        st.divider()

        if exam.is_submitted:
            if st.button("Back to Results", key="back_to_results", type="primary"):
                st.session_state.page = "result"
                st.rerun()
        elif st.button("Submit Exam", key="submit_sidebar", type="primary"):
            st.session_state.confirm_submit = True
            st.rerun()

        if st.session_state.get("confirm_submit") and not exam.is_submitted:
            _render_confirm(exam)

    # ── 메인 영역 헤더 ─────────────────────────────────────────────────────
    header_col, toggle_col = st.columns([3, 1])
    with header_col:
        st.subheader(snapshot["title"])
        st.caption(f"Candidate: {snapshot['candidate']}")
    with toggle_col:
        show_summary = st.session_state.get("show_summary", False)
        if st.button("Back to Questions" if show_summary else "Open Summary", key="summary_toggle"):
            st.session_state.show_summary = not show_summary
            st.rerun()

    if st.session_state.get("show_summary"):
        st.markdown("#### Exam Summary")
        nav.render(exam, key_prefix="summary")
        return

    # ── 문제 카드 ─────────────────────────────────────────────────────────
    qcard.render(exam)

    # ── 이전 / 다음 네비게이션 ────────────────────────────────────────────
    current_idx = snapshot["current_index"]
    total = snapshot["total"]
    nav_left, nav_center, nav_right = st.columns([1, 2, 1])

    with nav_left:
        if st.button("← Previous", key="prev_btn", disabled=current_idx == 0, use_container_width=True):
            exam.previous()
            st.rerun()

    with nav_center:
        st.markdown(
            f"<p style='text-align:center; font-size:0.85rem; color:#9ca3af; "
            f"padding-top:8px;'>{current_idx + 1} / {total}</p>",
            unsafe_allow_html=True,
        )

    with nav_right:
        if current_idx < total - 1:
            if st.button("Next →", key="next_btn", type="primary", use_container_width=True):
                exam.next()
                st.rerun()
        elif not exam.is_submitted:
            if st.button("Submit →", key="submit_last", type="primary", use_container_width=True):
                st.session_state.confirm_submit = True
                st.rerun()
