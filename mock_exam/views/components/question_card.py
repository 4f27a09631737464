"""
views/components/question_card.py

단일 문제를 카드 형태로 렌더링하고 보기 선택을 ExamSession 에 반영하는 컴포넌트.
"""

from __future__ import annotations

import streamlit as st

from mock_exam.services.exam_session import ExamSession


def _option_marker(option: dict) -> str:
    if option.get("is_correct"):
        return " ✅"
    if option.get("is_wrong_selection"):
        return " ❌"
    return ""


def render(exam: ExamSession) -> None:
    """현재 문제 카드 + 보기 버튼 + 검토 표시/정답 보기 토글."""
    view = exam.question_view()
    qid = view["id"]

    # ── 문제 헤더 ──────────────────────────────────────────────────────────
    head_col, flag_col = st.columns([4, 1])
    with head_col:
        st.markdown(
            f'<span class="question-number-badge">Question {view["number"]} of {view["total"]}</span>'
            f' <span style="font-size:0.8rem; color:#9ca3af;">{view["hint"]}</span>',
            unsafe_allow_html=True,
        )
    with flag_col:
        if st.button("🚩 Flagged" if view["flagged"] else "🚩 Flag", key=f"flag_{qid}"):
            exam.toggle_flag(qid)
            st.rerun()

    st.markdown(f'<div class="question-card"><p>{view["question"]}</p></div>', unsafe_allow_html=True)

    # ── 보기 선택 ─────────────────────────────────────────────────────────
    for option in view["options"]:
        text = f"{'☑' if option['checked'] else '☐'} {option['label']}. {option['text']}"
        if st.button(
            text + _option_marker(option),
            key=f"opt_{qid}_{option['label']}",
            type="primary" if option["checked"] else "secondary",
            disabled=exam.is_submitted,
            use_container_width=True,
        ):
            exam.select(qid, option["label"])
            st.rerun()

    # ── 정답 보기 ─────────────────────────────────────────────────────────
    if not exam.is_submitted:
        if st.button("Hide Answer" if view["revealed"] else "Show Answer", key=f"reveal_{qid}"):
            exam.toggle_reveal(qid)
            st.rerun()

    if view["revealed"]:
        verdict = "Correct" if view["is_correct"] else "Incorrect"
        mine = ", ".join(view["selected"]) or "—"
        st.info(
            f"**Correct Answer:** {', '.join(view['correct_answers'])}  \n"
            f"Your answer: {mine} ({verdict})"
        )
