"""
views/components/sidebar.py

문제 번호 네비게이션 그리드 컴포넌트.
각 번호를 클릭하면 해당 문제로 바로 이동한다.
"""

from __future__ import annotations

import streamlit as st

from mock_exam.services.exam_session import ExamSession

_STATUS_ICON = {
    "unanswered": "",
    "answered": "●",
    "correct": "✓",
    "incorrect": "✗",
}


def render(exam: ExamSession, key_prefix: str = "nav") -> None:
    """
    사이드바에 진행 현황과 문제 번호 버튼 그리드를 렌더링한다.

    표시:
      - 현재 문제: primary 버튼
      - 상태 아이콘: ● 응답 / ✓ 정답 / ✗ 오답 (정답 공개 시)
      - 🚩 검토 표시
    """
    progress = exam.progress()
    answered, total = progress["answered"], progress["total"]

    # ── 진행 현황 ──────────────────────────────────────────────────────────
    st.markdown(f"Progress: **{answered}** / {total} answered")
    st.progress(answered / total if total > 0 else 0)

    # ── 문제 번호 그리드 (5열) ─────────────────────────────────────────────
    cols_per_row = 5
    items = exam.navigator()

    for row_start in range(0, len(items), cols_per_row):
        row = items[row_start : row_start + cols_per_row]
        cols = st.columns(cols_per_row)
        for col, item in zip(cols, row):
            label = f"{'🚩' if item['flagged'] else ''}{item['number']}{_STATUS_ICON[item['status']]}"
            with col:
                if st.button(
                    label,
                    key=f"{key_prefix}_{item['index']}",
                    type="primary" if item["current"] else "secondary",
                    help=f"Q{item['number']}: {item['status'].capitalize()}",
                ):
                    exam.navigate(item["index"])
                    st.session_state.show_summary = False
                    st.rerun()

    st.caption("● Answered · ✓ Correct · ✗ Incorrect · 🚩 Flagged")
