"""
views/components/timer.py

남은 시험 시간을 렌더링하는 컴포넌트.
실제 감소는 ExamSession 의 타이머 스레드가 담당하고, 여기서는 1초마다 다시 그리기만 한다.
시간이 다 되어 자동 제출되면 결과 화면으로 이동한다.
"""

import streamlit as st

from mock_exam.services.exam_service import format_time, is_time_warning
from mock_exam.services.exam_session import ExamSession


@st.fragment(run_every=1)
def render(exam: ExamSession) -> None:
    """남은 시간 표시 (1분 이하이면 경고)."""
    remaining = exam.time_left
    is_warning = is_time_warning(remaining)

    css_class = "timer-display timer-warning" if is_warning else "timer-display"
    icon = "⚠️ " if is_warning else "⏳ "

    st.markdown(
        f'<div class="{css_class}">{icon}{format_time(remaining)}</div>',
        unsafe_allow_html=True,
    )
    if is_warning and not exam.is_submitted:
        st.caption("Less than 1 minute!")

    # 결과 화면에서 검토로 돌아온 경우(reviewing)는 이동하지 않는다
    if exam.is_submitted and st.session_state.get("page") == "exam" and not st.session_state.get("reviewing"):
        st.session_state.page = "result"
        st.rerun()
