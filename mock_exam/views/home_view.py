"""
views/home_view.py — 로그인 / 시작 화면

기능:
  - login.json 기준 평문 로그인 (보안 목적 아님)
  - 시험 데이터 로딩 후 ExamSession 생성 → 시험 화면으로 이동
"""

from __future__ import annotations

import streamlit as st

from mock_exam.services.data_loader import authenticate, load_exam_bundle, load_login_users
from mock_exam.services.exam_session import ExamSession


def _start_exam(candidate: str) -> None:
    """데이터 로딩(실패 시 샘플 시험) 후 세션 생성, exam 페이지로 이동."""
    previous: ExamSession | None = st.session_state.get("exam")
    if previous is not None:
        previous.close()

    bundle = load_exam_bundle()
    st.session_state.exam = ExamSession(bundle.meta, bundle.questions, candidate=candidate)
    st.session_state.show_summary = False
    st.session_state.confirm_submit = False
    st.session_state.reviewing = False
    st.session_state.page = "exam"
    st.rerun()


def render() -> None:
    """홈 화면 렌더링."""
    _, col, _ = st.columns([0.8, 2.0, 0.8])

    with col:
        st.markdown("### Login")
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary")

        if submitted:
            user = authenticate(load_login_users(), username, password)
            if user is None:
                st.error("Invalid credentials")
            else:
                st.session_state.user = user.display_name
                _start_exam(user.display_name)

        st.caption("Demo user: `demo / demo123`")
