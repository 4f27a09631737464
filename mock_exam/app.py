"""
app.py — Streamlit 화면 진입점

실행: streamlit run mock_exam/app.py

페이지 라우팅 (st.session_state.page):
  home → exam → result → (재시험) exam
"""

import logging

import streamlit as st

from mock_exam.views import exam_view, home_view, result_view

logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

_PAGES = {
    "home": home_view.render,
    "exam": exam_view.render,
    "result": result_view.render,
}


def main() -> None:
    st.set_page_config(page_title="Mock Exam CBT", page_icon="📝", layout="wide")
    if "page" not in st.session_state:
        st.session_state.page = "home"
    _PAGES.get(st.session_state.page, home_view.render)()


main()
