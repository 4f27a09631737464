"""
api/app.py — FastAPI 앱 인스턴스 + 세션 미들웨어 (JSON API 전용, 화면은 Streamlit)
"""

import logging
import threading
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import (
    EXAM_FILE, LOGIN_FILE, QUESTIONS_FILE, SESSION_CLEANUP_INTERVAL, SESSION_TTL,
)
from api.routes import router
import api.session as session
from mock_exam.services.timer import Scheduler, ThreadScheduler

SESSION_COOKIE = "cbt_session"

logger = logging.getLogger(__name__)


def create_app(
    exam_path: str = EXAM_FILE,
    questions_path: str = QUESTIONS_FILE,
    login_path: str = LOGIN_FILE,
    scheduler_factory: Optional[Callable[[], Scheduler]] = None,
    cleanup: bool = True,
) -> FastAPI:
    app = FastAPI(title="Mock Exam CBT", docs_url=None, redoc_url=None)

    # 데이터 경로와 타이머 스케줄러는 앱 단위로 주입 (테스트에서 교체)
    app.state.exam_path = exam_path
    app.state.questions_path = questions_path
    app.state.login_path = login_path
    app.state.scheduler_factory = scheduler_factory or ThreadScheduler

    # CORS (모바일 브라우저 등 다양한 출처 허용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 세션 미들웨어: 쿠키에서 세션 ID를 읽고, 없으면 새로 발급
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or session.get_session(sid) is None:
            sid = session.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=SESSION_TTL,
        )
        return response

    app.include_router(router)

    # 만료 세션 주기적 정리 (5분마다). 만료된 세션의 시험 타이머도 함께 정지된다.
    def _cleanup_loop():
        while True:
            time.sleep(SESSION_CLEANUP_INTERVAL)
            removed = session.cleanup_expired()
            if removed:
                logger.info(f"만료 세션 {removed}개 정리")

    if cleanup:
        t = threading.Thread(target=_cleanup_loop, daemon=True)
        t.start()

    return app
