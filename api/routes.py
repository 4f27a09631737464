"""
api/routes.py — FastAPI 엔드포인트
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session
from mock_exam.services.data_loader import authenticate, load_exam_bundle, load_login_users
from mock_exam.services.exam_session import ExamSession

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class LoginBody(BaseModel):
    username: str
    password: str

class SelectBody(BaseModel):
    question_id: int
    label: str

class QuestionBody(BaseModel):
    question_id: int

class NavigateBody(BaseModel):
    index: int = 0


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _exam(request: Request) -> ExamSession:
    exam: ExamSession | None = session.get(_sid(request), "exam")
    if exam is None:
        raise HTTPException(status_code=404, detail="시험 세션이 없습니다.")
    return exam


def _ready_exam(request: Request) -> ExamSession:
    exam = _exam(request)
    if not exam.is_ready:
        raise HTTPException(status_code=409, detail="시험 문제를 불러오는 중입니다.")
    return exam


# ── 엔드포인트 ───────────────────────────────────────────────────────────────

@router.post("/api/login")
async def login(body: LoginBody, request: Request):
    users = load_login_users(request.app.state.login_path)
    user = authenticate(users, body.username, body.password)
    if user is None:
        logger.info(f"로그인 실패: {body.username!r}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    session.put(_sid(request), "user", user.display_name)
    logger.info(f"로그인 성공: {user.username}")
    return {"ok": True, "name": user.display_name}


@router.post("/api/start-exam")
async def start_exam(request: Request):
    sid = _sid(request)
    bundle = load_exam_bundle(request.app.state.exam_path, request.app.state.questions_path)
    exam = ExamSession(
        bundle.meta,
        bundle.questions,
        candidate=session.get(sid, "user"),
        scheduler=request.app.state.scheduler_factory(),
    )
    session.put(sid, "exam", exam)
    session.put(sid, "is_fallback", bundle.is_fallback)
    return {
        "ok": True,
        "title": bundle.meta.title,
        "total": len(exam.questions),
        "fallback": bundle.is_fallback,
    }


@router.post("/api/restart")
async def restart_exam(request: Request):
    exam = _ready_exam(request)
    exam.restart()
    return {"ok": True, "total": len(exam.questions)}


@router.get("/api/exam-state")
async def get_exam_state(request: Request):
    return _exam(request).snapshot()


@router.get("/api/question")
async def get_current_question(request: Request):
    return _ready_exam(request).question_view()


@router.get("/api/question/{index}")
async def get_question(index: int, request: Request):
    exam = _ready_exam(request)
    try:
        return exam.question_view(index)
    except ValueError:
        raise HTTPException(status_code=404, detail="문제를 찾을 수 없습니다.")


@router.post("/api/select")
async def select_option(body: SelectBody, request: Request):
    exam = _ready_exam(request)
    try:
        # 제출 후 선택은 무시된다 (ok=False, 답안 그대로)
        changed = exam.select(body.question_id, body.label)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "ok": changed,
        "submitted": exam.is_submitted,
        "selected": sorted(exam.state.selected(body.question_id)),
        "answered_count": exam.progress()["answered"],
    }


@router.post("/api/navigate")
async def navigate(body: NavigateBody, request: Request):
    return {"index": _ready_exam(request).navigate(body.index), "ok": True}


@router.post("/api/next")
async def next_question(request: Request):
    return {"index": _ready_exam(request).next(), "ok": True}


@router.post("/api/previous")
async def previous_question(request: Request):
    return {"index": _ready_exam(request).previous(), "ok": True}


@router.post("/api/flag")
async def toggle_flag(body: QuestionBody, request: Request):
    try:
        flagged = _ready_exam(request).toggle_flag(body.question_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "flagged": flagged}


@router.post("/api/reveal")
async def toggle_reveal(body: QuestionBody, request: Request):
    try:
        revealed = _ready_exam(request).toggle_reveal(body.question_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"ok": True, "revealed": revealed}


@router.get("/api/navigator")
async def get_navigator(request: Request):
    return _exam(request).navigator()


@router.get("/api/submit-confirmation")
async def get_submit_confirmation(request: Request):
    return _exam(request).submit_confirmation()


@router.post("/api/submit-exam")
async def submit_exam(request: Request):
    exam = _exam(request)
    attempt = exam.submit()
    result = exam.result()
    return {"ok": True, "score": result.score, "already_submitted": attempt is None}


@router.get("/api/preview")
async def get_preview(request: Request):
    return _exam(request).preview().model_dump()


@router.get("/api/results")
async def get_results(request: Request):
    exam = _exam(request)
    result = exam.result()
    if result is None:
        raise HTTPException(status_code=400, detail="시험이 아직 제출되지 않았습니다.")
    return result.model_dump()


@router.get("/api/attempts")
async def get_attempts(request: Request):
    exam: ExamSession | None = session.get(_sid(request), "exam")
    if exam is None:
        return []
    return [a.model_dump(mode="json") for a in exam.attempts]


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(_sid(request))
    return {"ok": True}
