import json
import random
from datetime import datetime, timezone

import pytest

from mock_exam.models.question_model import ExamMeta, Question
from mock_exam.services.exam_session import ExamSession
from mock_exam.services.timer import ManualScheduler

SCENARIO_EXAM = {
    "title": "Scenario Exam",
    "durationMinutes": 10,
    "shuffleQuestions": False,
    "shuffleOptions": False,
    "passPercentage": 60,
}

SCENARIO_QUESTIONS = [
    {"id": 1, "question": "2 + 2 = ?", "options": ["3", "4", "5", "22"], "correct_answers": ["B"]},
    {
        "id": 2,
        "question": "Select all prime numbers:",
        "options": ["2", "3", "4", "5"],
        "correct_answers": ["A", "B", "D"],
    },
]


@pytest.fixture
def meta() -> ExamMeta:
    return ExamMeta.model_validate(SCENARIO_EXAM)


@pytest.fixture
def shuffled_meta() -> ExamMeta:
    return ExamMeta.model_validate({**SCENARIO_EXAM, "shuffleQuestions": True, "shuffleOptions": True})


@pytest.fixture
def questions() -> list[Question]:
    return [Question.model_validate(q) for q in SCENARIO_QUESTIONS]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def exam(meta, questions, scheduler, fixed_clock) -> ExamSession:
    session = ExamSession(meta, questions, candidate="tester", scheduler=scheduler, clock=fixed_clock)
    yield session
    session.close()


@pytest.fixture
def shuffled_exam(shuffled_meta, questions, scheduler) -> ExamSession:
    session = ExamSession(shuffled_meta, questions, scheduler=scheduler, rng=random.Random(7))
    yield session
    session.close()


@pytest.fixture
def data_files(tmp_path):
    """시나리오 시험 데이터를 임시 디렉토리에 기록하고 경로를 반환."""
    exam_path = tmp_path / "exam.json"
    questions_path = tmp_path / "questions.json"
    login_path = tmp_path / "login.json"
    exam_path.write_text(json.dumps(SCENARIO_EXAM), encoding="utf-8")
    questions_path.write_text(json.dumps(SCENARIO_QUESTIONS), encoding="utf-8")
    login_path.write_text(
        json.dumps([{"username": "demo", "password": "demo123", "name": "Demo Candidate"}]),
        encoding="utf-8",
    )
    return {"exam": str(exam_path), "questions": str(questions_path), "login": str(login_path)}
