import json
import logging

import pytest
from pydantic import ValidationError

from mock_exam.models.question_model import ExamMeta, LoginUser, Question
from mock_exam.services.data_loader import (
    FALLBACK_EXAM, FALLBACK_QUESTIONS, authenticate, load_exam_bundle, load_login_users,
)


def _write(path, payload):
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return str(path)


class TestModels:
    def test_meta_wire_names(self):
        meta = ExamMeta.model_validate({
            "title": "T", "durationMinutes": 5, "shuffleQuestions": True,
            "shuffleOptions": False, "passPercentage": 75,
        })
        assert meta.shuffle_questions is True
        assert meta.duration_seconds == 300
        assert meta.pass_percentage == 75

    @pytest.mark.parametrize("minutes", [0, -4, 0.5])
    def test_duration_coerced_upward(self, minutes):
        meta = ExamMeta(title="T", duration_minutes=minutes)
        assert meta.duration_seconds == 60

    def test_pass_percentage_range(self):
        with pytest.raises(ValidationError):
            ExamMeta(title="T", duration_minutes=5, pass_percentage=101)

    @pytest.mark.parametrize("correct", [[], ["E"], ["a"], ["A", "A"], ["AB"]])
    def test_bad_labels_rejected(self, correct):
        with pytest.raises(ValidationError):
            Question(id=1, question="q", options=["w", "x", "y", "z"], correct_answers=correct)

    def test_empty_options_rejected(self):
        with pytest.raises(ValidationError):
            Question(id=1, question="q", options=[], correct_answers=["A"])

    def test_single_option_allowed(self):
        q = Question(id=1, question="q", options=["only"], correct_answers=["A"])
        assert q.labels() == ["A"]

    @pytest.mark.parametrize("minutes", [float("inf"), float("-inf"), float("nan"), 1e308, 24 * 60 + 1])
    def test_unusable_duration_rejected(self, minutes):
        with pytest.raises(ValidationError):
            ExamMeta(title="T", duration_minutes=minutes)

    def test_duration_upper_bound_allowed(self):
        assert ExamMeta(title="T", duration_minutes=24 * 60).duration_seconds == 86400

    def test_duplicate_options_detected(self):
        q = Question(id=1, question="q", options=["x", "x", "y"], correct_answers=["C"])
        assert q.has_duplicate_options()


class TestLoadExamBundle:
    def test_loads_files(self, data_files):
        bundle = load_exam_bundle(data_files["exam"], data_files["questions"])
        assert bundle.is_fallback is False
        assert bundle.meta.title == "Scenario Exam"
        assert [q.id for q in bundle.questions] == [1, 2]

    def test_missing_file_falls_back(self, tmp_path, data_files, caplog):
        with caplog.at_level(logging.WARNING):
            bundle = load_exam_bundle(str(tmp_path / "nope.json"), data_files["questions"])
        assert bundle.is_fallback is True
        assert bundle.meta == FALLBACK_EXAM
        assert bundle.questions == FALLBACK_QUESTIONS
        assert "내장 샘플 시험" in caplog.text

    def test_malformed_json_falls_back(self, tmp_path, data_files):
        bad = _write(tmp_path / "bad.json", "{not json")
        assert load_exam_bundle(data_files["exam"], bad).is_fallback is True

    def test_wrong_shape_falls_back(self, tmp_path, data_files):
        bad = _write(tmp_path / "bad.json", {"questions": []})
        assert load_exam_bundle(data_files["exam"], bad).is_fallback is True

    def test_out_of_range_label_falls_back(self, tmp_path, data_files):
        bad = _write(tmp_path / "bad.json", [
            {"id": 1, "question": "q", "options": ["a", "b"], "correct_answers": ["C"]},
        ])
        assert load_exam_bundle(data_files["exam"], bad).is_fallback is True

    def test_duplicate_ids_fall_back(self, tmp_path, data_files):
        q = {"id": 1, "question": "q", "options": ["a", "b"], "correct_answers": ["A"]}
        bad = _write(tmp_path / "bad.json", [q, q])
        assert load_exam_bundle(data_files["exam"], bad).is_fallback is True

    def test_invalid_utf8_falls_back(self, tmp_path, data_files):
        bad = tmp_path / "bad.json"
        bad.write_bytes(b'[{"id": 1, "question": "\xff\xfe", "options": ["a"], "correct_answers": ["A"]}]')
        bundle = load_exam_bundle(data_files["exam"], str(bad))
        assert bundle.is_fallback is True
        assert bundle.questions == FALLBACK_QUESTIONS

    @pytest.mark.parametrize("duration", ["Infinity", "-Infinity", "NaN", "1e308", "1e400"])
    def test_unusable_duration_falls_back(self, tmp_path, data_files, duration):
        # json 모듈은 Infinity / NaN 리터럴을 그대로 float 로 읽는다
        bad = _write(tmp_path / "bad_exam.json", '{"title": "T", "durationMinutes": %s}' % duration)
        bundle = load_exam_bundle(bad, data_files["questions"])
        assert bundle.is_fallback is True
        assert bundle.meta == FALLBACK_EXAM

    def test_single_option_question_loads(self, tmp_path, data_files):
        single = _write(tmp_path / "single.json", [
            {"id": 3, "question": "q", "options": ["only"], "correct_answers": ["A"]},
        ])
        bundle = load_exam_bundle(data_files["exam"], single)
        assert bundle.is_fallback is False
        assert bundle.questions[0].options == ["only"]

    def test_empty_bank_is_not_fallback(self, tmp_path, data_files):
        empty = _write(tmp_path / "empty.json", [])
        bundle = load_exam_bundle(data_files["exam"], empty)
        assert bundle.is_fallback is False
        assert bundle.questions == []

    def test_duplicate_option_text_warns(self, tmp_path, data_files, caplog):
        dup = _write(tmp_path / "dup.json", [
            {"id": 7, "question": "q", "options": ["same", "same", "x"], "correct_answers": ["B"]},
        ])
        with caplog.at_level(logging.WARNING):
            bundle = load_exam_bundle(data_files["exam"], dup)
        assert bundle.is_fallback is False
        assert "Q7" in caplog.text

    def test_fallback_exam_is_consistent(self):
        assert FALLBACK_EXAM.duration_seconds == 600
        assert FALLBACK_EXAM.shuffle_questions and FALLBACK_EXAM.shuffle_options
        assert [q.correct_answers for q in FALLBACK_QUESTIONS] == [["B"], ["A", "B", "D"]]


class TestLogin:
    def test_authenticate(self, data_files):
        users = load_login_users(data_files["login"])
        user = authenticate(users, "demo", "demo123")
        assert user is not None
        assert user.display_name == "Demo Candidate"
        assert authenticate(users, "demo", "wrong") is None

    def test_display_name_defaults_to_username(self):
        assert LoginUser(username="bob", password="x").display_name == "bob"

    def test_missing_login_file(self, tmp_path):
        assert load_login_users(str(tmp_path / "none.json")) == []

    def test_invalid_utf8_login_file(self, tmp_path):
        bad = tmp_path / "login.json"
        bad.write_bytes(b'[{"username": "\xff", "password": "x"}]')
        assert load_login_users(str(bad)) == []
