import random

import pytest

from mock_exam.models.question_model import index_for
from mock_exam.services.exam_session import ExamSession
from mock_exam.services.timer import ManualScheduler


def _answer_correctly(exam: ExamSession, question_id: int) -> None:
    for label in exam.get_question(question_id).correct_answers:
        exam.select(question_id, label)


class TestSelect:
    def test_single_answer_replaces(self, exam):
        exam.select(1, "A")
        exam.select(1, "C")
        assert exam.state.selected(1) == {"C"}

    def test_single_answer_reselect_clears(self, exam):
        exam.select(1, "B")
        exam.select(1, "B")
        assert exam.state.selected(1) == set()
        assert not exam.state.is_answered(1)

    def test_single_answer_never_more_than_one(self, exam):
        for label in "ABCDABDC":
            exam.select(1, label)
            assert len(exam.state.selected(1)) <= 1

    def test_multi_answer_toggles(self, exam):
        exam.select(2, "A")
        exam.select(2, "C")
        exam.select(2, "D")
        assert exam.state.selected(2) == {"A", "C", "D"}
        exam.select(2, "C")
        assert exam.state.selected(2) == {"A", "D"}

    def test_selection_order_is_irrelevant(self, meta, questions, scheduler):
        results = set()
        for order in (["A", "B", "D"], ["D", "A", "B"], ["B", "D", "A"]):
            session = ExamSession(meta, questions, scheduler=ManualScheduler(), autostart=False)
            for label in order:
                session.select(2, label)
            results.add(session.preview().details[1].is_correct)
        assert results == {True}

    def test_rejected_after_submit(self, exam):
        exam.submit()
        assert exam.select(1, "B") is False
        assert exam.state.selected(1) == set()

    def test_invalid_input(self, exam):
        with pytest.raises(ValueError):
            exam.select(99, "A")
        with pytest.raises(ValueError):
            exam.select(1, "E")
        with pytest.raises(ValueError):
            exam.select(1, "AB")

    def test_mode_follows_current_correct_answers(self, shuffled_exam):
        single = next(q for q in shuffled_exam.questions if len(q.correct_answers) == 1)
        shuffled_exam.select(single.id, "A")
        shuffled_exam.select(single.id, "B")
        assert shuffled_exam.state.selected(single.id) == {"B"}


class TestNavigation:
    def test_clamps(self, exam):
        assert exam.navigate(5) == 1
        assert exam.navigate(-3) == 0

    def test_next_previous_boundaries(self, exam):
        assert exam.previous() == 0
        assert exam.next() == 1
        assert exam.next() == 1
        assert exam.previous() == 0

    def test_allowed_after_submit(self, exam):
        exam.submit()
        assert exam.next() == 1


class TestFlagsAndReveal:
    def test_toggle_flag(self, exam):
        assert exam.toggle_flag(1) is True
        assert exam.toggle_flag(1) is False
        exam.submit()
        assert exam.toggle_flag(2) is True

    def test_toggle_reveal(self, exam):
        assert exam.question_view(0)["revealed"] is False
        exam.toggle_reveal(1)
        assert exam.question_view(0)["revealed"] is True

    def test_submit_reveals_all(self, exam):
        exam.submit()
        assert all(item["revealed"] for item in exam.navigator())

    def test_unknown_question(self, exam):
        with pytest.raises(ValueError):
            exam.toggle_flag(42)


class TestSubmit:
    def test_idempotent(self, exam, fixed_clock):
        first = exam.submit()
        second = exam.submit()
        assert first is not None
        assert first.user == "tester"
        assert first.timestamp == fixed_clock()
        assert second is None
        assert len(exam.attempts) == 1
        assert exam.is_submitted

    def test_stops_timer(self, exam, scheduler):
        assert exam.timer_running
        exam.submit()
        assert not exam.timer_running
        assert scheduler.advance(5) == 0
        assert exam.time_left == 600

    def test_preview_does_not_mutate(self, exam):
        exam.select(1, "B")
        before = exam.state.model_copy(deep=True)
        preview = exam.preview()
        assert preview.correct == 1
        assert exam.state == before
        assert exam.result() is None

    def test_scenario_a_all_correct(self, exam):
        exam.select(1, "B")
        for label in ("A", "B", "D"):
            exam.select(2, label)
        attempt = exam.submit()
        result = exam.result()
        assert attempt.score == 100
        assert (result.score, result.correct, result.passed) == (100, 2, True)

    def test_scenario_b_wrong_and_incomplete(self, exam):
        exam.select(1, "A")
        exam.select(2, "A")
        exam.select(2, "B")
        exam.submit()
        result = exam.result()
        assert (result.score, result.correct, result.passed) == (0, 0, False)

    def test_scenario_d_zero_questions(self, meta, scheduler):
        session = ExamSession(meta, [], scheduler=scheduler)
        assert not session.is_ready
        assert session.question_view() is None
        attempt = session.submit()
        assert attempt.score == 0
        assert session.result().score == 0
        assert session.restart() is False


class TestTimer:
    def test_starts_with_full_duration(self, exam, scheduler):
        assert exam.time_left == 600
        assert scheduler.running
        scheduler.advance(3)
        assert exam.time_left == 597

    def test_scenario_c_auto_submit(self, exam, scheduler):
        for label in ("A", "B", "D"):
            exam.select(2, label)
        assert scheduler.advance(599) == 599
        assert exam.time_left == 1
        assert not exam.is_submitted

        scheduler.advance(1)
        assert exam.time_left == 0
        assert exam.is_submitted
        assert len(exam.attempts) == 1
        assert exam.attempts[0].score == 50

        assert scheduler.advance(30) == 0
        assert exam.time_left == 0
        assert len(exam.attempts) == 1

    def test_manual_submit_then_late_tick(self, exam):
        exam.submit()
        exam.tick()
        assert exam.time_left == 600
        assert len(exam.attempts) == 1

    def test_close_stops_timer(self, exam, scheduler):
        exam.close()
        assert scheduler.advance(10) == 0
        assert exam.time_left == 600

    def test_no_autostart(self, meta, questions):
        scheduler = ManualScheduler()
        session = ExamSession(meta, questions, scheduler=scheduler, autostart=False)
        assert not scheduler.running
        session.start_timer()
        assert scheduler.running


class TestRestart:
    def test_full_reset(self, shuffled_exam, scheduler):
        qid = shuffled_exam.questions[0].id
        shuffled_exam.select(qid, "A")
        shuffled_exam.toggle_flag(qid)
        shuffled_exam.toggle_reveal(qid)
        shuffled_exam.next()
        scheduler.advance(42)
        shuffled_exam.submit()

        assert shuffled_exam.restart() is True
        state = shuffled_exam.state
        assert state.user_answers == {}
        assert state.flagged == {}
        assert state.revealed == {}
        assert state.current_quest_index == 0
        assert state.is_submitted is False
        assert state.time_left == 600
        assert shuffled_exam.timer_running
        assert len(shuffled_exam.attempts) == 1

    def test_single_timer_after_restart(self, exam, scheduler):
        exam.restart()
        exam.restart()
        scheduler.advance(5)
        assert exam.time_left == 595

    def test_reshuffle_keeps_answer_keys_consistent(self, shuffled_meta, questions):
        originals = {q.id: {q.options[index_for(l)] for l in q.correct_answers} for q in questions}
        session = ExamSession(
            shuffled_meta, questions, scheduler=ManualScheduler(), rng=random.Random(11), autostart=False
        )
        for _ in range(10):
            session.restart()
            for q in session.questions:
                assert {q.options[index_for(l)] for l in q.correct_answers} == originals[q.id]

    def test_answers_correct_after_reshuffle(self, shuffled_exam):
        for q in shuffled_exam.questions:
            _answer_correctly(shuffled_exam, q.id)
        shuffled_exam.submit()
        assert shuffled_exam.result().score == 100

        shuffled_exam.restart()
        for q in shuffled_exam.questions:
            _answer_correctly(shuffled_exam, q.id)
        shuffled_exam.submit()
        assert [a.score for a in shuffled_exam.attempts] == [100, 100]


class TestViews:
    def test_snapshot(self, exam, scheduler):
        exam.select(1, "B")
        scheduler.advance(30)
        snap = exam.snapshot()
        assert snap["title"] == "Scenario Exam"
        assert snap["time_display"] == "09:30"
        assert snap["progress"] == {"answered": 1, "total": 2}
        assert snap["time_warning"] is False

    def test_submit_confirmation(self, exam):
        exam.select(1, "B")
        exam.toggle_flag(2)
        assert exam.submit_confirmation() == {"answered": 1, "total": 2, "has_flagged": True}

    def test_question_view_out_of_range(self, exam):
        with pytest.raises(ValueError):
            exam.question_view(5)
