"""
services/shuffle_service.py

문제/보기 순서 섞기와 정답 라벨 재계산.
순수 Python 함수로 구성 — 입력 리스트와 Question 객체는 변경하지 않는다.

주의: 정답 재계산은 보기 텍스트의 동등 비교로 새 위치를 찾는다.
한 문제 안에 같은 텍스트의 보기가 둘 이상 있으면 첫 번째 일치 항목이 선택된다.
입력 데이터가 보기 텍스트의 유일성을 보장해야 한다.
"""

import random
from typing import List, Optional, Sequence, TypeVar

from mock_exam.models.question_model import ExamMeta, Question, index_for, label_for

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    items의 무작위 순열을 새 리스트로 반환한다 (Fisher-Yates).

    random.Random.shuffle 은 마지막 인덱스부터 1까지 내려가며
    0..i 범위에서 균등하게 고른 위치와 교환한다.

    Args:
        items: 섞을 시퀀스 (변경되지 않음).
        rng:   난수 생성기. 테스트에서는 시드를 고정한 Random을 주입.
    """
    result = list(items)
    (rng or random).shuffle(result)
    return result


def remap_correct_answers(
    original_options: Sequence[str],
    correct_answers: Sequence[str],
    new_options: Sequence[str],
) -> List[str]:
    """
    보기 순서가 바뀐 뒤 정답 라벨을 새 순서 기준으로 다시 계산한다.

    원래 라벨 → 원래 인덱스 → 보기 텍스트 → 새 리스트에서의 인덱스 → 새 라벨.
    결과 라벨 수와 순서는 입력과 같다.

    Raises:
        ValueError: new_options 가 original_options 의 순열이 아닐 때.
    """
    new_options = list(new_options)
    remapped = []
    for label in correct_answers:
        option_text = original_options[index_for(label)]
        remapped.append(label_for(new_options.index(option_text)))
    return remapped


def shape_question(
    question: Question,
    shuffle_options: bool,
    rng: Optional[random.Random] = None,
) -> Question:
    """단일 문제의 보기를 (필요 시) 섞고 정답 라벨을 맞춘 사본을 반환."""
    options = shuffle(question.options, rng) if shuffle_options else list(question.options)
    correct = remap_correct_answers(question.options, question.correct_answers, options)
    return question.model_copy(update={"options": options, "correct_answers": correct})


def shape_questions(
    questions: Sequence[Question],
    meta: ExamMeta,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    시험 설정에 따라 문제 순서와 각 문제의 보기 순서를 섞는다.

    Returns:
        정답 라벨이 새 보기 순서에 맞게 재계산된 Question 사본 리스트.
        셔플 플래그가 모두 꺼져 있으면 원본과 같은 순서/내용의 사본.
    """
    ordered = shuffle(questions, rng) if meta.shuffle_questions else list(questions)
    return [shape_question(q, meta.shuffle_options, rng) for q in ordered]
