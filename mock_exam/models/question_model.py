from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_OPTIONS = 26
MAX_DURATION_MINUTES = 24 * 60


def label_for(index: int) -> str:
    """0 → "A", 1 → "B", ..."""
    return chr(ord("A") + index)


def index_for(label: str) -> int:
    """"A" → 0, "B" → 1, ..."""
    return ord(label) - ord("A")


class Question(BaseModel):
    """
    객관식 문제 모델
    Pydantic v2 적용

    정답 라벨(correct_answers)은 현재 보기 순서 기준의 위치 문자이다.
    보기를 섞으면 라벨도 다시 계산해야 한다 (shuffle_service 참고).
    """
    id: int = Field(
        ...,
        description="문제 번호 (고유 식별자, 셔플 후에도 유지)"
    )
    question: str = Field(
        ...,
        min_length=1,
        description="문제 내용"
    )
    options: List[str] = Field(
        ...,
        description="보기 리스트 (현재 표시 순서)"
    )
    correct_answers: List[str] = Field(
        ...,
        description='정답 라벨 리스트 (예: ["A", "C"])'
    )

    @property
    def is_multi_answer(self) -> bool:
        return len(self.correct_answers) > 1

    def labels(self) -> List[str]:
        return [label_for(i) for i in range(len(self.options))]

    @field_validator('options')
    @classmethod
    def validate_options_length(cls, v: List[str]) -> List[str]:
        """
        검증 로직 1: 보기는 1개 이상, 26개(A~Z) 이하여야 한다.
        """
        if not v:
            raise ValueError("보기(options)가 비어 있습니다.")
        if len(v) > MAX_OPTIONS:
            raise ValueError(f"보기(options)는 최대 {MAX_OPTIONS}개까지 허용됩니다.")
        return v

    @field_validator('correct_answers')
    @classmethod
    def validate_labels(cls, v: List[str]) -> List[str]:
        """
        검증 로직 2: 정답 라벨은 비어 있지 않고, 중복 없는 대문자 한 글자여야 한다.
        """
        if not v:
            raise ValueError("정답(correct_answers)이 비어 있습니다.")
        for label in v:
            if len(label) != 1 or not ("A" <= label <= "Z"):
                raise ValueError(f"잘못된 정답 라벨입니다: {label!r}")
        if len(set(v)) != len(v):
            raise ValueError(f"정답 라벨이 중복되었습니다: {v}")
        return v

    @model_validator(mode='after')
    def validate_labels_in_range(self) -> 'Question':
        """
        검증 로직 3: 모든 정답 라벨은 실제 보기 위치를 가리켜야 한다.
        """
        for label in self.correct_answers:
            if index_for(label) >= len(self.options):
                raise ValueError(
                    f"정답('{label}')이 보기 범위(A~{label_for(len(self.options) - 1)})를 벗어났습니다."
                )
        return self

    def has_duplicate_options(self) -> bool:
        return len(set(self.options)) != len(self.options)


class ExamMeta(BaseModel):
    """
    시험 메타데이터 (exam.json).
    JSON 키는 camelCase, 파이썬 속성은 snake_case.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="시험 제목")
    duration_minutes: float = Field(
        ...,
        le=MAX_DURATION_MINUTES,
        allow_inf_nan=False,
        alias="durationMinutes",
        description="제한 시간 (분). 1분 미만은 1분으로 보정, 최대 24시간"
    )
    shuffle_questions: bool = Field(False, alias="shuffleQuestions")
    shuffle_options: bool = Field(False, alias="shuffleOptions")
    pass_percentage: float = Field(
        60.0,
        ge=0,
        le=100,
        allow_inf_nan=False,
        alias="passPercentage",
        description="합격 기준 점수 (%)"
    )

    @field_validator('duration_minutes')
    @classmethod
    def coerce_duration(cls, v: float) -> float:
        return max(1.0, v)

    @property
    def duration_seconds(self) -> int:
        return int(round(self.duration_minutes * 60))


class LoginUser(BaseModel):
    """login.json 항목. 평문 비교용 (보안 목적 아님)."""
    username: str
    password: str
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.username
