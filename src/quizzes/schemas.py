import uuid

from ninja import Schema
from pydantic import Field, field_validator, model_validator

from src.quizzes.models import QuestionType, QuizDifficulty


class OptionPayload(Schema):
    text: dict[str, str]
    is_correct: bool = False
    order: int = 0


class QuestionPayload(Schema):
    text: dict[str, str]
    explanation: dict[str, str] = Field(default_factory=dict)
    question_type: str = QuestionType.MULTIPLE_CHOICE.value
    points: int = Field(default=1, ge=1)
    order: int = 0
    options: list[OptionPayload] = Field(min_length=2)

    @field_validator("question_type")
    @classmethod
    def _validate_type(cls, v: str) -> str:
        value = v.strip().upper()
        if value not in QuestionType.values:
            raise ValueError(f"question_type must be one of {QuestionType.values}")
        return value

    @model_validator(mode="after")
    def _validate_options(self):
        correct = sum(1 for o in self.options if o.is_correct)
        if correct < 1:
            raise ValueError("each question needs at least one correct option")
        if self.question_type == QuestionType.TRUE_FALSE and (len(self.options) != 2 or correct != 1):
            raise ValueError("true/false questions need exactly two options, one of them correct")
        return self


def _difficulty(v: str | None) -> str | None:
    if v is None:
        return v
    value = v.strip().upper()
    if value not in QuizDifficulty.values:
        raise ValueError(f"difficulty must be one of {QuizDifficulty.values}")
    return value


class QuizCreatePayload(Schema):
    title: dict[str, str]
    description: dict[str, str] = Field(default_factory=dict)
    passing_score_percentage: int = Field(default=70, ge=0, le=100)
    time_limit_minutes: int | None = Field(default=None, ge=1)
    max_attempts: int = Field(default=0, ge=0)
    is_public: bool = True
    tags: list[str] = Field(default_factory=list)
    difficulty: str = QuizDifficulty.BEGINNER.value
    category: str = ""
    questions: list[QuestionPayload] = Field(default_factory=list)

    @field_validator("difficulty")
    @classmethod
    def _validate_difficulty(cls, v: str) -> str:
        return _difficulty(v)


class QuizUpdatePayload(Schema):
    title: dict[str, str] | None = None
    description: dict[str, str] | None = None
    passing_score_percentage: int | None = Field(default=None, ge=0, le=100)
    time_limit_minutes: int | None = Field(default=None, ge=1)
    max_attempts: int | None = Field(default=None, ge=0)
    is_public: bool | None = None
    tags: list[str] | None = None
    difficulty: str | None = None
    category: str | None = None
    # When given, replaces the whole question set
    questions: list[QuestionPayload] | None = None

    @field_validator("difficulty")
    @classmethod
    def _validate_difficulty(cls, v: str | None) -> str | None:
        return _difficulty(v)


class QuizFilterParams(Schema):
    tag: str | None = None
    difficulty: str | None = None
    category: str | None = None
    search: str | None = None


class AnswerPayload(Schema):
    question_id: uuid.UUID
    option_id: uuid.UUID


class SubmitAttemptPayload(Schema):
    answers: list[AnswerPayload] = Field(default_factory=list)
