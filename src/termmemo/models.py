import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Terms ---
class TermFields(CamelModel):
    reading: Optional[str] = None
    alias: Optional[str] = None
    common_name: Optional[str] = None
    abbreviation: Optional[str] = None
    image: Optional[str] = None


class Term(TermFields):
    id: str = Field(default_factory=_new_id)
    word: str
    meaning: str
    category: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("word", "meaning")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("category")
    @classmethod
    def _blank_category_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class TermCreate(TermFields):
    word: str
    meaning: str
    category: Optional[str] = None


class TermUpdate(TermFields):
    word: Optional[str] = None
    meaning: Optional[str] = None
    category: Optional[str] = None


# --- Quiz ---
class Question(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    word: str
    correct_answer: str
    options: List[str]
    category: Optional[str] = None
    term_id: str


class QuizBatch(BaseModel):
    """Questions produced by one batch call.

    A batch may hold fewer questions than requested: terms without enough
    distinct distractors are counted in ``skipped`` rather than raising.
    """

    questions: List[Question] = []
    requested: int = 0
    skipped: int = 0

    @property
    def is_short(self) -> bool:
        return len(self.questions) < self.requested

    def __len__(self) -> int:
        return len(self.questions)


class AnswerResult(CamelModel):
    question_id: str
    selected_answer: str
    is_correct: bool
    answered_at: datetime = Field(default_factory=datetime.now)


class SessionData(BaseModel):
    prepared_questions: List[Question]
    correct_count: int
    total_questions: int
    answers: List[AnswerResult]
    created_at: datetime
    skipped: int = 0
    category: Optional[str] = None


class ResultSummary(BaseModel):
    correct_count: int
    total_questions: int
    score_percentage: int
    grade: str
    answers: List[AnswerResult]


# --- Snapshot ---
class Snapshot(CamelModel):
    terms: List[Term]
    test_results: List[AnswerResult] = []
    exported_at: datetime = Field(default_factory=datetime.now)
    version: str = "1.0"


class TermIds(BaseModel):
    ids: List[str]
