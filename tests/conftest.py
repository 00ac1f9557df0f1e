"""Shared fixtures for termmemo tests."""

from typing import List, Optional

import pytest

from termmemo.config import settings
from termmemo.database import init_db
from termmemo.models import AnswerResult, Term
from termmemo.results import ResultSink
from termmemo.terms import TermStore


def make_term(word: str, meaning: str, category: Optional[str] = None) -> Term:
    return Term(word=word, meaning=meaning, category=category)


class MemorySink(ResultSink):
    """Result sink that keeps answers in a list instead of SQLite."""

    def __init__(self):
        self.saved: List[AnswerResult] = []

    def save_result(self, result: AnswerResult) -> None:
        self.saved.append(result)

    def get_results(self) -> List[AnswerResult]:
        return list(self.saved)


@pytest.fixture
def four_terms() -> List[Term]:
    """Two categories with two terms each, all meanings distinct."""
    return [
        make_term("A", "m1", "X"),
        make_term("B", "m2", "X"),
        make_term("C", "m3", "Y"),
        make_term("D", "m4", "Y"),
    ]


@pytest.fixture
def many_terms() -> List[Term]:
    return [
        make_term(f"word{i}", f"meaning{i}", "even" if i % 2 == 0 else "odd")
        for i in range(12)
    ]


@pytest.fixture(autouse=True)
def db(tmp_path, monkeypatch):
    """Point the SQLite database at a temporary directory."""
    monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    init_db()
    return tmp_path


@pytest.fixture
def term_store(tmp_path) -> TermStore:
    return TermStore(str(tmp_path / "data"))
