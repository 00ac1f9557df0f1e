import logging
from datetime import datetime
from typing import Iterable, List

from .database import get_db_connection
from .models import AnswerResult

logger = logging.getLogger(__name__)


class ResultSink:
    """Persists answered questions in the ``test_results`` table."""

    def save_result(self, result: AnswerResult) -> None:
        conn = get_db_connection()
        with conn:
            self._insert(conn, result)
        conn.close()

    def get_results(self) -> List[AnswerResult]:
        conn = get_db_connection()
        rows = conn.execute(
            "SELECT question_id, selected_answer, is_correct, answered_at "
            "FROM test_results ORDER BY id"
        ).fetchall()
        conn.close()
        return [
            AnswerResult(
                question_id=row["question_id"],
                selected_answer=row["selected_answer"],
                is_correct=bool(row["is_correct"]),
                answered_at=datetime.fromisoformat(row["answered_at"]),
            )
            for row in rows
        ]

    def replace_results(self, results: Iterable[AnswerResult]) -> int:
        conn = get_db_connection()
        count = 0
        with conn:
            conn.execute("DELETE FROM test_results")
            for result in results:
                self._insert(conn, result)
                count += 1
        conn.close()
        logger.info(f"Replaced answer history with {count} results")
        return count

    def clear_results(self) -> None:
        conn = get_db_connection()
        with conn:
            conn.execute("DELETE FROM test_results")
        conn.close()

    @staticmethod
    def _insert(conn, result: AnswerResult) -> None:
        conn.execute(
            "INSERT INTO test_results "
            "(question_id, selected_answer, is_correct, answered_at) "
            "VALUES (?, ?, ?, ?)",
            (
                result.question_id,
                result.selected_answer,
                int(result.is_correct),
                result.answered_at.isoformat(),
            ),
        )
