import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional

from .config import settings
from .models import AnswerResult, QuizBatch, ResultSummary, SessionData
from .results import ResultSink

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised when an answer cannot be recorded for a session."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


def grade_for(percentage: int) -> str:
    if percentage >= 80:
        return "excellent"
    if percentage >= 60:
        return "good"
    return "review"


class SessionManager:
    """Tracks running quizzes and forwards each answer to the result sink."""

    def __init__(
        self,
        result_sink: ResultSink,
        timeout_minutes: int = settings.SESSION_TIMEOUT_MINUTES,
    ):
        self.result_sink = result_sink
        self.timeout = timedelta(minutes=timeout_minutes)
        self.sessions: Dict[str, SessionData] = {}

    def start(self, batch: QuizBatch, category: Optional[str] = None) -> str:
        session_id = str(uuid.uuid4())
        self.sessions[session_id] = SessionData(
            prepared_questions=batch.questions,
            correct_count=0,
            total_questions=len(batch.questions),
            answers=[],
            created_at=datetime.now(),
            skipped=batch.skipped,
            category=category,
        )
        logger.info(
            f"New session: {session_id} "
            f"[Questions: {len(batch.questions)}, Category: {category or 'all'}]"
        )
        return session_id

    def get_active_session(self, session_id: Optional[str]) -> Optional[SessionData]:
        if not session_id or session_id not in self.sessions:
            return None
        session = self.sessions[session_id]
        if datetime.now() - session.created_at > self.timeout:
            del self.sessions[session_id]
            logger.info(f"Session expired: {session_id}")
            return None
        return session

    def submit_answer(
        self, session_id: Optional[str], current_index: int, selected_option_index: int
    ) -> AnswerResult:
        session = self.get_active_session(session_id)
        if not session or not (0 <= current_index < session.total_questions):
            raise SessionError("Invalid session", status_code=401)
        if current_index < len(session.answers):
            raise SessionError("Already answered")
        if current_index > len(session.answers):
            raise SessionError("Answer previous questions first")

        question = session.prepared_questions[current_index]
        if not (0 <= selected_option_index < len(question.options)):
            raise SessionError("Invalid option")

        selected = question.options[selected_option_index]
        result = AnswerResult(
            question_id=question.id,
            selected_answer=selected,
            is_correct=selected == question.correct_answer,
            answered_at=datetime.now(),
        )
        if result.is_correct:
            session.correct_count += 1
        session.answers.append(result)
        self.result_sink.save_result(result)
        return result

    def summarize(self, session: SessionData) -> ResultSummary:
        total = session.total_questions
        score = round((session.correct_count / total) * 100) if total > 0 else 0
        return ResultSummary(
            correct_count=session.correct_count,
            total_questions=total,
            score_percentage=score,
            grade=grade_for(score),
            answers=session.answers,
        )

    def reset(self, session_id: Optional[str]) -> bool:
        if session_id in self.sessions:
            del self.sessions[session_id]
            return True
        return False
