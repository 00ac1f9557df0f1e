from .config import settings
from .generator import QuestionGenerator
from .results import ResultSink
from .sessions import SessionManager
from .terms import TermStore

term_store = TermStore(settings.DATA_DIR, settings.TERMS_FILE)
result_sink = ResultSink()
session_manager = SessionManager(result_sink)
question_generator = QuestionGenerator()


# --- Dependencies ---
def get_term_store() -> TermStore:
    return term_store


def get_result_sink() -> ResultSink:
    return result_sink


def get_session_manager() -> SessionManager:
    return session_manager


def get_question_generator() -> QuestionGenerator:
    return question_generator
