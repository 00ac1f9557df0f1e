import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Cookie, Depends, Form, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import settings
from .generator import QuestionGenerator
from .globals import (
    get_question_generator,
    get_result_sink,
    get_session_manager,
    get_term_store,
)
from .models import AnswerResult, Term, TermCreate, TermIds, TermUpdate
from .results import ResultSink
from .sessions import SessionError, SessionManager
from .snapshot import SnapshotError, export_snapshot, import_snapshot
from .terms import TermStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


# --- Terms ---


@router.get("/api/terms")
async def list_terms(
    q: str = "",
    category: Optional[str] = None,
    sort_by: str = "word",
    store: TermStore = Depends(get_term_store),
):
    try:
        return store.search(q, category, sort_by)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)


@router.post("/api/terms", response_model=Term, status_code=201)
def create_term(data: TermCreate, store: TermStore = Depends(get_term_store)):
    try:
        return store.add_term(data)
    except ValidationError as e:
        return JSONResponse(
            {"error": f"Invalid term: {e.error_count()} errors"}, status_code=400
        )


@router.post("/api/terms/delete")
def delete_terms(data: TermIds, store: TermStore = Depends(get_term_store)):
    return {"deleted": store.delete_terms(data.ids)}


@router.get("/api/terms/{term_id}", response_model=Term)
async def get_term(term_id: str, store: TermStore = Depends(get_term_store)):
    term = store.get_term(term_id)
    if term is None:
        return JSONResponse({"error": "Term not found"}, status_code=404)
    return term


@router.patch("/api/terms/{term_id}", response_model=Term)
def update_term(
    term_id: str, updates: TermUpdate, store: TermStore = Depends(get_term_store)
):
    try:
        term = store.update_term(term_id, updates)
    except ValidationError as e:
        return JSONResponse(
            {"error": f"Invalid term: {e.error_count()} errors"}, status_code=400
        )
    if term is None:
        return JSONResponse({"error": "Term not found"}, status_code=404)
    return term


@router.delete("/api/terms/{term_id}")
def delete_term(term_id: str, store: TermStore = Depends(get_term_store)):
    if not store.delete_term(term_id):
        return JSONResponse({"error": "Term not found"}, status_code=404)
    return {"status": "success"}


@router.get("/api/categories")
async def get_categories(store: TermStore = Depends(get_term_store)):
    return store.get_categories()


@router.get("/api/stats")
async def get_stats(store: TermStore = Depends(get_term_store)):
    return store.get_stats()


# --- Quiz ---


@router.get("/api/quiz/eligibility")
async def get_eligibility(
    store: TermStore = Depends(get_term_store),
    generator: QuestionGenerator = Depends(get_question_generator),
):
    terms = store.get_all_terms()
    return {
        "can_generate": generator.can_generate(terms),
        "term_count": len(terms),
        "question_counts": list(settings.QUESTION_COUNTS),
    }


@router.post("/start")
async def start_quiz_session(
    count: int = Form(settings.TEST_SIZE),
    category: Optional[str] = Form(None),
    store: TermStore = Depends(get_term_store),
    generator: QuestionGenerator = Depends(get_question_generator),
    manager: SessionManager = Depends(get_session_manager),
):
    if count not in settings.QUESTION_COUNTS:
        count = settings.TEST_SIZE

    terms = store.get_all_terms()
    if not generator.can_generate(terms):
        return JSONResponse(
            {"error": f"At least {generator.min_terms} terms are required"},
            status_code=400,
        )

    batch = generator.generate_batch(count, terms, category=category or None)
    if not batch.questions:
        return JSONResponse(
            {"error": "No question could be generated"}, status_code=400
        )

    new_id = manager.start(batch, category=category or None)

    response = JSONResponse(
        {
            "total_questions": len(batch),
            "requested": batch.requested,
            "skipped": batch.skipped,
        }
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="Lax",
    )
    return response


@router.get("/api/quiz/{index}")
async def get_question_data(
    index: int,
    session_id: Optional[str] = Depends(get_session_id),
    manager: SessionManager = Depends(get_session_manager),
):
    session_data = manager.get_active_session(session_id)
    if not session_data:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    if not (0 <= index < session_data.total_questions):
        return JSONResponse({"error": "Index error"}, status_code=404)

    current_q = session_data.prepared_questions[index]
    record = session_data.answers[index] if index < len(session_data.answers) else None

    return {
        "word": current_q.word,
        "category": current_q.category,
        "options": current_q.options,
        "current_index": index,
        "total_questions": session_data.total_questions,
        "answer_record": record,
        # Revealed only after the question has been answered.
        "correct_answer": current_q.correct_answer if record else None,
    }


@router.post("/submit_answer", response_model=AnswerResult)
def submit_answer(
    selected_option_index: int = Form(...),
    current_index: int = Form(...),
    session_id: Optional[str] = Depends(get_session_id),
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        return manager.submit_answer(session_id, current_index, selected_option_index)
    except SessionError as e:
        return JSONResponse({"error": str(e)}, status_code=e.status_code)


@router.get("/api/result")
async def get_result_data(
    session_id: Optional[str] = Depends(get_session_id),
    manager: SessionManager = Depends(get_session_manager),
):
    session_data = manager.get_active_session(session_id)
    if not session_data:
        return JSONResponse({"error": "Session invalid"}, status_code=401)
    return manager.summarize(session_data)


@router.post("/api/reset")
async def reset_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    manager: SessionManager = Depends(get_session_manager),
):
    manager.reset(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}


# --- Answer history & snapshots ---


@router.get("/api/results")
def get_results(sink: ResultSink = Depends(get_result_sink)):
    return sink.get_results()


@router.delete("/api/results")
def clear_results(sink: ResultSink = Depends(get_result_sink)):
    sink.clear_results()
    return {"status": "success"}


@router.get("/api/export")
def export_data(
    store: TermStore = Depends(get_term_store),
    sink: ResultSink = Depends(get_result_sink),
):
    return export_snapshot(store, sink)


@router.post("/api/import")
def import_data(
    data: Dict[str, Any] = Body(...),
    store: TermStore = Depends(get_term_store),
    sink: ResultSink = Depends(get_result_sink),
):
    try:
        snapshot = import_snapshot(data, store, sink)
    except SnapshotError as e:
        logger.warning(f"Rejected snapshot import: {e}")
        return JSONResponse({"error": str(e)}, status_code=400)
    return {"status": "success", "terms": len(snapshot.terms)}
