"""Whole-glossary export and import in the JSON snapshot format."""

import logging
from datetime import datetime
from typing import Any, Dict

from pydantic import ValidationError

from .models import Snapshot
from .results import ResultSink
from .terms import TermStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"


class SnapshotError(ValueError):
    """Raised when an imported snapshot is malformed."""


def export_snapshot(term_store: TermStore, result_sink: ResultSink) -> Dict[str, Any]:
    snapshot = Snapshot(
        terms=term_store.get_all_terms(),
        test_results=result_sink.get_results(),
        exported_at=datetime.now(),
        version=SNAPSHOT_VERSION,
    )
    return snapshot.model_dump(mode="json", by_alias=True)


def import_snapshot(
    data: Any, term_store: TermStore, result_sink: ResultSink
) -> Snapshot:
    """
    Replace the stored glossary with the contents of ``data``.

    Answer history is replaced only when ``testResults`` is a list; otherwise
    the existing history is kept.

    Raises:
        SnapshotError: If ``data`` has no ``terms`` list or fails validation.
    """
    if not isinstance(data, dict) or not isinstance(data.get("terms"), list):
        raise SnapshotError("Invalid data format: 'terms' must be a list")

    has_results = isinstance(data.get("testResults"), list)
    payload = dict(data)
    if not has_results:
        payload.pop("testResults", None)

    try:
        snapshot = Snapshot.model_validate(payload)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e.error_count()} errors") from e

    term_store.save_terms(snapshot.terms)
    if has_results:
        result_sink.replace_results(snapshot.test_results)

    logger.info(
        f"Imported snapshot v{snapshot.version}: {len(snapshot.terms)} terms, "
        f"{len(snapshot.test_results) if has_results else 'no'} results"
    )
    return snapshot
