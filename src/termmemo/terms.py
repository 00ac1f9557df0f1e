import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from pydantic import ValidationError

from .models import Term, TermCreate, TermUpdate

logger = logging.getLogger(__name__)

SORT_KEYS = ("word", "created_at", "category")


def _cell(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


class TermStore:
    """Holds the glossary and persists it as a JSON file."""

    def __init__(self, directory: str, file_name: str = "terms.json"):
        self.directory = directory
        self.path = os.path.join(directory, file_name)
        self.terms: List[Term] = []
        self.load_all()

    def load_all(self):
        self.terms = []
        if not os.path.exists(self.path):
            logger.info(f"No glossary at {self.path}, starting empty.")
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError(
                    f"expected a list of terms, got {type(raw).__name__}"
                )
            self.terms = [Term.model_validate(item) for item in raw]
            logger.info(f"Loaded {len(self.terms)} terms from {self.path}")
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load {self.path}: {e}")
            self.terms = []

    def save_terms(self, terms: Iterable[Term]) -> None:
        self.terms = list(terms)
        if not os.path.exists(self.directory):
            os.makedirs(self.directory, exist_ok=True)
        payload = [t.model_dump(mode="json", by_alias=True) for t in self.terms]
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    # --- Queries ---
    def get_all_terms(self) -> List[Term]:
        return list(self.terms)

    def get_term(self, term_id: str) -> Optional[Term]:
        return next((t for t in self.terms if t.id == term_id), None)

    def get_terms_by_category(self, category: str) -> List[Term]:
        return [t for t in self.terms if t.category == category]

    def get_categories(self) -> List[str]:
        return list(dict.fromkeys(t.category for t in self.terms if t.category))

    def get_stats(self) -> Dict[str, Any]:
        return {
            "total_terms": len(self.terms),
            "category_count": len(self.get_categories()),
        }

    def search(
        self,
        query: str = "",
        category: Optional[str] = None,
        sort_by: str = "word",
    ) -> List[Term]:
        """
        Filter and order terms for listing.

        Args:
            query: Case-insensitive substring matched against word or meaning.
            category: Only keep terms in this category when given.
            sort_by: "word", "created_at" (newest first) or "category"
                (then word).

        Raises:
            ValueError: If sort_by is not recognized.
        """
        if sort_by not in SORT_KEYS:
            raise ValueError(
                f"Unknown sort key: {sort_by}. "
                f"Available keys: {', '.join(SORT_KEYS)}"
            )

        needle = query.lower()
        found = [
            t
            for t in self.terms
            if (needle in t.word.lower() or needle in t.meaning.lower())
            and (not category or t.category == category)
        ]

        if sort_by == "created_at":
            found.sort(key=lambda t: t.created_at, reverse=True)
        elif sort_by == "category":
            found.sort(
                key=lambda t: ((t.category or "").casefold(), t.word.casefold())
            )
        else:
            found.sort(key=lambda t: t.word.casefold())
        return found

    # --- Mutations ---
    def add_term(self, data: TermCreate) -> Term:
        term = Term(**data.model_dump())
        self.save_terms(self.terms + [term])
        logger.info(f"Added term '{term.word}' ({term.id})")
        return term

    def update_term(self, term_id: str, updates: TermUpdate) -> Optional[Term]:
        current = self.get_term(term_id)
        if current is None:
            return None

        changes = updates.model_dump(exclude_unset=True)
        merged = current.model_dump()
        merged.update(changes)
        merged["updated_at"] = datetime.now()
        updated = Term.model_validate(merged)

        self.save_terms(updated if t.id == term_id else t for t in self.terms)
        return updated

    def delete_term(self, term_id: str) -> bool:
        return self.delete_terms([term_id]) == 1

    def delete_terms(self, term_ids: Iterable[str]) -> int:
        ids = set(term_ids)
        remaining = [t for t in self.terms if t.id not in ids]
        deleted = len(self.terms) - len(remaining)
        if deleted:
            self.save_terms(remaining)
            logger.info(f"Deleted {deleted} terms")
        return deleted

    def import_csv(self, file_path: str, category: Optional[str] = None) -> int:
        """
        Append terms from a CSV file with ``word`` and ``meaning`` columns.

        Rows without a ``category`` column value fall back to ``category``,
        or to the file name when that is not given either. Rows that fail
        validation are skipped.

        Returns:
            Number of terms added.
        """
        df = pd.read_csv(file_path, encoding="utf-8", dtype=str)
        if "word" not in df.columns or "meaning" not in df.columns:
            raise ValueError(f"{file_path}: missing 'word' or 'meaning' column")

        default_category = (
            category or os.path.splitext(os.path.basename(file_path))[0]
        )
        added = []
        for record in df.to_dict("records"):
            try:
                added.append(
                    Term(
                        word=_cell(record["word"]) or "",
                        meaning=_cell(record["meaning"]) or "",
                        category=_cell(record.get("category")) or default_category,
                    )
                )
            except ValidationError as e:
                logger.warning(f"Skipping row {record}: {e.error_count()} errors")

        if added:
            self.save_terms(self.terms + added)
        logger.info(f"Imported {len(added)} terms from {file_path}")
        return len(added)
