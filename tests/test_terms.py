"""Tests for the JSON-backed term store."""

import json
from datetime import datetime, timedelta

import pytest

from termmemo.models import Term, TermCreate, TermUpdate
from termmemo.terms import TermStore


def add(store: TermStore, word: str, meaning: str, category=None) -> Term:
    return store.add_term(TermCreate(word=word, meaning=meaning, category=category))


class TestTermStorePersistence:
    """Tests for loading and saving."""

    def test_empty_when_no_file(self, term_store):
        assert term_store.get_all_terms() == []

    def test_add_persists(self, tmp_path, term_store):
        term = add(term_store, "API", "Application Programming Interface", "IT")

        reloaded = TermStore(str(tmp_path / "data"))
        assert [t.id for t in reloaded.get_all_terms()] == [term.id]
        assert reloaded.get_term(term.id).category == "IT"

    def test_file_uses_camel_case(self, tmp_path, term_store):
        add(term_store, "API", "interface")

        with open(tmp_path / "data" / "terms.json", encoding="utf-8") as f:
            raw = json.load(f)
        assert "createdAt" in raw[0]
        assert "commonName" in raw[0]

    def test_corrupt_file_loads_empty(self, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "terms.json").write_text("{not json", encoding="utf-8")

        assert TermStore(str(data_dir)).get_all_terms() == []

    @pytest.mark.parametrize("content", ["null", "5", '"terms"', '{"terms": []}'])
    def test_non_list_file_loads_empty(self, tmp_path, content):
        """Valid JSON that is not a list of terms is treated as empty."""
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "terms.json").write_text(content, encoding="utf-8")

        assert TermStore(str(data_dir)).get_all_terms() == []

    def test_blank_word_rejected(self, term_store):
        with pytest.raises(ValueError):
            add(term_store, "   ", "meaning")
        assert term_store.get_all_terms() == []


class TestTermStoreMutations:
    """Tests for update and delete."""

    def test_update_bumps_timestamp(self, term_store):
        old = datetime.now() - timedelta(days=1)
        term = Term(word="A", meaning="m1", created_at=old, updated_at=old)
        term_store.save_terms([term])

        updated = term_store.update_term(term.id, TermUpdate(meaning="m2"))

        assert updated.meaning == "m2"
        assert updated.word == "A"
        assert updated.created_at == old
        assert updated.updated_at > old
        assert term_store.get_term(term.id).meaning == "m2"

    def test_update_blank_category_clears_it(self, term_store):
        term = add(term_store, "A", "m1", "X")

        updated = term_store.update_term(term.id, TermUpdate(category=""))

        assert updated.category is None

    def test_update_unknown(self, term_store):
        assert term_store.update_term("missing", TermUpdate(word="x")) is None

    def test_delete_term(self, term_store):
        term = add(term_store, "A", "m1")

        assert term_store.delete_term(term.id) is True
        assert term_store.delete_term(term.id) is False
        assert term_store.get_all_terms() == []

    def test_delete_terms_counts(self, term_store):
        a = add(term_store, "A", "m1")
        b = add(term_store, "B", "m2")
        add(term_store, "C", "m3")

        assert term_store.delete_terms([a.id, b.id, "missing"]) == 2
        assert [t.word for t in term_store.get_all_terms()] == ["C"]


class TestTermStoreQueries:
    """Tests for categories, search and sorting."""

    @pytest.fixture
    def filled(self, term_store):
        base = datetime(2024, 1, 1)
        terms = [
            Term(word="banana", meaning="yellow fruit", category="food",
                 created_at=base),
            Term(word="Apple", meaning="red fruit", category="food",
                 created_at=base + timedelta(days=2)),
            Term(word="cpu", meaning="Central Processing Unit", category="IT",
                 created_at=base + timedelta(days=1)),
            Term(word="zen", meaning="calm", created_at=base + timedelta(days=3)),
        ]
        term_store.save_terms(terms)
        return term_store

    def test_categories_distinct_in_order(self, filled):
        assert filled.get_categories() == ["food", "IT"]

    def test_terms_by_category(self, filled):
        words = {t.word for t in filled.get_terms_by_category("food")}
        assert words == {"banana", "Apple"}

    def test_stats(self, filled):
        assert filled.get_stats() == {"total_terms": 4, "category_count": 2}

    def test_search_case_insensitive(self, filled):
        assert [t.word for t in filled.search("FRUIT")] == ["Apple", "banana"]
        assert [t.word for t in filled.search("processing")] == ["cpu"]

    def test_search_with_category(self, filled):
        assert [t.word for t in filled.search("", category="IT")] == ["cpu"]

    def test_sort_created_at_newest_first(self, filled):
        result = filled.search(sort_by="created_at")
        assert [t.word for t in result] == ["zen", "Apple", "cpu", "banana"]

    def test_sort_category_then_word(self, filled):
        result = filled.search(sort_by="category")
        assert [t.word for t in result] == ["zen", "Apple", "banana", "cpu"]

    def test_sort_word_ignores_case(self, term_store):
        term_store.save_terms(
            [
                Term(word="Zebra", meaning="m1"),
                Term(word="apple", meaning="m2"),
                Term(word="Banana", meaning="m3"),
            ]
        )

        assert [t.word for t in term_store.search()] == ["apple", "Banana", "Zebra"]

    def test_unknown_sort_key(self, filled):
        with pytest.raises(ValueError, match="Unknown sort key"):
            filled.search(sort_by="meaning")


class TestImportCsv:
    """Tests for bulk CSV import."""

    def test_category_defaults_to_file_name(self, tmp_path, term_store):
        csv_path = tmp_path / "networking.csv"
        csv_path.write_text(
            "word,meaning\nTCP,Transmission Control Protocol\nDNS,Domain Name System\n",
            encoding="utf-8",
        )

        assert term_store.import_csv(str(csv_path)) == 2
        assert term_store.get_categories() == ["networking"]

    def test_category_column_and_bad_rows(self, tmp_path, term_store):
        csv_path = tmp_path / "mixed.csv"
        csv_path.write_text(
            "word,meaning,category\nA,m1,X\nB,,X\nC,m3,\n",
            encoding="utf-8",
        )

        assert term_store.import_csv(str(csv_path), category="fallback") == 2
        by_word = {t.word: t.category for t in term_store.get_all_terms()}
        assert by_word == {"A": "X", "C": "fallback"}

    def test_missing_columns(self, tmp_path, term_store):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("word,translation\nHund,dog\n", encoding="utf-8")

        with pytest.raises(ValueError, match="missing"):
            term_store.import_csv(str(csv_path))
