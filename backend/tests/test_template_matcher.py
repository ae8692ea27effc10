"""Tests for domain filtering, deduplication and template selection."""

import pytest

from app.services.form_autofill.template_matcher import (
    KNOWN_TYPES,
    TemplateMatcher,
    is_legal_template,
    is_procedure_template,
)
from app.services.form_autofill.vocabulary import Domain

from conftest import make_template


@pytest.fixture
def matcher() -> TemplateMatcher:
    return TemplateMatcher()


class TestDomainFilter:
    def test_legal_view(self, matcher, mixed_library):
        view = matcher.library_view(mixed_library, "legal")
        assert [t.id for t in view] == ["tpl-loi", "tpl-decret"]

    def test_procedure_view(self, matcher, mixed_library):
        view = matcher.library_view(mixed_library, "procedure")
        assert [t.id for t in view] == ["tpl-procedure"]

    def test_unclassified_template_in_neither_domain(self, matcher, mixed_library):
        note = mixed_library[3]
        assert not is_legal_template(note)
        assert not is_procedure_template(note)

    def test_category_alone_is_enough(self):
        template = make_template("t", "Registre", "Formulaire", ["name"], category="Commerce")
        assert is_procedure_template(template)

    def test_custom_predicate(self, matcher, mixed_library):
        view = matcher.filter_for_domain(
            mixed_library, "legal", predicate=lambda t: t.category == "Divers"
        )
        assert [t.id for t in view] == ["tpl-note"]

    def test_unknown_domain(self, matcher, mixed_library):
        with pytest.raises(ValueError):
            matcher.filter_for_domain(mixed_library, "cadastre")

    def test_library_not_mutated(self, matcher, mixed_library):
        before = list(mixed_library)
        matcher.library_view(mixed_library, "legal")
        assert mixed_library == before


class TestDeduplicate:
    def test_first_occurrence_wins(self, matcher, mixed_library):
        unique = matcher.deduplicate(mixed_library)
        ids = [t.id for t in unique]
        assert "tpl-loi" in ids and "tpl-loi-dup" not in ids
        assert "tpl-procedure" in ids and "tpl-proc-dup" not in ids

    def test_idempotent(self, matcher, mixed_library):
        once = matcher.deduplicate(mixed_library)
        assert matcher.deduplicate(once) == once


class TestSelectTemplate:
    def test_exact_type(self, matcher, mixed_library):
        view = matcher.library_view(mixed_library, "legal")
        assert matcher.select_template(view, "Décret").id == "tpl-decret"

    def test_substring_either_direction(self, matcher, mixed_library):
        view = matcher.library_view(mixed_library, "legal")
        assert matcher.select_template(view, "DÉCRET exécutif").id == "tpl-decret"
        assert matcher.select_template(view, "décr").id == "tpl-decret"

    def test_fallback_to_first(self, matcher, mixed_library):
        view = matcher.library_view(mixed_library, "legal")
        assert matcher.select_template(view, "Circulaire").id == "tpl-loi"
        assert matcher.select_template(view, None).id == "tpl-loi"
        assert matcher.select_template(view, "   ").id == "tpl-loi"

    def test_empty_library(self, matcher):
        assert matcher.select_template([], "Loi") is None

    def test_find_by_id(self, matcher, mixed_library):
        assert matcher.find_by_id(mixed_library, "tpl-note").name == "Note interne"
        assert matcher.find_by_id(mixed_library, "missing") is None


def test_known_types_default_first_entry():
    assert KNOWN_TYPES[Domain.LEGAL][0] == "Loi"
    assert KNOWN_TYPES[Domain.PROCEDURE][0] == "Procédure Administrative"
