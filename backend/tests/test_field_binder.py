"""Tests for declarative field binding and the defaulting pass."""

from unittest.mock import MagicMock

import pytest

from app.services.form_autofill.classifier import ClassificationResult
from app.services.form_autofill.field_binder import (
    COMMON_RULES,
    FieldBinder,
    build_dispatch_table,
)
from app.services.form_autofill.pattern_extractor import PatternExtractor
from app.services.form_autofill.vocabulary import VOCABULARY

from conftest import CONSIDERANT_TEXT, make_template


@pytest.fixture
def legal_binder() -> FieldBinder:
    return FieldBinder("legal")


@pytest.fixture
def procedure_binder() -> FieldBinder:
    return FieldBinder("procedure")


class TestLegalBinding:
    def test_decree_example(self, legal_binder, decree_template, decree_record):
        canonical = VOCABULARY.resolve(decree_record["formData"], "legal")
        bound = legal_binder.bind(decree_template, canonical)

        assert bound.fields == {
            "titre": "Décret relatif à la protection des données",
            "date_journal": "2024-01-10",
            "authority": "",
        }
        assert bound.sources == {
            "titre": "explicit",
            "date_journal": "explicit",
            "authority": "unset",
        }
        assert bound.template_id == "tpl-decret"

    def test_considerant_from_pattern(self, legal_binder, considerant_template):
        canonical = VOCABULARY.resolve({"content": CONSIDERANT_TEXT}, "legal")
        bound = legal_binder.bind(considerant_template, canonical)

        value = bound.fields["considerants"]
        assert value == value.strip()
        assert len(value) >= 50
        assert bound.sources["considerants"] == "pattern"

    def test_title_falls_back_to_pattern(self, legal_binder):
        template = make_template("t", "Loi", "Loi", ["titre"])
        canonical = {"content": "Objet : Organisation des marchés publics\nArticle 2"}
        bound = legal_binder.bind(template, canonical)
        assert bound.fields["titre"] == "Organisation des marchés publics"

    def test_explicit_value_skips_extractor(self, decree_template):
        extractor = MagicMock(spec=PatternExtractor)
        binder = FieldBinder("legal", extractor=extractor)

        binder.bind(decree_template, {"title": "Titre explicite", "content": CONSIDERANT_TEXT})

        extractor.extract.assert_not_called()

    def test_extractor_used_only_when_concept_empty(self):
        extractor = MagicMock(spec=PatternExtractor)
        extractor.extract.return_value = None
        binder = FieldBinder("legal", extractor=extractor)
        template = make_template("t", "Loi", "Loi", ["titre"])

        bound = binder.bind(template, {"content": "Texte libre"})

        extractor.extract.assert_called_once_with("title", "Texte libre")
        assert bound.fields["titre"] == ""

    def test_rule_defaults(self, legal_binder):
        template = make_template("t", "Loi", "Loi", ["langue", "statut", "source"])
        bound = legal_binder.bind(template, {})
        assert bound.fields == {
            "langue": "Français",
            "statut": "En vigueur",
            "source": "Journal Officiel",
        }
        assert set(bound.sources.values()) == {"default"}

    def test_unknown_field_uses_direct_lookup(self, legal_binder):
        template = make_template("t", "Loi", "Loi", ["visa_ministre"])
        bound = legal_binder.bind(template, {"visa_ministre": " Vu la loi "})
        assert bound.fields["visa_ministre"] == "Vu la loi"


class TestCompleteness:
    @pytest.mark.parametrize("canonical", [{}, {"title": "X"}, {"unrelated": "Y"}])
    def test_every_declared_field_is_bound(self, legal_binder, canonical):
        template = make_template(
            "t", "Loi", "Loi",
            ["titre", "numero_texte", "considerants", "article_1", "champ_libre", "motif"],
        )
        bound = legal_binder.bind(template, canonical)
        assert list(bound.fields) == list(template.field_names)

    def test_template_not_mutated(self, legal_binder, decree_template):
        before = decree_template.to_dict()
        legal_binder.bind(decree_template, {"title": "A"})
        assert decree_template.to_dict() == before


class TestValueKinds:
    def test_dynamic_list_split(self, procedure_binder, procedure_template):
        canonical = {"steps": "Retirer le formulaire\nDéposer le dossier;  Payer\r\n"}
        bound = procedure_binder.bind(procedure_template, canonical)
        assert bound.fields["steps"] == ["Retirer le formulaire", "Déposer le dossier", "Payer"]
        assert bound.fields["requiredDocuments"] == []

    @pytest.mark.parametrize("raw,expected", [("Oui", True), ("x", True), ("non", False), ("", False)])
    def test_checkbox(self, procedure_binder, procedure_template, raw, expected):
        bound = procedure_binder.bind(procedure_template, {"digitization": raw})
        assert bound.fields["digitization"] is expected

    def test_select_snaps_to_declared_option(self, legal_binder):
        template = make_template(
            "t", "Loi", "Loi",
            [{"name": "langue", "type": "select", "options": ["Français", "Arabe"]}],
        )
        bound = legal_binder.bind(template, {"language": "arabe"})
        assert bound.fields["langue"] == "Arabe"


class TestAuxiliary:
    def test_selected_type_from_type_field(self, legal_binder):
        template = make_template("t", "Loi", "Loi", ["type_texte"])
        classification = ClassificationResult(text_type="Loi")
        bound = legal_binder.bind(template, {"type": "Arrêté"}, classification)
        assert bound.auxiliary["selectedType"] == "Arrêté"

    def test_selected_type_from_classification(self, legal_binder, decree_template):
        classification = ClassificationResult(text_type="Décret")
        bound = legal_binder.bind(decree_template, {}, classification)
        assert bound.auxiliary["selectedType"] == "Décret"

    def test_selected_type_default(self, legal_binder, procedure_binder, decree_template, procedure_template):
        assert legal_binder.bind(decree_template, {}).auxiliary["selectedType"] == "Loi"
        classification = ClassificationResult(text_type="Décret")
        bound = procedure_binder.bind(procedure_template, {}, classification)
        assert bound.auxiliary["selectedType"] == "Procédure Administrative"

    def test_rule_default_is_not_a_detected_type(self, procedure_binder):
        template = make_template(
            "t", "Procédure Administrative", "Procédure Administrative", ["procedureType", "name"]
        )
        bound = procedure_binder.bind(template, {"title": "Demande de passeport"})
        assert bound.fields["procedureType"] == "Demande"
        assert bound.sources["procedureType"] == "default"
        assert bound.auxiliary["selectedType"] == "Procédure Administrative"

    def test_explicit_procedure_type_is_detected(self, procedure_binder):
        template = make_template(
            "t", "Procédure Administrative", "Procédure Administrative", ["procedureType"]
        )
        bound = procedure_binder.bind(template, {"type": "Procédure"})
        assert bound.auxiliary["selectedType"] == "Procédure"

    def test_explicit_category_beats_classification(self, procedure_binder, procedure_template):
        classification = ClassificationResult(category="Commerce", administration="Ministère du Commerce")
        bound = procedure_binder.bind(
            procedure_template,
            {"category": "Urbanisme", "institution": "Wilaya d'Alger"},
            classification,
        )
        assert bound.auxiliary["procedureCategory"] == "Urbanisme"
        assert bound.auxiliary["sectorAdministration"] == "Wilaya d'Alger"

    def test_library_category_is_last_resort(self, procedure_binder, procedure_template):
        bound = procedure_binder.bind(procedure_template, {})
        assert bound.auxiliary["procedureCategory"] == "Procédures Administratives"

    def test_procedure_defaults(self, procedure_template):
        binder = FieldBinder("procedure", default_administration="Ministère de l'Intérieur")
        bound = binder.bind(procedure_template, {})
        assert bound.auxiliary["sectorAdministration"] == "Ministère de l'Intérieur"
        assert bound.auxiliary["targetCategory"] == "citoyen"

    def test_legal_has_no_administration_default(self, legal_binder, decree_template):
        assert "sectorAdministration" not in legal_binder.bind(decree_template, {}).auxiliary

    def test_auxiliaries_not_in_declared_fields(self, legal_binder, decree_template):
        bound = legal_binder.bind(decree_template, {})
        assert "selectedType" not in bound.fields
        assert bound.as_record()["selectedType"] == "Loi"


def test_dispatch_table_first_rule_claims_name():
    table = build_dispatch_table(COMMON_RULES)
    assert table["date_journal"] is table["date"]
    assert table["autorite_signataire"].concepts == ("authority",)
