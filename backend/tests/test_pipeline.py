"""End-to-end tests for the form autofill pipeline."""

from unittest.mock import MagicMock, patch

import pytest

from app.services.form_autofill.completion import CompletionSummary
from app.services.form_autofill.pipeline import (
    AutofillOutput,
    ExtractionEventHandler,
    FormAutofillPipeline,
    RawExtractionRecord,
)
from app.services.form_autofill.vocabulary import Domain

from conftest import make_template


@pytest.fixture
def handler() -> MagicMock:
    return MagicMock(spec=ExtractionEventHandler)


@pytest.fixture
def legal_pipeline(handler) -> FormAutofillPipeline:
    return FormAutofillPipeline("legal", handler=handler)


@pytest.fixture
def procedure_pipeline(handler) -> FormAutofillPipeline:
    return FormAutofillPipeline("procedure", handler=handler)


class TestLegalPipeline:
    def test_decree_example(self, legal_pipeline, handler, decree_template, decree_record):
        output = legal_pipeline.process(decree_record, [decree_template])

        result = output.to_dict()
        assert result["boundFields"] == {
            "titre": "Décret relatif à la protection des données",
            "date_journal": "2024-01-10",
            "authority": "",
        }
        assert result["filledCount"] == 2
        assert result["totalCount"] == 3
        assert result["detectedAudience"] == "citoyen"

        handler.on_complete.assert_called_once()
        called_output, summary = handler.on_complete.call_args[0]
        assert called_output is output
        assert summary == CompletionSummary(filled_count=2, total_count=3)

    def test_considerant_example(self, legal_pipeline, considerant_template, considerant_record):
        output = legal_pipeline.process(considerant_record, [considerant_template])
        assert len(output.bound_fields["considerants"]) >= 50
        assert output.field_sources["considerants"] == "pattern"
        assert output.filled_count == 1

    def test_type_driven_selection(self, legal_pipeline, mixed_library):
        record = {"documentType": "legal", "formData": {"type_texte": "Décret", "titre": "Décret X"}}
        output = legal_pipeline.process(record, mixed_library)
        assert output.template_id == "tpl-decret"
        assert output.detected_type == "Décret"

    def test_classified_type_drives_selection(self, legal_pipeline, mixed_library):
        record = {"documentType": "legal", "formData": {"contenu": "Décret exécutif n° 24-12 du 10 janvier 2024"}}
        output = legal_pipeline.process(record, mixed_library)
        assert output.template_id == "tpl-decret"
        assert output.detected_type == "Décret"

    def test_fallback_to_first_template(self, legal_pipeline, mixed_library, decree_record):
        output = legal_pipeline.process(decree_record, mixed_library)
        assert output.template_id == "tpl-loi"
        assert output.detected_type == "Loi"

    def test_manual_selection(self, legal_pipeline, mixed_library, considerant_template, considerant_record):
        output = legal_pipeline.process(
            considerant_record, mixed_library, selected_template=considerant_template
        )
        assert output.template_id == "tpl-considerants"

    def test_empty_templates_are_skipped(self, legal_pipeline, decree_template, decree_record):
        empty = make_template("tpl-vide", "Loi vide", "Loi", [])
        output = legal_pipeline.process(decree_record, [empty, decree_template])
        assert output.template_id == "tpl-decret"

    def test_record_object_accepted(self, legal_pipeline, decree_template, decree_record):
        record = RawExtractionRecord.from_dict(decree_record)
        assert legal_pipeline.process(record, [decree_template]).filled_count == 2


class TestRejection:
    def test_domain_mismatch(self, legal_pipeline, handler, decree_template, procedure_record):
        assert legal_pipeline.process(procedure_record, [decree_template]) is None
        handler.on_rejected.assert_called_once()
        handler.on_complete.assert_not_called()

    def test_document_type_case_is_ignored(self, legal_pipeline, handler, decree_template):
        record = {"documentType": " Legal ", "formData": {"titre": "Loi n° 08-15"}}
        output = legal_pipeline.process(record, [decree_template])
        assert output.bound_fields["titre"] == "Loi n° 08-15"
        handler.on_rejected.assert_not_called()

    def test_missing_document_type(self, legal_pipeline, handler, decree_template):
        assert legal_pipeline.process({"formData": {"titre": "X"}}, [decree_template]) is None
        handler.on_rejected.assert_called_once()

    def test_empty_library_skips_binding(self, legal_pipeline, handler, decree_record):
        with patch.object(legal_pipeline.binder, "bind") as bind:
            assert legal_pipeline.process(decree_record, []) is None
        bind.assert_not_called()
        handler.on_no_template.assert_called_once_with(Domain.LEGAL)

    def test_unknown_domain(self):
        with pytest.raises(ValueError):
            FormAutofillPipeline("cadastre")


class TestProcedurePipeline:
    def test_labels_and_lists(self, procedure_pipeline, mixed_library, procedure_record):
        output = procedure_pipeline.process(procedure_record, mixed_library)

        assert output.template_id == "tpl-procedure"
        assert output.detected_type == "Procédure Administrative"
        assert output.detected_category == "Commerce"
        assert output.detected_administration == "Ministère du Commerce"
        assert output.detected_audience == "entreprise"

        fields = output.bound_fields
        assert fields["name"] == "Immatriculation au registre de commerce"
        assert fields["steps"] == ["Retirer le formulaire", "Déposer le dossier", "Payer les frais"]
        assert fields["requiredDocuments"] == []
        assert fields["digitization"] is False
        assert fields["contactEmail"] == "contact@cnrc.dz"
        assert (output.filled_count, output.total_count) == (4, 6)

    def test_default_administration(self, handler, procedure_template):
        pipeline = FormAutofillPipeline("procedure", handler=handler)
        record = {"documentType": "procedure", "formData": {"nom": "Demande quelconque"}}
        output = pipeline.process(record, [procedure_template])
        assert output.detected_administration == "Ministère du Commerce"


class TestOutput:
    def test_statistics(self, legal_pipeline, decree_template, decree_record):
        output = legal_pipeline.process(decree_record, [decree_template])
        stats = legal_pipeline.get_statistics(output)

        assert stats["total_fields"] == 3
        assert stats["filled_fields"] == 2
        assert stats["fill_rate"] == pytest.approx(2 / 3)
        assert stats["empty"] == ["authority"]
        assert stats["source_distribution"] == {"explicit": 2, "unset": 1}

    def test_extended_dict(self, legal_pipeline, decree_template, decree_record):
        extended = legal_pipeline.process(decree_record, [decree_template]).to_extended_dict()
        assert extended["templateId"] == "tpl-decret"
        assert extended["auxiliary"]["selectedType"] == "Loi"
        assert extended["canonical"]["language"] == "Français"
        assert "processing_time_ms" in extended["metadata"]

    def test_calls_are_independent(self, legal_pipeline, decree_template, decree_record):
        first = legal_pipeline.process(decree_record, [decree_template])
        first.bound_fields["authority"] = "modifié"
        second = legal_pipeline.process(decree_record, [decree_template])

        assert second.bound_fields["authority"] == ""
        assert isinstance(second, AutofillOutput)
