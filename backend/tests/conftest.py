"""Shared test fixtures for the form autofill tests."""

import sys
from pathlib import Path

import pytest

# Add backend directory to path so we can import the app package
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.services.form_autofill.schema import FormTemplate


CONSIDERANT_TEXT = (
    "Considérant que la loi doit être appliquée de manière uniforme sur tout "
    "le territoire national, il est décidé ce qui suit."
)


def make_template(template_id, name, type_, fields, category="") -> FormTemplate:
    """Build a template from a list of field names or field dicts."""
    return FormTemplate.from_dict({
        "id": template_id,
        "name": name,
        "type": type_,
        "category": category,
        "fields": [f if isinstance(f, dict) else {"name": f} for f in fields],
    })


@pytest.fixture
def decree_template() -> FormTemplate:
    """Template from the decree example scenario."""
    return make_template(
        "tpl-decret", "Décret", "Décret",
        ["titre", "date_journal", "authority"],
        category="Textes Réglementaires",
    )


@pytest.fixture
def considerant_template() -> FormTemplate:
    return make_template("tpl-considerants", "Considérants", "Loi", ["considerants"])


@pytest.fixture
def procedure_template() -> FormTemplate:
    return make_template(
        "tpl-procedure", "Procédure Administrative", "Procédure Administrative",
        [
            {"name": "name", "type": "text"},
            {"name": "description", "type": "textarea"},
            {"name": "steps", "type": "dynamic-list"},
            {"name": "requiredDocuments", "type": "dynamic-list"},
            {"name": "digitization", "type": "checkbox"},
            {"name": "contactEmail", "type": "text"},
        ],
        category="Procédures Administratives",
    )


@pytest.fixture
def mixed_library(decree_template, procedure_template) -> list:
    """Library with duplicates (case-insensitive names) across both domains."""
    return [
        make_template("tpl-loi", "Loi", "Loi", ["titre", "numero_texte"], category="Textes Législatifs"),
        make_template("tpl-loi-dup", "LOI", "Loi", ["titre"], category="Textes Législatifs"),
        decree_template,
        make_template("tpl-note", "Note interne", "Note", ["titre"], category="Divers"),
        procedure_template,
        make_template("tpl-proc-dup", "procédure administrative", "Procédure", ["name"]),
    ]


@pytest.fixture
def decree_record() -> dict:
    """OCR record from the decree example scenario."""
    return {
        "documentType": "legal",
        "formData": {
            "titre": "Décret relatif à la protection des données",
            "date_journal": "2024-01-10",
        },
    }


@pytest.fixture
def considerant_record() -> dict:
    return {"documentType": "legal", "formData": {"content": CONSIDERANT_TEXT}}


@pytest.fixture
def procedure_record() -> dict:
    return {
        "documentType": "procedure",
        "formData": {
            "Nom": "Immatriculation au registre de commerce",
            "contenu": (
                "Cette démarche permet à toute entreprise de s'inscrire au registre "
                "de commerce auprès du centre national."
            ),
            "etapes": "Retirer le formulaire\nDéposer le dossier; Payer les frais",
            "email": "contact@cnrc.dz",
        },
    }
