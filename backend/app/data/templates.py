"""
Built-in form templates for legal texts and administrative procedures.
Used when the caller does not supply its own template library.
"""
from typing import List

from app.services.form_autofill.schema import FormTemplate

BUILTIN_TEMPLATES = [
    {
        "id": "builtin-loi",
        "name": "Loi",
        "type": "Loi",
        "category": "Textes Législatifs",
        "description": "Loi publiée au Journal Officiel",
        "fields": [
            {"name": "titre", "label": "Titre", "type": "text", "required": True},
            {"name": "numero_texte", "label": "Numéro du texte", "type": "text", "required": True},
            {"name": "date_journal", "label": "Date du Journal Officiel", "type": "date", "required": True},
            {"name": "journal_numero", "label": "Numéro du Journal Officiel", "type": "text"},
            {"name": "autorite_signataire", "label": "Autorité signataire", "type": "text"},
            {"name": "considerants", "label": "Considérants", "type": "textarea"},
            {"name": "article_1", "label": "Article premier", "type": "textarea"},
            {"name": "dispositions_finales", "label": "Dispositions finales", "type": "textarea"},
            {"name": "contenu", "label": "Contenu", "type": "textarea", "required": True},
            {
                "name": "langue", "label": "Langue", "type": "select",
                "options": ["Français", "Arabe", "Anglais"],
            },
            {
                "name": "statut", "label": "Statut", "type": "select",
                "options": ["En vigueur", "Abrogé", "Modifié"],
            },
            {"name": "source", "label": "Source", "type": "text"},
        ],
    },
    {
        "id": "builtin-decret",
        "name": "Décret",
        "type": "Décret",
        "category": "Textes Réglementaires",
        "description": "Décret présidentiel ou exécutif",
        "fields": [
            {"name": "titre", "label": "Titre", "type": "text", "required": True},
            {"name": "numero_texte", "label": "Numéro du décret", "type": "text", "required": True},
            {"name": "date_signature", "label": "Date de signature", "type": "date"},
            {"name": "date_journal", "label": "Date du Journal Officiel", "type": "date"},
            {"name": "autorite_signataire", "label": "Autorité signataire", "type": "text"},
            {"name": "considerants", "label": "Considérants", "type": "textarea"},
            {"name": "article_1", "label": "Article premier", "type": "textarea"},
            {"name": "mots_cles", "label": "Mots-clés", "type": "text"},
        ],
    },
    {
        "id": "builtin-arrete",
        "name": "Arrêté",
        "type": "Arrêté",
        "category": "Textes Réglementaires",
        "description": "Arrêté ministériel ou interministériel",
        "fields": [
            {"name": "titre", "label": "Titre", "type": "text", "required": True},
            {"name": "numero_texte", "label": "Numéro de l'arrêté", "type": "text"},
            {"name": "date_journal", "label": "Date du Journal Officiel", "type": "date"},
            {"name": "organisation", "label": "Organisation", "type": "text"},
            {"name": "objet", "label": "Objet", "type": "textarea"},
            {"name": "article_1", "label": "Article premier", "type": "textarea"},
        ],
    },
    {
        "id": "builtin-procedure",
        "name": "Procédure Administrative",
        "type": "Procédure Administrative",
        "category": "Procédures Administratives",
        "description": "Fiche descriptive d'une procédure administrative",
        "fields": [
            {"name": "name", "label": "Nom de la procédure", "type": "text", "required": True},
            {"name": "description", "label": "Description", "type": "textarea"},
            {"name": "steps", "label": "Étapes", "type": "dynamic-list"},
            {"name": "conditions", "label": "Conditions", "type": "dynamic-list"},
            {"name": "requiredDocuments", "label": "Documents requis", "type": "dynamic-list"},
            {"name": "legalBasis", "label": "Base légale", "type": "dynamic-list"},
            {"name": "submissionLocation", "label": "Lieu de dépôt", "type": "text"},
            {"name": "processingDuration", "label": "Durée de traitement", "type": "text"},
            {"name": "feeAmount", "label": "Montant des frais", "type": "number"},
            {"name": "digitization", "label": "Procédure numérisée", "type": "checkbox"},
            {"name": "electronicPortalLink", "label": "Lien du portail électronique", "type": "url"},
            {"name": "contactAddress", "label": "Adresse", "type": "text"},
            {"name": "contactPhone", "label": "Téléphone", "type": "text"},
            {"name": "contactEmail", "label": "E-mail", "type": "text"},
        ],
    },
    {
        "id": "builtin-etat-civil",
        "name": "Procédure d'état civil",
        "type": "Procédure",
        "category": "État Civil",
        "description": "Démarches d'état civil (naissance, mariage, décès)",
        "fields": [
            {"name": "name", "label": "Nom de la procédure", "type": "text", "required": True},
            {"name": "description", "label": "Description", "type": "textarea"},
            {"name": "requiredDocuments", "label": "Documents requis", "type": "dynamic-list"},
            {"name": "submissionLocation", "label": "Lieu de dépôt", "type": "text"},
            {"name": "processingDuration", "label": "Délai", "type": "text"},
        ],
    },
]


def load_builtin_templates() -> List[FormTemplate]:
    """Built-in templates as FormTemplate instances, in library order."""
    return [FormTemplate.from_dict(t) for t in BUILTIN_TEMPLATES]
