"""
Template Matcher
================

Filters a template library down to one domain, deduplicates it by name and
selects the template that best fits a detected document type.

Selection order:
1. Exact (case-sensitive) match of the detected type to ``template.type``
2. Case-insensitive substring match, in either direction
3. First template of the deduplicated list
4. None when the list is empty

The matcher never mutates the library it is given.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from .schema import FormTemplate
from .vocabulary import Domain

logger = logging.getLogger(__name__)

TemplatePredicate = Callable[[FormTemplate], bool]

LEGAL_TEXT_TYPES: List[str] = [
    'Loi', 'Décret', 'Arrêté', 'Ordonnance', 'Circulaire', 'Instruction',
    'Jurisprudence', 'Fonction Publique', 'Jurisprudence Fonction Publique',
    'Constitution', 'Règlement', 'Décision', 'Texte Constitutionnel',
    'Accord', 'Convention', 'Code Juridique', 'Déclaration', 'Bulletin',
]

LEGAL_TEXT_CATEGORIES: List[str] = [
    'Textes Législatifs', 'Textes Réglementaires', 'Décisions Judiciaires',
    'Administration Publique', 'Communications Officielles', 'Textes Juridiques',
    'Publications', 'Accords Internationaux', 'Textes Constitutionnels',
]

PROCEDURE_TYPES: List[str] = [
    'Procédure Administrative', 'Procédure', 'Procedure Administrative',
]

PROCEDURE_CATEGORIES: List[str] = [
    'Procédures Administratives', 'Urbanisme', 'État civil', 'Social', 'Fiscal',
    'Commerce', 'Environnement', 'Santé', 'Éducation', 'Transport', 'Agriculture',
    'Fiscalité', 'Fonction Publique', 'État Civil', 'Emploi',
]

# Deterministic fallback for selectedType: first entry of each list
KNOWN_TYPES = {
    Domain.LEGAL: LEGAL_TEXT_TYPES,
    Domain.PROCEDURE: PROCEDURE_TYPES,
}


def is_legal_template(template: FormTemplate) -> bool:
    return (
        template.type in LEGAL_TEXT_TYPES
        or template.category in LEGAL_TEXT_CATEGORIES
        or template.type == 'textes_juridiques'
        or template.category == 'Textes Juridiques'
    )


def is_procedure_template(template: FormTemplate) -> bool:
    return (
        template.type in PROCEDURE_TYPES
        or template.category in PROCEDURE_CATEGORIES
        or template.type == 'procedures_administratives'
        or template.category == 'Procédures Administratives'
    )


DOMAIN_PREDICATES = {
    Domain.LEGAL: is_legal_template,
    Domain.PROCEDURE: is_procedure_template,
}


class TemplateMatcher:
    """Selects templates from a library view. Holds no per-call state."""

    def filter_for_domain(
        self,
        templates: Iterable[FormTemplate],
        domain,
        predicate: Optional[TemplatePredicate] = None,
    ) -> List[FormTemplate]:
        """
        Keep the templates that belong to a domain.

        Args:
            templates: Template library, in library order
            domain: "legal" or "procedure"
            predicate: Optional replacement for the domain's default predicate

        Returns:
            Matching templates, order preserved
        """
        domain = Domain.parse(domain)
        keep = predicate or DOMAIN_PREDICATES[domain]
        return [t for t in templates if keep(t)]

    def deduplicate(self, templates: Iterable[FormTemplate]) -> List[FormTemplate]:
        """
        Drop templates whose case-folded name was already seen.

        First occurrence wins and insertion order is preserved, so the
        operation is idempotent.
        """
        seen = set()
        unique: List[FormTemplate] = []
        for template in templates:
            key = template.name.casefold()
            if key in seen:
                continue
            seen.add(key)
            unique.append(template)
        return unique

    def library_view(
        self,
        templates: Iterable[FormTemplate],
        domain,
        predicate: Optional[TemplatePredicate] = None,
    ) -> List[FormTemplate]:
        """Domain-filtered, deduplicated view of a library."""
        templates = list(templates)
        filtered = self.filter_for_domain(templates, domain, predicate)
        unique = self.deduplicate(filtered)
        logger.debug(
            f"Library view for '{Domain.parse(domain).value}': {len(templates)} total, "
            f"{len(filtered)} filtered, {len(unique)} unique"
        )
        return unique

    def select_template(
        self,
        templates: Sequence[FormTemplate],
        detected_type: Optional[str] = None,
    ) -> Optional[FormTemplate]:
        """
        Select the template that best matches a detected type.

        Args:
            templates: Domain-filtered, deduplicated templates
            detected_type: Detected or user-chosen document type

        Returns:
            The selected template, or None if the list is empty
        """
        if not templates:
            logger.debug("No templates available for selection")
            return None

        wanted = (detected_type or "").strip()
        if wanted:
            for template in templates:
                if template.type == wanted:
                    logger.debug(f"Exact type match: '{template.name}' ({template.type})")
                    return template

            folded = wanted.casefold()
            for template in templates:
                candidate = template.type.casefold()
                if candidate and (folded in candidate or candidate in folded):
                    logger.debug(f"Substring type match: '{template.name}' ({template.type})")
                    return template

        logger.debug(f"Falling back to first template: '{templates[0].name}'")
        return templates[0]

    def find_by_id(
        self,
        templates: Iterable[FormTemplate],
        template_id: str,
    ) -> Optional[FormTemplate]:
        """Look up a manually selected template."""
        for template in templates:
            if template.id == template_id:
                return template
        return None
