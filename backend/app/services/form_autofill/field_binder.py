"""
Field Binder
============

Projects a canonical value map onto the declared fields of a template.

Dispatch is declarative: every BindingRule names the field-name aliases it
serves, the canonical concepts it reads (highest priority first), an
optional pattern-cascade concept used when those concepts are empty, and an
optional constant default. Field names with no rule fall back to a direct
lookup of ``canonical[field.name]``.

After the declared fields are bound, a single defaulting pass fills the
auxiliary attributes (selectedType, procedureCategory,
sectorAdministration, targetCategory) with the precedence

    explicit value > pattern-extracted > keyword-classified
        > library-derived > default

and never overwrites a non-empty value.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .classifier import ClassificationResult, DEFAULT_AUDIENCE
from .pattern_extractor import PatternExtractor
from .schema import FieldDefinition, FieldType, FormTemplate
from .template_matcher import KNOWN_TYPES
from .vocabulary import Domain, coerce_text, normalize_key

logger = logging.getLogger(__name__)

BoundValue = Union[str, bool, List[str]]

TRUTHY_VALUES = frozenset({'oui', 'yes', 'true', 'vrai', '1', 'x', 'on'})

DEFAULT_PROCEDURE_ADMINISTRATION = "Ministère du Commerce"


@dataclass(frozen=True)
class BindingRule:
    """Resolution strategy shared by a group of field-name aliases."""
    field_names: Tuple[str, ...]
    concepts: Tuple[str, ...] = ()
    pattern: Optional[str] = None
    pattern_sources: Tuple[str, ...] = ('content',)
    default: Optional[str] = None


# Shared by both domains; domain tables are consulted first
COMMON_RULES: Tuple[BindingRule, ...] = (
    BindingRule(('numero_texte', 'reference', 'numero_ref'), ('reference',)),
    BindingRule(('date_journal', 'date_promulgation', 'date_signature', 'date'), ('date',)),
    BindingRule(('organisation', 'autorite_signataire', 'authority'), ('authority',)),
    BindingRule(('contenu', 'content'), ('content',)),
    BindingRule(('type_texte', 'type'), ('type',)),
    BindingRule(('domaine', 'category'), ('category',)),
    BindingRule(('langue', 'language'), ('language',), default='Français'),
    BindingRule(('statut', 'status'), ('status',), default='En vigueur'),
    BindingRule(('mots_cles', 'keywords'), ('keywords',)),
    BindingRule(('source',), ('source',), default='Journal Officiel'),
)

LEGAL_RULES: Tuple[BindingRule, ...] = (
    BindingRule(('titre', 'title'), ('title',), pattern='title'),
    BindingRule(('journal_numero',), ('journal_numero',)),
    BindingRule(('numero_page',), ('numero_page',)),
    BindingRule(('en_tete',), ('en_tete',)),
    BindingRule(('objet', 'description'), ('description',)),
    BindingRule(('motif',), ('motif',)),
    BindingRule(('considerants',), pattern='considerant'),
    BindingRule(('article_1', 'article_premier'), pattern='article_1'),
    BindingRule(('dispositions_finales',), pattern='dispositions_finales'),
    BindingRule(('piece_jointe',), ('piece_jointe',)),
)

PROCEDURE_RULES: Tuple[BindingRule, ...] = (
    BindingRule(
        ('name', 'procedureName', 'nom', 'titre', 'title'), ('title',),
        pattern='procedure_title', pattern_sources=('content', 'description'),
    ),
    BindingRule(('description', 'objet'), ('description', 'content')),
    BindingRule(('procedureType',), ('type',), default='Demande'),
    BindingRule(('procedureCategory', 'categorie'), ('category',)),
    BindingRule(('sectorAdministration', 'institution', 'administration'), ('institution',)),
    BindingRule(('steps', 'etapes'), ('steps',)),
    BindingRule(('conditions',), ('conditions',)),
    BindingRule(('requiredDocuments', 'documents_requis'), ('required_documents',)),
    BindingRule(('legalBasis', 'base_legale'), ('legal_basis',)),
    BindingRule(('processingDuration', 'duree', 'delai'), ('duration',)),
    BindingRule(('feeAmount', 'cout', 'frais'), ('fee',)),
    BindingRule(('submissionLocation', 'lieu_depot'), ('submission_location',)),
    BindingRule(('contactAddress', 'adresse'), ('contact_address',)),
    BindingRule(('contactPhone', 'telephone'), ('contact_phone',)),
    BindingRule(('contactEmail', 'email'), ('contact_email',)),
)

DOMAIN_RULES = {
    Domain.LEGAL: LEGAL_RULES + COMMON_RULES,
    Domain.PROCEDURE: PROCEDURE_RULES + COMMON_RULES,
}


@dataclass
class BoundFormData:
    """
    Result of binding one template.

    ``fields`` holds exactly one entry per declared field. ``auxiliary``
    holds detected attributes that are not declared fields.
    """
    template_id: str
    fields: Dict[str, BoundValue]
    auxiliary: Dict[str, str] = field(default_factory=dict)
    # field name -> 'explicit' | 'pattern' | 'default' | 'unset'
    sources: Dict[str, str] = field(default_factory=dict)

    def as_record(self) -> Dict[str, Any]:
        """Declared fields merged with auxiliary attributes."""
        record: Dict[str, Any] = dict(self.fields)
        for key, value in self.auxiliary.items():
            record.setdefault(key, value)
        return record


def build_dispatch_table(rules: Sequence[BindingRule]) -> Dict[str, BindingRule]:
    """Index rules by normalized field name; the first rule claiming a name keeps it."""
    table: Dict[str, BindingRule] = {}
    for rule in rules:
        for name in rule.field_names:
            table.setdefault(normalize_key(name), rule)
    return table


class FieldBinder:
    """Binds canonical values onto template fields for one domain."""

    def __init__(
        self,
        domain,
        extractor: Optional[PatternExtractor] = None,
        default_administration: str = DEFAULT_PROCEDURE_ADMINISTRATION,
    ):
        """
        Initialize the binder.

        Args:
            domain: "legal" or "procedure"
            extractor: Pattern extractor used for fallback extraction
            default_administration: Default sectorAdministration for procedures
        """
        self.domain = Domain.parse(domain)
        self.extractor = extractor or PatternExtractor()
        self.dispatch = build_dispatch_table(DOMAIN_RULES[self.domain])

        # One enumerated defaulting table, applied once after binding
        self.defaults: Dict[str, str] = {'selectedType': KNOWN_TYPES[self.domain][0]}
        if self.domain is Domain.PROCEDURE:
            self.defaults['sectorAdministration'] = default_administration

    def rule_for(self, field_name: str) -> Optional[BindingRule]:
        return self.dispatch.get(normalize_key(field_name))

    def bind(
        self,
        template: FormTemplate,
        canonical: Mapping[str, str],
        classification: Optional[ClassificationResult] = None,
    ) -> BoundFormData:
        """
        Bind a canonical value map onto a template.

        Args:
            template: Template whose fields are bound (read only)
            canonical: Canonical value map from the synonym resolver
            classification: Keyword classification of the document text

        Returns:
            BoundFormData with a key for every declared field
        """
        bound: Dict[str, BoundValue] = {}
        sources: Dict[str, str] = {}
        selected_type = ""

        for definition in template.fields:
            rule = self.rule_for(definition.name)
            text, source = self._resolve_text(definition, rule, canonical)
            bound[definition.name] = self._coerce(definition, text)
            sources[definition.name] = source
            # Rule defaults never count as a detected type
            if (
                rule is not None and 'type' in rule.concepts
                and source in ('explicit', 'pattern') and not selected_type
            ):
                selected_type = text
            logger.debug(f"Bound field '{definition.name}' from {source}")

        auxiliary = self._auxiliary(template, canonical, classification, selected_type)

        filled = sum(1 for s in sources.values() if s != 'unset')
        logger.info(
            f"Bound template '{template.name}': {filled}/{len(template.fields)} fields resolved"
        )
        return BoundFormData(
            template_id=template.id,
            fields=bound,
            auxiliary=auxiliary,
            sources=sources,
        )

    def _resolve_text(
        self,
        definition: FieldDefinition,
        rule: Optional[BindingRule],
        canonical: Mapping[str, str],
    ) -> Tuple[str, str]:
        """Return (value, source) for one field."""
        if rule is None:
            value = coerce_text(canonical.get(definition.name))
            return (value, 'explicit') if value else ("", 'unset')

        for concept in rule.concepts:
            value = coerce_text(canonical.get(concept))
            if value:
                return value, 'explicit'

        if rule.pattern:
            for source_concept in rule.pattern_sources:
                value = self.extractor.extract(rule.pattern, canonical.get(source_concept))
                if value:
                    return value, 'pattern'

        if rule.default is not None:
            return rule.default, 'default'

        return "", 'unset'

    @staticmethod
    def _coerce(definition: FieldDefinition, text: str) -> BoundValue:
        """Convert a resolved string to the field's value kind."""
        if definition.type is FieldType.CHECKBOX:
            return text.strip().lower() in TRUTHY_VALUES
        if definition.type is FieldType.DYNAMIC_LIST:
            return [item.strip() for item in re.split(r'[\n\r;]+', text) if item.strip()]
        if definition.type is FieldType.SELECT and text and definition.options:
            for option in definition.options:
                if option.casefold() == text.casefold():
                    return option
        return text

    def _auxiliary(
        self,
        template: FormTemplate,
        canonical: Mapping[str, str],
        classification: Optional[ClassificationResult],
        selected_type: str,
    ) -> Dict[str, str]:
        """Detected attributes, then the defaulting pass."""
        classification = classification or ClassificationResult()

        candidates = {
            'selectedType': [
                selected_type,
                canonical.get('type'),
                classification.text_type if self.domain is Domain.LEGAL else None,
            ],
            'procedureCategory': [
                canonical.get('category'),
                classification.category,
                template.category,
            ],
            'sectorAdministration': [
                canonical.get('institution'),
                classification.administration,
            ],
            'targetCategory': [
                classification.audience or DEFAULT_AUDIENCE,
            ],
        }

        auxiliary: Dict[str, str] = {}
        for attribute, values in candidates.items():
            for value in values:
                value = coerce_text(value)
                if value:
                    auxiliary[attribute] = value
                    break

        for attribute, default in self.defaults.items():
            if not auxiliary.get(attribute):
                auxiliary[attribute] = default
                logger.debug(f"Defaulted '{attribute}' to '{default}'")

        return auxiliary
