"""
Form Autofill Pipeline
======================

The orchestrator that turns one OCR record into values bound to a form
template.

Pipeline Stages:
----------------
1. GUARD: Reject records whose documentType does not match the pipeline domain
2. RESOLVE: Normalize raw keys into canonical concepts
3. CLASSIFY: Keyword classification of the document text
4. SELECT: Domain-filter, deduplicate and select a template
5. BIND: Project canonical values onto the template fields
6. REPORT: Count populated fields and notify the consuming layer

Design Principles:
------------------
- Pure per call: no state survives between two ``process`` calls
- Never raises on data; the only failure signal is a low fill count
- Signals go through an injected ExtractionEventHandler, never globals

Output Schema:
--------------
{
  "boundFields": {fieldName: string | bool | [string]},
  "detectedType": string?,
  "detectedCategory": string?,
  "detectedAdministration": string?,
  "detectedAudience": string,
  "filledCount": int,
  "totalCount": int
}
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .classifier import CategoryClassifier, ClassificationResult
from .completion import CompletionSummary, is_filled, summarize
from .field_binder import BoundFormData, FieldBinder, DEFAULT_PROCEDURE_ADMINISTRATION
from .pattern_extractor import PatternExtractor
from .schema import FormTemplate
from .template_matcher import TemplateMatcher, TemplatePredicate
from .vocabulary import ConceptVocabulary, Domain, VOCABULARY, coerce_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawExtractionRecord:
    """OCR output as delivered by the recognition collaborator."""
    document_type: str
    form_data: Mapping[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawExtractionRecord":
        return cls(
            document_type=str(data.get('documentType') or data.get('document_type') or ''),
            form_data=dict(data.get('formData') or data.get('form_data') or {}),
        )


@dataclass
class AutofillOutput:
    """
    Complete pipeline output for one record.

    Matches the boundary contract produced to the consuming layer, plus
    template and audit metadata.
    """
    domain: str
    bound_fields: Dict[str, Any]
    detected_audience: str
    filled_count: int
    total_count: int
    detected_type: Optional[str] = None
    detected_category: Optional[str] = None
    detected_administration: Optional[str] = None

    # Template metadata
    template_id: Optional[str] = None
    template_name: Optional[str] = None

    # Processing metadata
    auxiliary: Dict[str, str] = field(default_factory=dict)
    canonical: Dict[str, str] = field(default_factory=dict)
    field_sources: Dict[str, str] = field(default_factory=dict)
    processing_time_ms: int = 0
    processed_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the boundary contract."""
        return {
            'boundFields': self.bound_fields,
            'detectedType': self.detected_type,
            'detectedCategory': self.detected_category,
            'detectedAdministration': self.detected_administration,
            'detectedAudience': self.detected_audience,
            'filledCount': self.filled_count,
            'totalCount': self.total_count,
        }

    def to_extended_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with template and audit metadata."""
        result = self.to_dict()
        result.update({
            'domain': self.domain,
            'templateId': self.template_id,
            'templateName': self.template_name,
            'auxiliary': self.auxiliary,
            'canonical': self.canonical,
            'fieldSources': self.field_sources,
            'metadata': {
                'processing_time_ms': self.processing_time_ms,
                'processed_at': self.processed_at,
            },
        })
        return result


class ExtractionEventHandler:
    """
    Callbacks from the pipeline to the consuming layer.

    Subclass and override the hooks you need; the defaults do nothing.
    """

    def on_complete(self, output: AutofillOutput, summary: CompletionSummary) -> None:
        pass

    def on_rejected(self, record: RawExtractionRecord, reason: str) -> None:
        pass

    def on_no_template(self, domain: Domain) -> None:
        pass


class FormAutofillPipeline:
    """
    Extraction-and-binding pipeline for one document domain.

    Example usage:

        pipeline = FormAutofillPipeline(domain="legal")

        output = pipeline.process(
            {"documentType": "legal", "formData": {"titre": "Décret ..."}},
            templates=library,
        )

        if output is not None:
            print(output.to_dict())
    """

    def __init__(
        self,
        domain,
        vocabulary: Optional[ConceptVocabulary] = None,
        extractor: Optional[PatternExtractor] = None,
        classifier: Optional[CategoryClassifier] = None,
        matcher: Optional[TemplateMatcher] = None,
        handler: Optional[ExtractionEventHandler] = None,
        template_predicate: Optional[TemplatePredicate] = None,
        default_administration: str = DEFAULT_PROCEDURE_ADMINISTRATION,
    ):
        """
        Initialize the pipeline.

        Args:
            domain: "legal" or "procedure"
            vocabulary: Synonym resolver (defaults to the global vocabulary)
            extractor: Pattern extractor shared with the binder
            classifier: Keyword classifier
            matcher: Template matcher
            handler: Event handler notified of completion, rejection, missing templates
            template_predicate: Replaces the default domain filter for templates
            default_administration: Default sectorAdministration for procedures
        """
        self.domain = Domain.parse(domain)
        self.vocabulary = vocabulary or VOCABULARY
        self.extractor = extractor or PatternExtractor()
        self.classifier = classifier or CategoryClassifier()
        self.matcher = matcher or TemplateMatcher()
        self.handler = handler or ExtractionEventHandler()
        self.template_predicate = template_predicate
        self.binder = FieldBinder(
            self.domain,
            extractor=self.extractor,
            default_administration=default_administration,
        )
        logger.info(f"Initialized FormAutofillPipeline for domain '{self.domain.value}'")

    def available_templates(self, templates: Iterable[FormTemplate]) -> List[FormTemplate]:
        """Domain-filtered, deduplicated view of a template library, minus empty templates."""
        view = self.matcher.library_view(templates, self.domain, self.template_predicate)
        return [t for t in view if t.fields]

    def process(
        self,
        record,
        templates: Iterable[FormTemplate],
        selected_template: Optional[FormTemplate] = None,
    ) -> Optional[AutofillOutput]:
        """
        Run the full pipeline on one OCR record.

        Args:
            record: RawExtractionRecord or its boundary dict form
            templates: Template library snapshot for this call
            selected_template: Template chosen manually; skips auto-selection

        Returns:
            AutofillOutput, or None when the record is rejected for a domain
            mismatch or no template is available
        """
        start = time.monotonic()
        if not isinstance(record, RawExtractionRecord):
            record = RawExtractionRecord.from_dict(record or {})

        # Stage 1: domain guard
        if not self.domain.accepts(record.document_type):
            reason = (
                f"Incompatible document type '{record.document_type}' "
                f"for '{self.domain.value}' pipeline"
            )
            logger.warning(reason)
            self.handler.on_rejected(record, reason)
            return None

        logger.info(f"Processing OCR record with {len(record.form_data)} raw fields")

        # Stage 2: synonym resolution
        canonical = self.vocabulary.resolve(record.form_data, self.domain)

        # Stage 3: keyword classification
        classification = self.classify(canonical)

        # Stage 4: template selection
        template = selected_template
        if template is None:
            detected_type = canonical.get('type')
            if not detected_type and self.domain is Domain.LEGAL:
                detected_type = classification.text_type
            template = self.matcher.select_template(
                self.available_templates(templates), detected_type
            )
        if template is None:
            logger.warning(f"No template available for domain '{self.domain.value}'")
            self.handler.on_no_template(self.domain)
            return None
        logger.info(f"Using template '{template.name}' ({template.type})")

        # Stage 5: binding
        bound = self.binder.bind(template, canonical, classification)

        # Stage 6: reporting
        summary = summarize(bound)
        output = self._build_output(template, canonical, bound, summary)
        output.processing_time_ms = int((time.monotonic() - start) * 1000)
        output.processed_at = datetime.now().isoformat()

        logger.info(
            f"Form filled by OCR: {summary.filled_count}/{summary.total_count} fields "
            f"in {output.processing_time_ms}ms"
        )
        self.handler.on_complete(output, summary)
        return output

    def classify(self, canonical: Mapping[str, str]) -> ClassificationResult:
        """Classify the document text of a canonical map."""
        text = " ".join(
            coerce_text(canonical.get(key))
            for key in ('title', 'content', 'description')
            if canonical.get(key)
        )
        return self.classifier.classify(text)

    def _build_output(
        self,
        template: FormTemplate,
        canonical: Dict[str, str],
        bound: BoundFormData,
        summary: CompletionSummary,
    ) -> AutofillOutput:
        auxiliary = bound.auxiliary
        return AutofillOutput(
            domain=self.domain.value,
            bound_fields=dict(bound.fields),
            detected_type=auxiliary.get('selectedType'),
            detected_category=auxiliary.get('procedureCategory'),
            detected_administration=auxiliary.get('sectorAdministration'),
            detected_audience=auxiliary.get('targetCategory', 'citoyen'),
            filled_count=summary.filled_count,
            total_count=summary.total_count,
            template_id=template.id,
            template_name=template.name,
            auxiliary=dict(auxiliary),
            canonical=dict(canonical),
            field_sources=dict(bound.sources),
        )

    def get_statistics(self, output: AutofillOutput) -> Dict[str, Any]:
        """
        Generate statistics about a pipeline output.

        Returns:
            Dictionary with fill rate, filled/empty field lists and source distribution
        """
        filled = [name for name, value in output.bound_fields.items() if is_filled(value)]
        empty = [name for name in output.bound_fields if name not in filled]

        source_counts: Dict[str, int] = {}
        for source in output.field_sources.values():
            source_counts[source] = source_counts.get(source, 0) + 1

        return {
            'total_fields': output.total_count,
            'filled_fields': output.filled_count,
            'fill_rate': output.filled_count / output.total_count if output.total_count else 0.0,
            'filled': filled,
            'empty': empty,
            'source_distribution': source_counts,
            'canonical_concepts': len(output.canonical),
        }
