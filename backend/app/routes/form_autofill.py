"""
Form Autofill API Routes
========================

REST API endpoints for the OCR form autofill engine.

Endpoints:
- POST /api/v1/form-autofill/extract - Bind an OCR record onto a form template
- POST /api/v1/form-autofill/select-template - Filter, deduplicate and select a template
- POST /api/v1/form-autofill/classify - Keyword classification of free text
- POST /api/v1/form-autofill/resolve - Resolve raw OCR keys into canonical concepts
- GET /api/v1/form-autofill/vocabulary - Get the canonical concept vocabulary
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException

from app.config import Config
from app.data.templates import load_builtin_templates
from app.models import (
    ClassifyRequest, ClassifyResponse, ConceptInfo, ExtractRequest, ExtractResponse,
    FormTemplateModel, OCRRecord, ResolveResponse, SelectTemplateRequest,
    SelectTemplateResponse, VocabularyResponse,
)
from app.services.form_autofill import (
    ConceptVocabulary,
    Domain,
    FormAutofillPipeline,
    FormTemplate,
    PatternExtractor,
    TemplateMatcher,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/form-autofill", tags=["Form Autofill"])

# Pattern cascades reported by /resolve, per domain
RESOLVE_PATTERN_CONCEPTS = {
    Domain.LEGAL: ['title', 'considerant', 'article_1', 'dispositions_finales'],
    Domain.PROCEDURE: ['procedure_title'],
}


# ============================================================================
# Pipeline Instances (Singletons)
# ============================================================================

_pipelines: Dict[Domain, FormAutofillPipeline] = {}
_vocabulary: Optional[ConceptVocabulary] = None


def get_vocabulary() -> ConceptVocabulary:
    """Get or create the configured vocabulary."""
    global _vocabulary

    if _vocabulary is None:
        _vocabulary = ConceptVocabulary(defaults=Config.get_concept_defaults())
        logger.info("Initialized ConceptVocabulary singleton")

    return _vocabulary


def get_pipeline(domain: Domain) -> FormAutofillPipeline:
    """Get or create the pipeline instance for a domain."""
    if domain not in _pipelines:
        _pipelines[domain] = FormAutofillPipeline(
            domain,
            vocabulary=get_vocabulary(),
            default_administration=Config.DEFAULT_PROCEDURE_ADMINISTRATION,
        )
        logger.info(f"Initialized FormAutofillPipeline singleton for '{domain.value}'")

    return _pipelines[domain]


def _parse_domain(value: str) -> Domain:
    try:
        return Domain.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _to_templates(models: Optional[List[FormTemplateModel]]) -> List[FormTemplate]:
    """Request templates, or the built-in library when none were sent."""
    if models is None:
        return load_builtin_templates() if Config.USE_BUILTIN_TEMPLATES else []
    return [FormTemplate.from_dict(m.model_dump()) for m in models]


def _to_model(template: FormTemplate) -> FormTemplateModel:
    return FormTemplateModel(**template.to_dict())


# ============================================================================
# API Endpoints
# ============================================================================

@router.post("/extract", response_model=ExtractResponse)
async def extract_form_data(request: ExtractRequest) -> ExtractResponse:
    """
    Bind an OCR record onto a form template.

    The record goes through synonym resolution, keyword classification,
    template selection (unless selectedTemplateId is given) and field binding.
    A record whose documentType differs from the requested domain is not an
    error: it is reported with accepted=false and a diagnostic.
    """
    try:
        domain = _parse_domain(request.domain or request.record.documentType)
        templates = _to_templates(request.templates)

        pipeline = get_pipeline(domain)
        selected = None
        if request.selectedTemplateId:
            selected = pipeline.matcher.find_by_id(templates, request.selectedTemplateId)
            if selected is None:
                raise HTTPException(
                    status_code=400,
                    detail=f"Unknown template id: {request.selectedTemplateId}"
                )

        record = request.record.model_dump()
        if not domain.accepts(record['documentType']):
            return ExtractResponse(
                success=True,
                accepted=False,
                diagnostic=(
                    f"Incompatible document type '{record['documentType']}' "
                    f"for '{domain.value}' pipeline; record dropped"
                ),
            )

        output = pipeline.process(record, templates, selected_template=selected)
        if output is None:
            return ExtractResponse(
                success=True,
                accepted=True,
                diagnostic=f"No template available for domain '{domain.value}'",
            )

        return ExtractResponse(
            success=True,
            templateId=output.template_id,
            templateName=output.template_name,
            message=(
                f"Formulaire rempli par OCR: {output.filled_count} champs ont été "
                f"remplis automatiquement."
            ),
            statistics=pipeline.get_statistics(output),
            **output.to_dict(),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Autofill error: {e}", exc_info=True)
        return ExtractResponse(
            success=False,
            error=str(e)
        )


@router.post("/select-template", response_model=SelectTemplateResponse)
async def select_template(request: SelectTemplateRequest) -> SelectTemplateResponse:
    """
    Filter a template library to a domain, deduplicate it by name and select
    the template matching the detected type.
    """
    domain = _parse_domain(request.domain)
    matcher = TemplateMatcher()

    available = matcher.library_view(_to_templates(request.templates), domain)
    selected = matcher.select_template(available, request.detectedType)

    return SelectTemplateResponse(
        available=[_to_model(t) for t in available],
        selected=_to_model(selected) if selected else None,
    )


@router.post("/classify", response_model=ClassifyResponse)
async def classify_text(request: ClassifyRequest) -> ClassifyResponse:
    """Classify free text by category, administration, audience and text type."""
    result = get_pipeline(Domain.PROCEDURE).classifier.classify(request.text)
    return ClassifyResponse(
        category=result.category,
        administration=result.administration,
        audience=result.audience,
        textType=result.text_type,
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_record(record: OCRRecord) -> ResolveResponse:
    """
    Resolve raw OCR keys into the canonical value map.

    Also reports the raw keys no concept claims and what the pattern
    cascades find in the document text.
    """
    domain = _parse_domain(record.documentType)
    vocabulary = get_vocabulary()
    canonical = vocabulary.resolve(record.formData, domain)

    unmapped = [key for key in record.formData if vocabulary.lookup_by_alias(key) is None]

    extractor = get_pipeline(domain).extractor
    text = canonical.get('content') or canonical.get('description')
    extracted = extractor.extract_batch(RESOLVE_PATTERN_CONCEPTS[domain], text)

    return ResolveResponse(
        domain=domain.value,
        canonical=canonical,
        unmappedKeys=unmapped,
        extracted=extracted,
    )


@router.get("/vocabulary", response_model=VocabularyResponse)
async def get_concept_vocabulary() -> VocabularyResponse:
    """
    Get the complete canonical concept vocabulary.

    Returns every concept with its ordered aliases, default and domains,
    plus the concepts that have a pattern cascade.
    """
    vocabulary = get_vocabulary()

    concepts = []
    for concept in vocabulary.concepts:
        metadata = vocabulary.get_metadata(concept)
        concepts.append(ConceptInfo(
            concept=concept.value,
            aliases=list(metadata.aliases),
            default=metadata.default,
            domains=[d.value for d in metadata.domains],
        ))

    return VocabularyResponse(
        total_concepts=len(concepts),
        concepts=concepts,
        pattern_concepts=PatternExtractor().concepts,
    )
