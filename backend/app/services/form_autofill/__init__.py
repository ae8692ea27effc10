"""
Form Autofill Engine
====================

Binds semi-structured OCR output onto dynamically selected form templates
for legal texts and administrative procedures.

Pipeline Stages:
1. GUARD: Reject records from the wrong document domain
2. RESOLVE: Synonym resolution of raw keys into canonical concepts
3. CLASSIFY: Keyword scoring for category, administration, audience, text type
4. SELECT: Domain filtering, name deduplication and fuzzy type matching
5. BIND: Declarative field dispatch with pattern-cascade fallbacks
6. REPORT: Filled/total counts and the scanning -> reviewing transition

Design Principles:
- Every stage is a pure function of its inputs (no cross-call state)
- Best effort: data problems never raise, they only lower the fill count
- Precedence: explicit > pattern-extracted > keyword-classified > default
"""

from .vocabulary import (
    CanonicalConcept,
    ConceptMetadata,
    ConceptVocabulary,
    Domain,
    VOCABULARY,
)
from .pattern_extractor import PatternExtractor, PatternRule
from .classifier import CategoryClassifier, ClassificationResult
from .schema import FieldDefinition, FieldType, FormTemplate
from .template_matcher import TemplateMatcher, LEGAL_TEXT_TYPES, PROCEDURE_TYPES
from .field_binder import BindingRule, BoundFormData, FieldBinder
from .completion import CompletionSummary, InputMode, InputModeController, summarize
from .pipeline import (
    AutofillOutput,
    ExtractionEventHandler,
    FormAutofillPipeline,
    RawExtractionRecord,
)

__all__ = [
    'FormAutofillPipeline',
    'AutofillOutput',
    'RawExtractionRecord',
    'ExtractionEventHandler',
    'ConceptVocabulary',
    'ConceptMetadata',
    'CanonicalConcept',
    'Domain',
    'VOCABULARY',
    'PatternExtractor',
    'PatternRule',
    'CategoryClassifier',
    'ClassificationResult',
    'FieldDefinition',
    'FieldType',
    'FormTemplate',
    'TemplateMatcher',
    'LEGAL_TEXT_TYPES',
    'PROCEDURE_TYPES',
    'BindingRule',
    'BoundFormData',
    'FieldBinder',
    # Completion reporting
    'CompletionSummary',
    'InputMode',
    'InputModeController',
    'summarize',
]
