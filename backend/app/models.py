"""
Pydantic models for API request/response schemas.
"""
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, Field
from datetime import datetime


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime


class FieldDefinitionModel(BaseModel):
    """Declared field of a form template."""
    name: str
    label: str = ""
    type: str = Field("text", description="text | textarea | select | checkbox | date | url | number | dynamic-list")
    required: bool = False
    options: List[str] = Field(default_factory=list)
    placeholder: str = ""


class FormTemplateModel(BaseModel):
    """Form template as provided by the template library."""
    id: str
    name: str
    type: str = Field(..., description="Free-form template type (e.g., 'Loi', 'Procédure Administrative')")
    category: str = ""
    description: str = ""
    fields: List[FieldDefinitionModel] = Field(default_factory=list)


class OCRRecord(BaseModel):
    """OCR output delivered by the recognition step."""
    documentType: str = Field(..., description="legal | procedure")
    formData: Dict[str, Any] = Field(default_factory=dict, description="Raw key/value pairs recognized by OCR")


class ExtractRequest(BaseModel):
    """Request model for binding an OCR record to a template."""
    record: OCRRecord
    templates: Optional[List[FormTemplateModel]] = Field(None, description="Template library; built-in templates when omitted")
    selectedTemplateId: Optional[str] = Field(None, description="Manually selected template id")
    domain: Optional[str] = Field(None, description="Pipeline domain; defaults to record.documentType")


class ExtractResponse(BaseModel):
    """Response model for the extract endpoint."""
    success: bool
    accepted: bool = True
    boundFields: Dict[str, Union[bool, str, List[str]]] = Field(default_factory=dict)
    detectedType: Optional[str] = None
    detectedCategory: Optional[str] = None
    detectedAdministration: Optional[str] = None
    detectedAudience: Optional[str] = None
    filledCount: int = 0
    totalCount: int = 0
    templateId: Optional[str] = None
    templateName: Optional[str] = None
    message: Optional[str] = None
    diagnostic: Optional[str] = None
    statistics: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class SelectTemplateRequest(BaseModel):
    """Request model for template selection."""
    domain: str = Field(..., description="legal | procedure")
    detectedType: Optional[str] = None
    templates: Optional[List[FormTemplateModel]] = None


class SelectTemplateResponse(BaseModel):
    """Response model for template selection."""
    available: List[FormTemplateModel] = Field(default_factory=list)
    selected: Optional[FormTemplateModel] = None


class ClassifyRequest(BaseModel):
    """Request model for keyword classification."""
    text: str = ""


class ClassifyResponse(BaseModel):
    """Labels detected by keyword classification."""
    category: Optional[str] = None
    administration: Optional[str] = None
    audience: str
    textType: Optional[str] = None


class ResolveResponse(BaseModel):
    """Canonical value map resolved from an OCR record."""
    domain: str
    canonical: Dict[str, str]
    unmappedKeys: List[str] = Field(default_factory=list, description="Raw keys matching no concept alias")
    extracted: Dict[str, str] = Field(default_factory=dict, description="Pattern cascade matches over the document text")


class ConceptInfo(BaseModel):
    """Canonical concept definition."""
    concept: str
    aliases: List[str]
    default: Optional[str] = None
    domains: List[str]


class VocabularyResponse(BaseModel):
    """Response containing the full concept vocabulary."""
    total_concepts: int
    concepts: List[ConceptInfo]
    pattern_concepts: List[str]
