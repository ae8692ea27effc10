"""
Canonical Concept Vocabulary
============================

Defines the canonical concepts that raw OCR keys are normalized into, and the
synonym resolver that performs the normalization.

The OCR step emits heterogeneous, synonym-laden keys (``titre``, ``title``,
``intitule``, ``TYPE`` ...). Every concept owns an ORDERED alias list: the
first alias present in the raw record with a non-empty value wins.

Only three concepts carry defaults (language, status, source). They are
applied when the concept is entirely absent from the record; every other
unresolved concept stays absent from the resulting map.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class Domain(str, Enum):
    """Document domains accepted by the engine."""
    LEGAL = "legal"
    PROCEDURE = "procedure"

    @classmethod
    def parse(cls, value: Any) -> "Domain":
        """Coerce a string or Domain into a Domain, raising ValueError otherwise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown document domain: {value!r} "
                f"(expected one of {[d.value for d in cls]})"
            )

    def accepts(self, value: Any) -> bool:
        """Whether a documentType names this domain (case and padding ignored)."""
        try:
            return Domain.parse(value) is self
        except ValueError:
            return False


class CanonicalConcept(str, Enum):
    """
    Canonical concept keys.

    Groups:
    - Identification: TITLE, REFERENCE, DATE, AUTHORITY
    - Body: CONTENT, DESCRIPTION
    - Classification: CATEGORY, TYPE, LANGUAGE, STATUS, KEYWORDS, SOURCE
    - Journal metadata (legal texts): JOURNAL_NUMBER, PAGE_NUMBER, HEADER,
      MOTIVE, ATTACHMENT
    - Procedure modalities: STEPS, CONDITIONS, REQUIRED_DOCUMENTS,
      LEGAL_BASIS, DURATION, FEE, SUBMISSION_LOCATION, INSTITUTION,
      CONTACT_ADDRESS, CONTACT_PHONE, CONTACT_EMAIL
    """

    # === IDENTIFICATION ===
    TITLE = "title"
    REFERENCE = "reference"
    DATE = "date"
    AUTHORITY = "authority"

    # === BODY ===
    CONTENT = "content"
    DESCRIPTION = "description"

    # === CLASSIFICATION ===
    CATEGORY = "category"
    TYPE = "type"
    LANGUAGE = "language"
    STATUS = "status"
    KEYWORDS = "keywords"
    SOURCE = "source"

    # === JOURNAL METADATA ===
    JOURNAL_NUMBER = "journal_numero"
    PAGE_NUMBER = "numero_page"
    HEADER = "en_tete"
    MOTIVE = "motif"
    ATTACHMENT = "piece_jointe"

    # === PROCEDURE MODALITIES ===
    STEPS = "steps"
    CONDITIONS = "conditions"
    REQUIRED_DOCUMENTS = "required_documents"
    LEGAL_BASIS = "legal_basis"
    DURATION = "duration"
    FEE = "fee"
    SUBMISSION_LOCATION = "submission_location"
    INSTITUTION = "institution"
    CONTACT_ADDRESS = "contact_address"
    CONTACT_PHONE = "contact_phone"
    CONTACT_EMAIL = "contact_email"


BOTH_DOMAINS: Tuple[Domain, ...] = (Domain.LEGAL, Domain.PROCEDURE)


@dataclass(frozen=True)
class ConceptMetadata:
    """Resolution metadata for one canonical concept."""
    concept: CanonicalConcept
    aliases: Tuple[str, ...]  # Raw keys, highest priority first
    default: Optional[str] = None  # Applied only when no alias is present at all
    domains: Tuple[Domain, ...] = BOTH_DOMAINS


def normalize_key(key: Any) -> str:
    """
    Normalize a raw OCR key for alias comparison.

    ``"Numéro Ref"`` and ``"numero-ref"`` differ only in case and separators,
    so both become ``"numéro_ref"`` / ``"numero_ref"``.
    """
    normalized = str(key).strip().lower()
    normalized = re.sub(r'[\s\-\.]+', '_', normalized)
    return normalized.strip('_')


def coerce_text(value: Any) -> str:
    """
    Coerce an arbitrary OCR value to a stripped string.

    None becomes "", sequences are joined line by line, everything else goes
    through ``str``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return "\n".join(coerce_text(v) for v in value if coerce_text(v))
    return str(value).strip()


class ConceptVocabulary:
    """
    Holds the concept vocabulary and resolves raw records against it.

    Thread-safe: all data is immutable after initialization.
    """

    _CONCEPTS: Tuple[ConceptMetadata, ...] = (
        ConceptMetadata(
            concept=CanonicalConcept.TITLE,
            aliases=("title", "titre", "name", "nom", "intitule", "denomination",
                     "libelle", "procedurename", "procedure_name", "nom_procedure"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.REFERENCE,
            aliases=("reference", "numero_ref", "numero_texte"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.DATE,
            aliases=("date_journal", "publicationdate", "date", "date_publication",
                     "date_promulgation", "date_signature"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.AUTHORITY,
            aliases=("authority", "organisation", "autorite_signataire"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.CONTENT,
            aliases=("content", "contenu", "text", "texte"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.DESCRIPTION,
            aliases=("description", "objet", "details"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.CATEGORY,
            aliases=("category", "domaine", "categorie", "procedurecategory"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.TYPE,
            aliases=("type", "type_texte", "selectedtype"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.LANGUAGE,
            aliases=("language", "langue"),
            default="Français",
        ),
        ConceptMetadata(
            concept=CanonicalConcept.STATUS,
            aliases=("status", "statut"),
            default="En vigueur",
        ),
        ConceptMetadata(
            concept=CanonicalConcept.KEYWORDS,
            aliases=("keywords", "mots_cles"),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.SOURCE,
            aliases=("source",),
            default="Journal Officiel",
        ),
        ConceptMetadata(
            concept=CanonicalConcept.JOURNAL_NUMBER,
            aliases=("journal_numero", "numero_journal"),
            domains=(Domain.LEGAL,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.PAGE_NUMBER,
            aliases=("numero_page", "page"),
            domains=(Domain.LEGAL,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.HEADER,
            aliases=("en_tete", "entete"),
            domains=(Domain.LEGAL,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.MOTIVE,
            aliases=("motif",),
            domains=(Domain.LEGAL,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.ATTACHMENT,
            aliases=("piece_jointe",),
            domains=(Domain.LEGAL,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.STEPS,
            aliases=("steps", "etapes"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.CONDITIONS,
            aliases=("conditions", "exigences"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.REQUIRED_DOCUMENTS,
            aliases=("requireddocuments", "required_documents", "documents_requis",
                     "pieces_a_fournir"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.LEGAL_BASIS,
            aliases=("legalbasis", "legal_basis", "base_legale", "textes_de_reference"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.DURATION,
            aliases=("processingduration", "duree", "delai", "duree_traitement"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.FEE,
            aliases=("feeamount", "cout", "frais", "tarif"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.SUBMISSION_LOCATION,
            aliases=("submissionlocation", "lieu_depot", "lieu"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.INSTITUTION,
            aliases=("institution", "administration", "sectoradministration"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.CONTACT_ADDRESS,
            aliases=("contactaddress", "adresse", "address"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.CONTACT_PHONE,
            aliases=("contactphone", "telephone", "tel", "phone"),
            domains=(Domain.PROCEDURE,),
        ),
        ConceptMetadata(
            concept=CanonicalConcept.CONTACT_EMAIL,
            aliases=("contactemail", "email", "e_mail", "courriel"),
            domains=(Domain.PROCEDURE,),
        ),
    )

    def __init__(self, defaults: Optional[Mapping[CanonicalConcept, str]] = None):
        """
        Initialize the vocabulary.

        Args:
            defaults: Optional overrides for the per-concept default values
                (e.g. a configured default language).
        """
        overrides = dict(defaults or {})
        self._metadata: Dict[CanonicalConcept, ConceptMetadata] = {}
        for meta in self._CONCEPTS:
            if meta.concept in overrides and meta.default is not None:
                meta = ConceptMetadata(
                    concept=meta.concept,
                    aliases=meta.aliases,
                    default=overrides[meta.concept],
                    domains=meta.domains,
                )
            self._metadata[meta.concept] = meta

    @property
    def concepts(self) -> List[CanonicalConcept]:
        """All canonical concepts in declaration order."""
        return list(self._metadata)

    def get_metadata(self, concept: CanonicalConcept) -> Optional[ConceptMetadata]:
        """Get resolution metadata for a concept."""
        return self._metadata.get(concept)

    def concepts_for(self, domain: Domain) -> List[ConceptMetadata]:
        """Concepts applicable to a domain, in declaration order."""
        return [meta for meta in self._metadata.values() if domain in meta.domains]

    def lookup_by_alias(self, key: str) -> Optional[CanonicalConcept]:
        """Return the concept that declares ``key`` as an alias, if any."""
        normalized = normalize_key(key)
        for meta in self._metadata.values():
            if normalized in meta.aliases:
                return meta.concept
        return None

    def resolve(self, raw: Mapping[str, Any], domain: Any) -> Dict[str, str]:
        """
        Resolve a raw OCR record into a canonical value map.

        Args:
            raw: Raw key/value record as emitted by the OCR collaborator
            domain: "legal" or "procedure"

        Returns:
            Mapping from canonical concept key to value. Concepts with no alias
            present stay absent, except the ones that declare a default.
        """
        domain = Domain.parse(domain)

        # First non-empty spelling of each normalized key wins
        lookup: Dict[str, Any] = {}
        for key, value in (raw or {}).items():
            normalized = normalize_key(key)
            if normalized not in lookup or not coerce_text(lookup[normalized]):
                lookup[normalized] = value

        resolved: Dict[str, str] = {}
        for meta in self.concepts_for(domain):
            present = False
            for alias in meta.aliases:
                if alias not in lookup:
                    continue
                present = True
                value = coerce_text(lookup[alias])
                if value:
                    resolved[meta.concept.value] = value
                    logger.debug(f"Resolved '{meta.concept.value}' from alias '{alias}'")
                    break
            else:
                if not present and meta.default is not None:
                    resolved[meta.concept.value] = meta.default

        logger.debug(f"Resolved {len(resolved)} canonical concepts from {len(lookup)} raw keys")
        return resolved


# Global singleton instance
VOCABULARY = ConceptVocabulary()
