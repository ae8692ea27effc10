"""
Pattern extraction service for free-form document text.
Recovers structured facts (title, recitals, first article, final provisions)
from OCR text when no explicit field carried them.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternRule:
    """One step of a pattern cascade: a regex and the accepted capture length."""
    pattern: str
    min_length: int
    max_length: int
    flags: int = re.IGNORECASE


class PatternExtractor:
    """Service for mining canonical concepts out of free text."""

    # Ordered pattern cascades per concept
    # First pattern whose first group satisfies the length bounds wins
    CONCEPT_PATTERNS: Dict[str, List[PatternRule]] = {
        # Legal text titles
        'title': [
            PatternRule(r'(?:titre|objet|sujet|intitulé)\s*:?\s*([^\n\r]{10,200})', 10, 200),
            PatternRule(r'^([^\n\r]{20,150})\s*(?:\n|\r)', 20, 150, re.IGNORECASE | re.MULTILINE),
            PatternRule(
                r'(?:décret|arrêté|loi|ordonnance)\s+(?:n°|numéro)?\s*[\d\-/]*\s+'
                r'(?:du|en date)\s+[\d/\-]+\s+(?:relatif|portant|fixant)\s+([^\n\r]{10,150})',
                10, 150,
            ),
            PatternRule(r'(?:concernant|relative?|portant sur)\s+([^\n\r]{10,150})', 10, 150),
        ],
        # Administrative procedure names
        'procedure_title': [
            PatternRule(r'(?:titre|objet|procédure|sujet|intitulé)\s*:?\s*([^\n\r]{10,200})', 10, 200),
            PatternRule(r'^([^\n\r]{20,150})\s*(?:\n|\r)', 20, 150, re.IGNORECASE | re.MULTILINE),
            PatternRule(
                r'(?:procédure|démarche|formalité)\s+(?:de|pour|relative|concernant)\s+([^\n\r]{10,150})',
                10, 150,
            ),
            PatternRule(r'(?:demande|dossier|formulaire)\s+(?:de|pour)\s+([^\n\r]{10,120})', 10, 120),
        ],
        # Legal recitals
        'considerant': [
            PatternRule(r'considérant\s+(?:que\s+)?([^\.]{50,200})', 50, 200),
        ],
        # First article body
        'article_1': [
            PatternRule(r'article\s+(?:premier|1er|1)\s*:?\s*([^\.]{50,300})', 50, 300),
        ],
        # Final provisions
        'dispositions_finales': [
            PatternRule(
                r'(?:article\s+(?:final|dernier)|dispositions?\s+finales?)\s*:?\s*([^\.]{30,200})',
                30, 200,
            ),
        ],
    }

    def __init__(self):
        """Initialize pattern extractor."""
        # Compile regex patterns for efficiency
        self.compiled_patterns: Dict[str, List[Tuple[re.Pattern, PatternRule]]] = {}
        for concept, rules in self.CONCEPT_PATTERNS.items():
            self.compiled_patterns[concept] = [
                (re.compile(rule.pattern, rule.flags), rule) for rule in rules
            ]
        logger.info(f"Initialized PatternExtractor with {len(self.CONCEPT_PATTERNS)} concepts")

    @property
    def concepts(self) -> List[str]:
        """Concepts that have a pattern cascade."""
        return list(self.CONCEPT_PATTERNS)

    def supports(self, concept: str) -> bool:
        """Check whether a concept has a pattern cascade."""
        return concept in self.compiled_patterns

    def extract(self, concept: str, text: Any) -> Optional[str]:
        """
        Extract a concept value from free text.

        Args:
            concept: Concept name (e.g. 'title', 'considerant')
            text: Free text to scan; non-string values are treated as empty

        Returns:
            The trimmed first capture group of the first matching pattern,
            or None when no pattern matches within the length bounds
        """
        if not isinstance(text, str) or not text.strip():
            return None

        patterns = self.compiled_patterns.get(concept)
        if not patterns:
            logger.debug(f"No pattern cascade for concept '{concept}'")
            return None

        for pattern, rule in patterns:
            match = pattern.search(text)
            if not match or not match.group(1):
                continue
            value = match.group(1).strip()
            if rule.min_length <= len(value) <= rule.max_length:
                logger.debug(f"Extracted '{concept}' with pattern '{pattern.pattern}'")
                return value
            logger.debug(
                f"Rejected '{concept}' capture of length {len(value)} "
                f"outside [{rule.min_length}, {rule.max_length}]"
            )

        return None

    def extract_batch(self, concepts: List[str], text: Any) -> Dict[str, str]:
        """
        Extract several concepts from the same text.

        Args:
            concepts: Concept names
            text: Free text to scan

        Returns:
            Mapping of concept to extracted value, for concepts that matched
        """
        results = {}
        for concept in concepts:
            value = self.extract(concept, text)
            if value:
                results[concept] = value
        return results
