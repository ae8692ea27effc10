"""
Category classification service for document text.
Detects category, administration, audience and legal text type by
ordered keyword rules.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# (keywords, label) rules, evaluated in order
KeywordRules = List[Tuple[Tuple[str, ...], str]]

DEFAULT_AUDIENCE = "citoyen"


@dataclass
class ClassificationResult:
    """Labels detected for one text. Category, administration and text type may be absent."""
    category: Optional[str] = None
    administration: Optional[str] = None
    audience: str = DEFAULT_AUDIENCE
    text_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class CategoryClassifier:
    """Service for classifying document text along independent keyword axes."""

    # Rule order encodes domain priority: commerce is checked before agriculture
    CATEGORY_RULES: KeywordRules = [
        (('commerce', 'entreprise', 'société'), 'Commerce'),
        (('urbanisme', 'construction', 'permis'), 'Urbanisme'),
        (('état civil', 'naissance', 'mariage'), 'État Civil'),
        (('fiscalité', 'impôt', 'taxe'), 'Fiscalité'),
        (('santé', 'médical', 'hôpital'), 'Santé'),
        (('éducation', 'école', 'université'), 'Éducation'),
        (('transport', 'permis de conduire', 'véhicule'), 'Transport'),
        (('environnement', 'écologie', 'pollution'), 'Environnement'),
        (('agriculture', 'agricole', 'exploitation'), 'Agriculture'),
    ]

    ADMINISTRATION_RULES: KeywordRules = [
        (('intérieur', 'wilaya', 'commune'), "Ministère de l'Intérieur"),
        (('finance', 'impôt', 'fiscal'), 'Ministère des Finances'),
        (('justice', 'tribunal', 'juridique'), 'Ministère de la Justice'),
        (('santé', 'médical', 'hôpital'), 'Ministère de la Santé'),
        (('éducation', 'école', 'université'), "Ministère de l'Éducation"),
        (('commerce', 'entreprise', 'commercial'), 'Ministère du Commerce'),
        (('agriculture', 'agricole', 'exploitation'), "Ministère de l'Agriculture"),
        (('transport', 'véhicule', 'route'), 'Ministère des Transports'),
    ]

    AUDIENCE_RULES: KeywordRules = [
        (('citoyen', 'individu', 'personne physique'), 'citoyen'),
        (('entreprise', 'société', 'personne morale'), 'entreprise'),
        (('professionnel', 'métier', 'profession'), 'professionnel'),
        (('association', 'organisme', 'collectif'), 'association'),
        (('étranger', 'expatrié', 'visa'), 'etranger'),
    ]

    # Enactment keywords; the more specific instruments come first
    TEXT_TYPE_RULES: KeywordRules = [
        (('texte constitutionnel', 'révision constitutionnelle'), 'Texte Constitutionnel'),
        (('constitution',), 'Constitution'),
        (('ordonnance n°', 'ordonnance no'), 'Ordonnance'),
        (('décret exécutif', 'décret présidentiel', 'décret n°', 'décret no'), 'Décret'),
        (('arrêté interministériel', 'arrêté n°', 'arrêté du'), 'Arrêté'),
        (('loi organique', 'loi n°', 'loi no', 'loi de finances'), 'Loi'),
        (('circulaire',), 'Circulaire'),
        (('instruction n°', 'instruction interministérielle'), 'Instruction'),
        (('décision n°', 'décision du'), 'Décision'),
        (('arrêt de la cour', 'cour suprême', 'conseil d\'état'), 'Jurisprudence'),
        (('convention',), 'Convention'),
        (('accord',), 'Accord'),
    ]

    def __init__(self):
        """Initialize category classifier."""
        rule_count = sum(len(rules) for rules in (
            self.CATEGORY_RULES, self.ADMINISTRATION_RULES,
            self.AUDIENCE_RULES, self.TEXT_TYPE_RULES,
        ))
        logger.info(f"Initialized CategoryClassifier with {rule_count} rules")

    def classify(self, text: Any) -> ClassificationResult:
        """
        Classify a text along the category, administration, audience and
        text-type axes.

        Args:
            text: Free text; non-string values are treated as empty

        Returns:
            ClassificationResult. Audience always carries a label.
        """
        normalized = self._normalize_text(text)
        result = ClassificationResult(
            category=self._first_match(normalized, self.CATEGORY_RULES),
            administration=self._first_match(normalized, self.ADMINISTRATION_RULES),
            audience=self._first_match(normalized, self.AUDIENCE_RULES) or DEFAULT_AUDIENCE,
            text_type=self._first_match(normalized, self.TEXT_TYPE_RULES),
        )
        logger.debug(f"Classified text ({len(normalized)} chars): {result}")
        return result

    @staticmethod
    def _first_match(normalized: str, rules: KeywordRules) -> Optional[str]:
        for keywords, label in rules:
            if any(keyword in normalized for keyword in keywords):
                return label
        return None

    @staticmethod
    def _normalize_text(text: Any) -> str:
        """Lowercase the text; anything that is not a string becomes empty."""
        if not isinstance(text, str):
            return ""
        return text.lower()
