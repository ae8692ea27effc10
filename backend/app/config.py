"""
Configuration management for the OCR Form Autofill application.
Loads settings from environment variables.
"""
import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Configuration class for server and autofill settings."""

    # API Settings
    API_HOST: str = os.getenv('API_HOST', '0.0.0.0')
    API_PORT: str = os.getenv('API_PORT', '8000')
    CORS_ORIGINS: list = os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Delay before the consuming layer switches from scanning to reviewing
    REVIEW_TRANSITION_DELAY_MS: str = os.getenv('REVIEW_TRANSITION_DELAY_MS', '500')

    # Canonical defaults
    DEFAULT_LANGUAGE: str = os.getenv('DEFAULT_LANGUAGE', 'Français')
    DEFAULT_STATUS: str = os.getenv('DEFAULT_STATUS', 'En vigueur')
    DEFAULT_SOURCE: str = os.getenv('DEFAULT_SOURCE', 'Journal Officiel')
    DEFAULT_PROCEDURE_ADMINISTRATION: str = os.getenv(
        'DEFAULT_PROCEDURE_ADMINISTRATION', 'Ministère du Commerce'
    )

    # Template library
    USE_BUILTIN_TEMPLATES: bool = os.getenv('USE_BUILTIN_TEMPLATES', 'true').lower() == 'true'

    @classmethod
    def validate(cls) -> bool:
        """
        Validate that configuration values are usable.
        """
        try:
            port = int(cls.API_PORT)
        except ValueError:
            raise ValueError(f"API_PORT must be an integer, got '{cls.API_PORT}'.")
        if not 0 < port < 65536:
            raise ValueError(f"API_PORT out of range: {port}")

        try:
            delay = int(cls.REVIEW_TRANSITION_DELAY_MS)
        except ValueError:
            raise ValueError(
                f"REVIEW_TRANSITION_DELAY_MS must be an integer, got '{cls.REVIEW_TRANSITION_DELAY_MS}'."
            )
        if delay < 0:
            raise ValueError("REVIEW_TRANSITION_DELAY_MS must be >= 0.")

        if cls.LOG_LEVEL not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unknown LOG_LEVEL: {cls.LOG_LEVEL}")
        return True

    @classmethod
    def get_port(cls) -> int:
        return int(cls.API_PORT)

    @classmethod
    def get_review_delay_ms(cls) -> int:
        return int(cls.REVIEW_TRANSITION_DELAY_MS)

    @classmethod
    def get_log_level(cls) -> int:
        return getattr(logging, cls.LOG_LEVEL, logging.INFO)

    @classmethod
    def get_concept_defaults(cls) -> dict:
        """
        Get default values for the canonical concepts that carry one.
        """
        from app.services.form_autofill.vocabulary import CanonicalConcept

        return {
            CanonicalConcept.LANGUAGE: cls.DEFAULT_LANGUAGE,
            CanonicalConcept.STATUS: cls.DEFAULT_STATUS,
            CanonicalConcept.SOURCE: cls.DEFAULT_SOURCE,
        }
