#!/usr/bin/env python3
"""
Form Autofill Pipeline - Example Usage
======================================

This script demonstrates how to bind an OCR record onto a form template
with the form autofill pipeline.

Usage:
    python examples/form_autofill_example.py path/to/record.json

The record file holds the OCR boundary object:
    {"documentType": "legal", "formData": {"titre": "...", "contenu": "..."}}
"""

import sys
import json
import argparse
import logging
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import Config
from app.data.templates import load_builtin_templates
from app.services.form_autofill import (
    ConceptVocabulary,
    ExtractionEventHandler,
    FormAutofillPipeline,
    InputModeController,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ConsoleHandler(ExtractionEventHandler):
    """Prints pipeline signals and drives the scanning -> reviewing switch."""

    def __init__(self, controller: InputModeController):
        self.controller = controller
        self.timer = None

    def on_complete(self, output, summary):
        print(f"\nFormulaire rempli par OCR: {summary.message}")
        self.timer = self.controller.schedule_complete()

    def wait_for_review(self):
        """Block until the scheduled switch to reviewing has fired."""
        if self.timer is not None:
            self.timer.join()
        print(f"\nInput mode: {self.controller.mode.value}")

    def on_rejected(self, record, reason):
        print(f"\nRecord dropped: {reason}")

    def on_no_template(self, domain):
        print(f"\nNo template available for domain '{domain.value}'")


def process_record(record_path: str, output_path: str = None, extended: bool = False):
    """
    Process an OCR record file through the autofill pipeline.

    Args:
        record_path: Path to the JSON record
        output_path: Optional path to save JSON output
        extended: Whether to include template and audit metadata in output
    """
    record_path = Path(record_path)
    if not record_path.exists():
        logger.error(f"File not found: {record_path}")
        return None

    with open(record_path, 'r', encoding='utf-8') as f:
        record = json.load(f)

    logger.info(f"Processing: {record_path.name}")

    controller = InputModeController(delay_ms=Config.get_review_delay_ms())
    handler = ConsoleHandler(controller)
    pipeline = FormAutofillPipeline(
        domain=record.get('documentType', 'legal'),
        vocabulary=ConceptVocabulary(defaults=Config.get_concept_defaults()),
        handler=handler,
        default_administration=Config.DEFAULT_PROCEDURE_ADMINISTRATION,
    )

    result = pipeline.process(record, load_builtin_templates())
    if result is None:
        return None

    stats = pipeline.get_statistics(result)

    # Print summary
    print("\n" + "=" * 60)
    print("FORM AUTOFILL RESULTS")
    print("=" * 60)
    print(f"\nTemplate: {result.template_name} ({result.template_id})")
    print(f"Detected Type: {result.detected_type}")
    print(f"Detected Category: {result.detected_category or '-'}")
    print(f"Detected Administration: {result.detected_administration or '-'}")
    print(f"Detected Audience: {result.detected_audience}")

    print("\n" + "-" * 40)
    print("BOUND FIELDS")
    print("-" * 40)
    for name, value in result.bound_fields.items():
        source = result.field_sources.get(name, '')
        indicator = "✓" if name in stats['filled'] else "✗"
        shown = value if not isinstance(value, str) else f"\"{value[:50]}{'...' if len(value) > 50 else ''}\""
        print(f"  {indicator} {name:25} [{source:8}] {shown}")

    print("\n" + "-" * 40)
    print("STATISTICS")
    print("-" * 40)
    print(f"Filled: {result.filled_count}/{result.total_count} ({stats['fill_rate']:.0%})")
    for source, count in sorted(stats['source_distribution'].items(), key=lambda x: -x[1]):
        print(f"  {source}: {count}")

    if output_path:
        output_path = Path(output_path)
        output_data = result.to_extended_dict() if extended else result.to_dict()
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2, ensure_ascii=False)
        print(f"\nOutput saved to: {output_path}")

    handler.wait_for_review()
    return result


def show_vocabulary():
    """Display the canonical concept vocabulary."""
    vocabulary = ConceptVocabulary(defaults=Config.get_concept_defaults())

    print("\n" + "=" * 60)
    print("CANONICAL CONCEPT VOCABULARY")
    print("=" * 60)

    for concept in vocabulary.concepts:
        meta = vocabulary.get_metadata(concept)
        domains = "/".join(d.value for d in meta.domains)
        default = f" (default: {meta.default})" if meta.default else ""
        print(f"\n{concept.value} [{domains}]{default}")
        print(f"  Aliases: {', '.join(meta.aliases)}")


def main():
    parser = argparse.ArgumentParser(
        description="Form Autofill Pipeline - Bind OCR output onto form templates"
    )
    parser.add_argument(
        'record_path',
        nargs='?',
        help='Path to a JSON OCR record'
    )
    parser.add_argument(
        '-o', '--output',
        help='Path to save JSON output'
    )
    parser.add_argument(
        '-e', '--extended',
        action='store_true',
        help='Include template and audit metadata in output'
    )
    parser.add_argument(
        '--show-vocabulary',
        action='store_true',
        help='Display the canonical concept vocabulary'
    )

    args = parser.parse_args()

    if args.show_vocabulary:
        show_vocabulary()
        return

    if not args.record_path:
        parser.print_help()
        print("\nError: record_path is required")
        sys.exit(1)

    result = process_record(args.record_path, args.output, args.extended)
    if result is None:
        sys.exit(1)


if __name__ == '__main__':
    main()
