"""CLI subcommand handlers."""

from __future__ import annotations

import argparse
import logging
import sys

from pipectx.config import config_fingerprint, load_config
from pipectx.exceptions import (
    ConfigError,
    DeserializationError,
    DocumentParseError,
    EvaluatorConfigurationError,
    PipectxError,
)
from pipectx.exceptions.validation import format_errors
from pipectx.expressions import ExpressionProcessor
from pipectx.io import load_document, render_json
from pipectx.model import EvaluationSummary
from pipectx.validation import preflight_validate

logger = logging.getLogger(__name__)


def handle_evaluate(args: argparse.Namespace) -> int:
    """Evaluate a source document against a context document and print the result."""
    validation_errors = preflight_validate(root=args.root, config_path=args.config)
    if validation_errors:
        print(format_errors(validation_errors), file=sys.stderr)
        return 2

    try:
        config = load_config(args.root, args.config)
        logger.debug("Resolved config fingerprint %s", config_fingerprint(config))
        source = load_document(args.source)
        context = load_document(args.context) if args.context is not None else {}
        processor = ExpressionProcessor(config)
        allow_unknown_keys = config.allow_unknown_keys if args.allow_unknown_keys is None else args.allow_unknown_keys
        summary = EvaluationSummary()
        result = processor.process(source, context, allow_unknown_keys, summary, log_summary=args.verbose)
    except (ConfigError, DocumentParseError, DeserializationError, EvaluatorConfigurationError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except PipectxError as exc:
        print(f"Evaluation error: {exc}", file=sys.stderr)
        return 1

    print(render_json(result))
    return evaluate_fail_threshold(summary, fail_on_errors=args.fail_on_errors)


def evaluate_fail_threshold(summary: EvaluationSummary, *, fail_on_errors: bool) -> int:
    """Return 1 when failures should fail the run, 0 otherwise."""
    if fail_on_errors and summary.has_failures:
        logger.warning("%d expression(s) failed to evaluate", summary.failure_count)
        return 1
    return 0


def handle_validate_config(args: argparse.Namespace) -> int:
    """Run config validation and report results."""
    errors = preflight_validate(root=args.root, config_path=args.config)
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2

    print("Configuration is valid.")
    return 0
