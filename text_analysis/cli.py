"""
Command-line entry point.

Usage:
    text-analysis --input '{"action": "Analyze", "text": "..."}'

Prints exactly one JSON line on stdout. Logs go to stderr.
"""

from pathlib import Path
from typing import List, Optional
import argparse
import sys

from pydantic import ValidationError

from .models import TextAnalysisOutput, parse_action
from .pipeline import TextAnalysisPipeline
from .storage import create_store
from .settings import settings
from .error_handler import BaseApplicationError, InputParseError, ErrorContext, error_handler, handle_error
from .logging_conf import setup_logging, get_logger

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="text-analysis",
        description="Structural text analysis pipeline (one JSON action per run)",
    )
    parser.add_argument(
        "--input",
        help="JSON action descriptor, e.g. '{\"action\": \"CalculateStats\", \"text\": \"...\"}'",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML configuration file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one pipeline action.

    Returns:
        0 on success (including a "Document not found" result), 1 on input
        errors or application failures
    """
    args = build_parser().parse_args(argv)

    config = settings.reload(args.config) if args.config else settings.global_config
    setup_logging(
        debug=args.debug or config.log_debug,
        log_to_file=config.log_to_file,
        log_dir=config.log_dir,
        enable_masking=config.log_masking,
        production_mode=config.log_production,
    )
    logger = get_logger(__name__)
    error_handler.clear_stats()

    if not args.input:
        print("Error: --input is required", file=sys.stderr)
        return EXIT_FAILURE

    try:
        action = parse_action(args.input)
    except ValidationError as e:
        error = handle_error(InputParseError(str(e), cause=e))
        print(f"Error: {error.message}", file=sys.stderr)
        return EXIT_FAILURE

    logger.debug("Input parsed", action=action.action, storage_path=str(config.storage_path))

    pipeline = TextAnalysisPipeline(create_store(config), config)

    try:
        output = pipeline.execute(action)
    except BaseApplicationError as e:
        print(TextAnalysisOutput(success=False, error=e.user_message).to_json())
        return EXIT_FAILURE
    except OSError as e:
        error = handle_error(e, ErrorContext(action=action.action))
        print(TextAnalysisOutput(success=False, error=error.user_message).to_json())
        return EXIT_FAILURE
    finally:
        stats = error_handler.get_error_stats()
        if stats["recent_error_count"]:
            logger.debug(
                "Errors reported during run",
                error_counts=stats["error_counts"],
                recent_errors=stats["recent_errors"]
            )

    print(output.to_json())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
