"""
Structured logging for the pipeline.

structlog renders events to stderr (console format by default, JSON in
production mode); stdout is left to the CLI result line. Optional rotating
files receive the stdlib records, and per-action timings go to a separate
performance log.
"""

import logging
import logging.handlers
import structlog
import sys
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
from datetime import datetime


DEFAULT_LOG_DIR = Path.home() / ".text-analysis" / "logs"
PIPELINE_LOG_NAME = "pipeline.log"
PERFORMANCE_LOG_NAME = "performance.log"


def _stderr_logger_factory(*args: Any) -> structlog.WriteLogger:
    # sys.stderr is looked up per logger so redirected streams are honoured
    return structlog.WriteLogger(sys.stderr)


def _level_for(debug: bool, production_mode: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.WARNING if production_mode else logging.INFO


def _processor_chain(enable_masking: bool, production_mode: bool) -> List[Any]:
    chain: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if enable_masking:
        chain.append(_mask_sensitive_data)
    chain += [
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.JSONRenderer() if production_mode
        else structlog.dev.ConsoleRenderer(colors=False),
    ]
    return chain


def setup_logging(
    debug: bool = False,
    log_to_file: bool = False,
    log_dir: Optional[Path] = None,
    enable_rotation: bool = True,
    enable_masking: bool = True,
    production_mode: bool = False
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        debug: Emit debug events
        log_to_file: Also write pipeline and performance logs under log_dir
        log_dir: Directory for log files (defaults to ~/.text-analysis/logs)
        enable_rotation: Rotate log files by size
        enable_masking: Redact e-mail addresses, phone numbers and tokens
        production_mode: JSON output, warnings and above unless debugging
    """
    log_level = _level_for(debug, production_mode)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    structlog.configure(
        processors=_processor_chain(enable_masking, production_mode),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

    if log_to_file:
        _setup_file_logging(log_dir or DEFAULT_LOG_DIR, log_level, enable_rotation, production_mode)


def _file_handler(path: Path, rotate: bool, max_bytes: int, backup_count: int) -> logging.Handler:
    if rotate:
        return logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
    return logging.FileHandler(path, encoding='utf-8')


def _setup_file_logging(
    log_dir: Path,
    log_level: int,
    enable_rotation: bool,
    production_mode: bool
) -> None:
    """Attach the pipeline and performance file handlers."""
    log_dir.mkdir(parents=True, exist_ok=True)

    pipeline_handler = _file_handler(
        log_dir / PIPELINE_LOG_NAME, enable_rotation, 10 * 1024 * 1024, 5
    )
    pipeline_handler.setLevel(log_level)
    if production_mode:
        pipeline_format = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        pipeline_format = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    pipeline_handler.setFormatter(logging.Formatter(pipeline_format))
    logging.getLogger().addHandler(pipeline_handler)

    perf_handler = _file_handler(
        log_dir / PERFORMANCE_LOG_NAME, enable_rotation, 20 * 1024 * 1024, 3
    )
    perf_handler.setLevel(logging.INFO)
    perf_handler.setFormatter(logging.Formatter(
        '{"timestamp": "%(asctime)s", "type": "performance", "data": "%(message)s"}'
    ))
    perf_logger = get_performance_logger()
    perf_logger.addHandler(perf_handler)
    perf_logger.setLevel(logging.INFO)


# Analysed documents are user content; these are redacted from log events
_REDACTIONS = [
    (re.compile(r'(api[_-]?key|token)["\s]*[:=]["\s]*[a-zA-Z0-9_.-]{20,}', re.IGNORECASE), r'\1=***'),
    (re.compile(r'([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})'), r'\1***@\2'),
    (re.compile(r'\b\d{3}[-.]?\d{3}[-.]?\d{4}\b'), '***-***-****'),
]


def _redact(value: Any) -> Any:
    if isinstance(value, str):
        for pattern, replacement in _REDACTIONS:
            value = pattern.sub(replacement, value)
        return value
    if isinstance(value, dict):
        return {k: _redact(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _mask_sensitive_data(logger, method_name, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor applying the redactions to every event field."""
    return _redact(event_dict)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


def get_performance_logger() -> logging.Logger:
    return logging.getLogger("performance")


def log_performance_metric(operation: str, duration_ms: float, **metadata):
    """Record one timing on the performance logger."""
    get_performance_logger().info(
        f"Performance metric: {operation}",
        extra={"metric": {
            "operation": operation,
            "duration_ms": duration_ms,
            "timestamp": datetime.now().isoformat(),
            **metadata,
        }}
    )
