"""Utils module."""
from .common import format_hs_code, validate_hs_code_format, compact_json, truncate_text, emit_status
from .logging_utils import setup_logger, log_classification_attempt, log_connector_outcome
from .http import FetchResponse, timed_fetch
from .formatters import format_report

__all__ = [
    'format_hs_code',
    'validate_hs_code_format',
    'compact_json',
    'truncate_text',
    'emit_status',
    'setup_logger',
    'log_classification_attempt',
    'log_connector_outcome',
    'FetchResponse',
    'timed_fetch',
    'format_report'
]
