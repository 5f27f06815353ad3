"""
Common utility functions used across the HS Code classification assistant.
"""
import json
from typing import Any, Callable, Optional
from loguru import logger

def format_hs_code(code: str) -> str:
    """Format HS code with proper structure (XXXX.XX.XX.XX)."""
    digits = ''.join(filter(str.isdigit, str(code)))[:12]
    sections = [digits[i:j] for i, j in [(0, 4), (4, 6), (6, 8), (8, 10), (10, 12)] if i < len(digits)]
    return '.'.join(sections)

def validate_hs_code_format(hs_code: str) -> bool:
    """Validate HS code format (6 to 12 digits)."""
    if not hs_code:
        return False
    clean_code = hs_code.replace('.', '').replace(' ', '')
    return clean_code.isdigit() and 6 <= len(clean_code) <= 12

def compact_json(data: Any) -> str:
    """Serialize data compactly for embedding in prompt evidence."""
    return json.dumps(data, ensure_ascii=False, separators=(',', ':'), default=str)

def truncate_text(text: str, max_length: int = 500) -> str:
    """Truncate text for logs and error previews."""
    if text is None:
        return ""
    return text if len(text) <= max_length else text[:max_length] + "..."

def emit_status(callback: Optional[Callable[[str], None]], message: str) -> None:
    """Send a progress label to a caller's status sink without letting it break the pipeline."""
    logger.debug(f"Status: {message}")
    if callback is None:
        return
    try:
        callback(message)
    except Exception as e:
        logger.warning(f"Status callback raised and was ignored: {str(e)}")
