import html
import re
from typing import Optional

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def clean_text(value: Optional[str], max_length: int = 500) -> Optional[str]:
    """
    Strip surrounding whitespace and control characters from free text
    coming from webhooks or CSV files. Empty results become None.

    Raises:
        ValueError: If the cleaned text exceeds max_length
    """
    if value is None:
        return None

    value = CONTROL_CHARS.sub("", str(value)).strip()
    if not value:
        return None

    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    return value
