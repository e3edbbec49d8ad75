"""Validation utilities for URL shortener."""

from urllib.parse import urlparse
from typing import Tuple

from ..shortcode import ShortCodeGenerator

MAX_URL_LENGTH = 2048
MAX_SHORT_CODE_LENGTH = 64


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)
        # Accessing .port raises on a malformed port such as "host:abc"
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    # Only web links are shortened; other schemes are rejected on purpose
    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.hostname:
        return False, "URL must have a valid domain"

    return True, ""


def is_valid_short_code(
    short_code: str,
    min_length: int = 1,
    max_length: int = MAX_SHORT_CODE_LENGTH,
) -> Tuple[bool, str]:
    """Validate a user-supplied short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not ShortCodeGenerator.is_valid_format(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    return True, ""
