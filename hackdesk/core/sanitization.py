"""Input sanitization utilities."""
import re
from typing import Iterable, Optional


# Maximum length constraints for security
MAX_TOKEN_LENGTH = 64          # Issued tokens are 16 hex chars; leave room for older formats
MAX_QR_PAYLOAD_LENGTH = 512    # A small JSON object: {"t": ..., "e": ...}
MAX_SEARCH_LENGTH = 100


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input to prevent XSS attacks.

    Note: This function strips HTML tags and normalizes whitespace, but does NOT
    escape HTML entities because the dashboard escapes output when rendering.
    Double-escaping would cause entities to display literally (e.g., "&lt;" instead of "<").

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    # Strip leading/trailing whitespace
    sanitized = text.strip()

    # Enforce maximum length before processing to prevent length-based attacks
    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    # Strip HTML tags completely if requested (prevents injection entirely)
    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    # This catches malformed tags or encoded attacks
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    # Normalize internal whitespace (replace multiple spaces with single space)
    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def validate_token_format(token: str) -> str:
    """
    Validate attendee token format before processing.

    Tokens are URL-safe strings (hex today). This prevents malformed tokens
    from causing unnecessary database queries.

    Args:
        token: The token to validate

    Returns:
        The validated token, stripped of surrounding whitespace

    Raises:
        ValueError: If token format is invalid
    """
    if not isinstance(token, str):
        raise ValueError("Token must be a string")

    token = token.strip()

    if not token:
        raise ValueError("Token cannot be empty")

    if len(token) > MAX_TOKEN_LENGTH:
        raise ValueError(f"Token exceeds maximum length of {MAX_TOKEN_LENGTH} characters")

    # URL-safe base64 alphabet covers hex tokens as well
    if not re.match(r'^[A-Za-z0-9_-]+$', token):
        raise ValueError("Token format is invalid")

    return token


def validate_meal_tag(meal_tag: str, allowed: Iterable[str]) -> str:
    """
    Validate a meal tag against the configured meal set.

    Matching ignores case and surrounding whitespace; the tag is returned
    spelled the way it is configured.

    Raises:
        ValueError: If the tag is not one of the allowed meals
    """
    if not isinstance(meal_tag, str):
        raise ValueError("Meal tag must be a string")

    allowed = tuple(allowed)
    configured = {tag.strip().lower(): tag for tag in allowed}
    key = meal_tag.strip().lower()
    if key not in configured:
        raise ValueError(f"Unknown meal tag '{meal_tag.strip()}'. Expected one of: {', '.join(allowed)}")

    return configured[key]


def sanitize_search_query(query: Optional[str]) -> str:
    """
    Sanitize a dashboard search string for use in a LIKE pattern.

    Returns the query with LIKE wildcards escaped (backslash is the escape
    character), or an empty string when there is nothing to search for.
    """
    if query is None:
        return ""

    sanitized = sanitize_text(query, max_length=MAX_SEARCH_LENGTH)

    return (
        sanitized.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
