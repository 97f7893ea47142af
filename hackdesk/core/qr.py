"""QR payload decoding for scanner stations."""
import json
from typing import Optional

from hackdesk.core.sanitization import MAX_QR_PAYLOAD_LENGTH


def extract_token(payload: str, expected_event: Optional[str] = None) -> str:
    """
    Pull the attendee token out of scanned QR text.

    Acceptance emails encode a small JSON object, {"t": <token>, "e": <event slug>}.
    Older badges carry {"token": ...} or the bare token. Anything that is not
    a JSON object, or an object with neither key, is taken as the token itself.

    Args:
        payload: Raw text decoded from the QR code
        expected_event: Event slug this deployment serves, if any

    Returns:
        The token string (not yet format-validated)

    Raises:
        ValueError: If the payload is empty, too long, or was issued for
            a different event
    """
    if not isinstance(payload, str):
        raise ValueError("QR payload must be a string")

    text = payload.strip()
    if not text:
        raise ValueError("QR payload is empty")

    if len(text) > MAX_QR_PAYLOAD_LENGTH:
        raise ValueError(f"QR payload exceeds maximum length of {MAX_QR_PAYLOAD_LENGTH} characters")

    try:
        decoded = json.loads(text)
    except ValueError:
        return text

    if not isinstance(decoded, dict):
        return text

    event = decoded.get("e")
    if expected_event and event and event != expected_event:
        raise ValueError("QR code was issued for a different event")

    for key in ("t", "token"):
        token = decoded.get(key)
        if isinstance(token, str) and token.strip():
            return token.strip()

    return text
