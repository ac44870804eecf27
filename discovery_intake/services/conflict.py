# discovery_intake/services/conflict.py
import re
from typing import Any, Optional

# HubSpot: "Contact already exists. Existing ID: 12345"
EXISTING_ID_RE = re.compile(r"Existing ID: (\d+)")


def parse_existing_contact_id(error_body: Any) -> Optional[str]:
    """
    Haal het bestaande contact-id uit een 409 response body.

    Accepts the decoded JSON body (dict with a ``message`` key) or a raw string.
    Returns None when the vendor message does not carry an id; never raises.
    """
    if isinstance(error_body, dict):
        message = error_body.get("message")
    else:
        message = error_body
    if not isinstance(message, str):
        return None
    match = EXISTING_ID_RE.search(message)
    return match.group(1) if match else None
