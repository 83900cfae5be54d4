"""Compact JWT detection and unverified claim extraction.

Signatures are never checked here: the converters only need the claims a
token carries. Verifying the token is the caller's job, so the header is
only required to be a JSON object; ``alg`` is neither required nor checked.
"""

import json
import logging

from joserfc.util import to_bytes, urlsafe_b64decode

from vcjwt.constants import JWT_FORMAT
from vcjwt.errors import UnknownFormatError

logger = logging.getLogger(__name__)


def is_jwt(value) -> bool:
    """Return True if ``value`` looks like a compact JWT (three dot-separated segments)."""
    return isinstance(value, str) and JWT_FORMAT.match(value) is not None


def decode_jwt_payload(token: str) -> dict:
    """Return the claims of a compact JWT without verifying its signature.

    Args:
        token: Compact JWS string (header.payload.signature). The signature
            segment may be empty.

    Returns:
        The JSON payload as a dict.

    Raises:
        UnknownFormatError: If the token is malformed or its header or
            payload is not a JSON object.
    """
    if not is_jwt(token):
        cause = ValueError("expected three base64url segments")
        raise UnknownFormatError(f"Malformed JWT: {cause}") from cause

    header_segment, payload_segment, _ = token.split(".")
    _decode_segment(header_segment, "header")
    return _decode_segment(payload_segment, "payload")


def _decode_segment(segment: str, name: str) -> dict:
    try:
        value = json.loads(urlsafe_b64decode(to_bytes(segment)))
    except ValueError as e:
        # binascii.Error, UnicodeDecodeError and JSONDecodeError
        logger.debug("Rejected JWT %s: %s", name, e)
        raise UnknownFormatError(f"Invalid JWT {name}: {e}") from e

    if not isinstance(value, dict):
        cause = TypeError(f"expected a JSON object, got {type(value).__name__}")
        raise UnknownFormatError(f"Invalid JWT {name}: {cause}") from cause
    return value
