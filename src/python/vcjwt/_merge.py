"""Shared reconciliation helpers for the credential and presentation converters.

Internal module, used by credential and presentation.
"""

import copy
import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from vcjwt.constants import DEFAULT_JWT_PROOF_TYPE
from vcjwt.dates import iso_to_timestamp, timestamp_to_iso
from vcjwt.errors import UnknownFormatError
from vcjwt.tokens import decode_jwt_payload, is_jwt

logger = logging.getLogger(__name__)

# (snapshot, result, envelope) -> None; reads the snapshot, writes the other two
Step = Callable[[dict, dict, dict], None]


class InputShape(Enum):
    """The input variants accepted by the normalizers."""

    TOKEN = "token"
    JSON_TEXT = "json-text"
    PROOF_BEARING = "proof-bearing"
    PAYLOAD = "payload"


def classify(value: Any, kind: str) -> InputShape:
    """Decide which input variant ``value`` is.

    Raises:
        UnknownFormatError: If ``value`` is neither a string nor a JSON object.
    """
    if isinstance(value, str):
        return InputShape.TOKEN if is_jwt(value) else InputShape.JSON_TEXT
    if isinstance(value, dict):
        if embedded_jwt(value) is not None:
            return InputShape.PROOF_BEARING
        return InputShape.PAYLOAD
    cause = TypeError(f"expected str or dict, got {type(value).__name__}")
    raise UnknownFormatError(f"unknown {kind} format") from cause


def embedded_jwt(value: Any) -> str | None:
    """Return ``value["proof"]["jwt"]`` if it is a non-empty string."""
    if not isinstance(value, dict):
        return None
    proof = value.get("proof")
    if isinstance(proof, dict) and isinstance(proof.get("jwt"), str) and proof["jwt"]:
        return proof["jwt"]
    return None


def normalize_input(
    value: Any, kind: str, reconcile: Callable[[dict], dict]
) -> dict:
    """Dispatch ``value`` on its shape and reconcile it into the W3C form.

    Args:
        value: A compact JWT, a JSON string, or a dict in either encoding.
        kind: "credential" or "presentation", used in error messages.
        reconcile: Maps a JWT payload / W3C dict onto the W3C form.

    Returns:
        The reconciled dict, always carrying a ``proof`` member.

    Raises:
        UnknownFormatError: If the input cannot be decoded or parsed.
    """
    shape = classify(value, kind)
    logger.debug("Normalizing %s from %s input", kind, shape.value)

    if shape is InputShape.TOKEN:
        try:
            payload = decode_jwt_payload(value)
        except UnknownFormatError as e:
            raise UnknownFormatError(f"unknown {kind} format") from e.__cause__
        return {
            **reconcile(payload),
            "proof": {"type": DEFAULT_JWT_PROOF_TYPE, "jwt": value},
        }

    if shape is InputShape.JSON_TEXT:
        return normalize_input(_parse_json_object(value, kind), kind, reconcile)

    if shape is InputShape.PROOF_BEARING:
        normalized = normalize_input(embedded_jwt(value), kind, reconcile)
        # Caller-supplied proof metadata wins over the synthesized proof
        return {**normalized, "proof": copy.deepcopy(value["proof"])}

    return {"proof": {}, **reconcile(value)}


def run_steps(source: dict, steps: tuple[Step, ...], envelope_claim: str) -> dict:
    """Apply reconciliation steps in order to a snapshot of ``source``.

    The ``vc``/``vp`` envelope is handed to each step as a separate working
    copy; it is written back when ``source`` carried an object envelope or a
    step filled it. An envelope emptied by the steps is kept; callers decide
    whether it survives.
    """
    snapshot = copy.deepcopy(source)
    raw_envelope = snapshot.get(envelope_claim)
    envelope = dict(raw_envelope) if isinstance(raw_envelope, dict) else {}
    result = dict(snapshot)

    for step in steps:
        step(snapshot, result, envelope)

    if isinstance(raw_envelope, dict) or envelope:
        result[envelope_claim] = envelope
    return result


def drop_empty_envelope(result: dict, envelope_claim: str) -> dict:
    """Remove the ``vc``/``vp`` envelope if nothing is left in it."""
    if isinstance(result.get(envelope_claim), dict) and not result[envelope_claim]:
        del result[envelope_claim]
    return result


# ---------------------------------------------------------------------------
# Array helpers
# ---------------------------------------------------------------------------


def as_list(value: Any) -> list:
    """Coerce a scalar or list into a list; None becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def concat(*values: Any) -> list:
    """Concatenate scalars/lists in order, dropping None entries."""
    return [item for value in values for item in as_list(value) if item is not None]


def union(*values: Any) -> list:
    """Like :func:`concat`, keeping only the first of equal entries."""
    unique: list = []
    for item in concat(*values):
        if item not in unique:
            unique.append(item)
    return unique


# ---------------------------------------------------------------------------
# Field movers
# ---------------------------------------------------------------------------


def claim_to_field(source: dict, result: dict, claim: str, field: str) -> None:
    """Copy ``claim`` into an unset ``field`` and drop the claim."""
    if not source.get(field) and source.get(claim):
        result[field] = source[claim]
        result.pop(claim, None)


def claims_to_date(source: dict, result: dict, field: str, *claims: str) -> None:
    """Derive an unset date ``field`` from the first set NumericDate claim.

    Only the consumed claim is dropped. Claims that are not numbers leave
    both the claim and the field untouched.
    """
    if source.get(field):
        return
    claim = next((name for name in claims if source.get(name)), None)
    if claim is None:
        return
    formatted = timestamp_to_iso(source[claim])
    if formatted is None:
        logger.debug("Ignoring non-numeric %s claim: %r", claim, source[claim])
        return
    result[field] = formatted
    result.pop(claim, None)


def field_to_claim(source: dict, result: dict, field: str, claim: str) -> None:
    """Move ``field`` into ``claim`` unless the claim is a key of ``source``.

    A claim present with a None value is kept as is, so callers can
    suppress the derived claim.
    """
    if source.get(field) and claim not in source:
        result[claim] = source[field]
        result.pop(field, None)


def date_to_claim(source: dict, result: dict, field: str, claim: str) -> None:
    """Convert an ISO-8601 ``field`` into a NumericDate ``claim``.

    Skipped when ``claim`` is a key of ``source`` or the date does not parse.
    """
    if not source.get(field) or claim in source:
        return
    timestamp = iso_to_timestamp(source[field])
    if timestamp is None:
        logger.debug("Ignoring unparseable %s: %r", field, source[field])
        return
    result[claim] = timestamp
    result.pop(field, None)


def party_to_claim(source: dict, result: dict, field: str, claim: str) -> None:
    """Move an issuer/holder into its JWT claim (``iss``).

    String values move as is. For objects the ``id`` moves and the remaining
    members stay under ``field``; an object left empty is dropped. Skipped when
    ``claim`` is a key of ``source``.
    """
    party = source.get(field)
    if party is None or party == "" or claim in source:
        return
    if isinstance(party, dict):
        remaining = dict(party)
        party_id = remaining.pop("id", None)
        if party_id is not None:
            result[claim] = party_id
        if remaining:
            result[field] = remaining
        else:
            result.pop(field, None)
    elif isinstance(party, str):
        result[claim] = party
        result.pop(field, None)


def _parse_json_object(text: str, kind: str) -> dict:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug("Rejected %s input that is neither JWT nor JSON", kind)
        raise UnknownFormatError(f"unknown {kind} format") from e
    if not isinstance(parsed, dict):
        cause = TypeError(f"expected a JSON object, got {type(parsed).__name__}")
        raise UnknownFormatError(f"unknown {kind} format") from cause
    return parsed
