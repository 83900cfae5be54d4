"""Convert Verifiable Credentials between JWT claims and the W3C data model.

``normalize_credential`` accepts a compact JWT, a JSON string, a JWT payload
or a W3C credential (or any mix of the two) and returns an unambiguous W3C
credential. ``transform_credential_input`` goes the other way and builds the
JWT claim set (with its ``vc`` envelope) that gets signed.

Application-specific fields pass through both directions untouched.
"""

from typing import Any

from vcjwt._merge import (
    claim_to_field,
    claims_to_date,
    date_to_claim,
    drop_empty_envelope,
    field_to_claim,
    normalize_input,
    party_to_claim,
    run_steps,
    union,
)
from vcjwt.constants import VC_CLAIM
from vcjwt.errors import ShapeError


def normalize_credential(credential: Any) -> dict:
    """Normalize a credential into an unambiguous W3C credential dict.

    In case of conflict, existing W3C properties take precedence over JWT
    claims, except for arrays and objects, which get merged.

    Args:
        credential: A compact JWT, a JSON string, a JWT payload dict, or a
            W3C credential dict (optionally carrying ``proof.jwt``).

    Returns:
        The W3C credential dict, always with a ``proof`` member. Credentials
        decoded from a JWT get a ``JwtProof2020`` proof holding the token.

    Raises:
        UnknownFormatError: If a string is neither a decodable JWT nor JSON.
    """
    return normalize_input(credential, "credential", _reconcile_credential)


def transform_credential_input(credential: dict) -> dict:
    """Transform a W3C credential into a JWT-compatible claim set.

    Existing JWT claims take precedence on collision. ``jti``, ``nbf``,
    ``exp``, ``iss`` and ``sub`` may be set explicitly to None to keep them
    from being derived.

    Args:
        credential: A W3C credential dict or (partial) JWT payload.

    Returns:
        JWT payload dict with a populated ``vc`` envelope.

    Raises:
        ShapeError: If ``credentialSubject`` is a list.
    """
    if isinstance(credential.get("credentialSubject"), list):
        raise ShapeError("credentialSubject of type array not supported")
    return run_steps(credential, _TRANSFORM_STEPS, VC_CLAIM)


# ---------------------------------------------------------------------------
# JWT payload -> W3C credential
# ---------------------------------------------------------------------------


def _reconcile_credential(payload: dict) -> dict:
    result = run_steps(payload, _NORMALIZE_STEPS, VC_CLAIM)
    return drop_empty_envelope(result, VC_CLAIM)


def _merge_subject(source: dict, result: dict, vc: dict) -> None:
    local = source.get("credentialSubject")
    nested = vc.get("credentialSubject")
    # Only a single subject object can be merged
    if local is not None and not isinstance(local, dict):
        return
    if nested is not None and not isinstance(nested, dict):
        return

    subject = {**(local or {}), **(nested or {})}
    vc.pop("credentialSubject", None)

    if source.get("sub") and not subject.get("id"):
        subject["id"] = source["sub"]
        result.pop("sub", None)
    result["credentialSubject"] = subject


def _merge_issuer(source: dict, result: dict, vc: dict) -> None:
    issuer = source.get("issuer")
    if issuer is not None and not isinstance(issuer, dict):
        return

    merged = {"id": source.get("iss"), **(issuer or {})}
    result["issuer"] = {k: v for k, v in merged.items() if v is not None and v != ""}
    if not (issuer or {}).get("id"):
        result.pop("iss", None)


def _merge_id(source: dict, result: dict, vc: dict) -> None:
    claim_to_field(source, result, "jti", "id")


def _merge_type(source: dict, result: dict, vc: dict) -> None:
    result["type"] = union(source.get("type"), vc.pop("type", None))


def _merge_context(source: dict, result: dict, vc: dict) -> None:
    result["@context"] = union(
        source.get("context"), source.get("@context"), vc.pop("@context", None)
    )
    result.pop("context", None)


def _merge_issuance_date(source: dict, result: dict, vc: dict) -> None:
    claims_to_date(source, result, "issuanceDate", "nbf", "iat")


def _merge_expiration_date(source: dict, result: dict, vc: dict) -> None:
    claims_to_date(source, result, "expirationDate", "exp")


_NORMALIZE_STEPS = (
    _merge_subject,
    _merge_issuer,
    _merge_id,
    _merge_type,
    _merge_context,
    _merge_issuance_date,
    _merge_expiration_date,
)


# ---------------------------------------------------------------------------
# W3C credential -> JWT payload
# ---------------------------------------------------------------------------


def _split_subject(source: dict, result: dict, vc: dict) -> None:
    local = source.get("credentialSubject")
    nested = vc.get("credentialSubject")
    if local is not None and not isinstance(local, dict):
        return
    if nested is not None and not isinstance(nested, dict):
        return

    subject = {**(local or {}), **(nested or {})}
    if "sub" not in source:
        subject_id = subject.pop("id", None)
        if subject_id is not None:
            result["sub"] = subject_id
    vc["credentialSubject"] = subject
    result.pop("credentialSubject", None)


def _split_context(source: dict, result: dict, vc: dict) -> None:
    vc["@context"] = union(
        source.get("context"), source.get("@context"), vc.get("@context")
    )
    result.pop("context", None)
    result.pop("@context", None)


def _split_type(source: dict, result: dict, vc: dict) -> None:
    vc["type"] = union(source.get("type"), vc.get("type"))
    result.pop("type", None)


def _split_id(source: dict, result: dict, vc: dict) -> None:
    field_to_claim(source, result, "id", "jti")


def _split_issuance_date(source: dict, result: dict, vc: dict) -> None:
    date_to_claim(source, result, "issuanceDate", "nbf")


def _split_expiration_date(source: dict, result: dict, vc: dict) -> None:
    date_to_claim(source, result, "expirationDate", "exp")


def _split_issuer(source: dict, result: dict, vc: dict) -> None:
    party_to_claim(source, result, "issuer", "iss")


_TRANSFORM_STEPS = (
    _split_subject,
    _split_context,
    _split_type,
    _split_id,
    _split_issuance_date,
    _split_expiration_date,
    _split_issuer,
)
