"""Convert Verifiable Presentations between JWT claims and the W3C data model.

Mirrors :mod:`vcjwt.credential` for the ``vp`` envelope. Embedded
credentials are normalized one by one with ``normalize_credential``; on the
way back they are reduced to their JWT when they carry one.
"""

from typing import Any

from vcjwt._merge import (
    claim_to_field,
    claims_to_date,
    concat,
    date_to_claim,
    drop_empty_envelope,
    embedded_jwt,
    field_to_claim,
    normalize_input,
    party_to_claim,
    run_steps,
    union,
)
from vcjwt.constants import VP_CLAIM
from vcjwt.credential import normalize_credential


def normalize_presentation(presentation: Any) -> dict:
    """Normalize a presentation into an unambiguous W3C presentation dict.

    Args:
        presentation: A compact JWT, a JSON string, a JWT payload dict, or a
            W3C presentation dict (optionally carrying ``proof.jwt``).

    Returns:
        The W3C presentation dict with a ``proof`` member and every entry of
        ``verifiableCredential`` normalized.

    Raises:
        UnknownFormatError: If the presentation, or one of its credentials,
            is neither a decodable JWT nor JSON.
    """
    return normalize_input(presentation, "presentation", _reconcile_presentation)


def transform_presentation_input(presentation: dict) -> dict:
    """Transform a W3C presentation into a JWT-compatible claim set.

    Like ``transform_credential_input``, a claim that is already a key of
    the input (even set to None) is never derived or overwritten.

    Args:
        presentation: A W3C presentation dict or (partial) JWT payload.

    Returns:
        JWT payload dict with a populated ``vp`` envelope.
    """
    return run_steps(presentation, _TRANSFORM_STEPS, VP_CLAIM)


# ---------------------------------------------------------------------------
# JWT payload -> W3C presentation
# ---------------------------------------------------------------------------


def _reconcile_presentation(payload: dict) -> dict:
    result = run_steps(payload, _NORMALIZE_STEPS, VP_CLAIM)
    return drop_empty_envelope(result, VP_CLAIM)


def _merge_credentials(source: dict, result: dict, vp: dict) -> None:
    # Credentials have no defined equality, so they are not deduplicated
    credentials = concat(
        source.get("verifiableCredential"), vp.pop("verifiableCredential", None)
    )
    result["verifiableCredential"] = [normalize_credential(c) for c in credentials]


def _merge_holder(source: dict, result: dict, vp: dict) -> None:
    claim_to_field(source, result, "iss", "holder")


def _merge_verifier(source: dict, result: dict, vp: dict) -> None:
    if source.get("aud"):
        result["verifier"] = concat(source.get("verifier"), source["aud"])
        result.pop("aud", None)


def _merge_id(source: dict, result: dict, vp: dict) -> None:
    claim_to_field(source, result, "jti", "id")


def _merge_type(source: dict, result: dict, vp: dict) -> None:
    result["type"] = union(source.get("type"), vp.pop("type", None))


def _merge_context(source: dict, result: dict, vp: dict) -> None:
    result["@context"] = union(
        source.get("context"), source.get("@context"), vp.pop("@context", None)
    )
    result.pop("context", None)


def _merge_issuance_date(source: dict, result: dict, vp: dict) -> None:
    claims_to_date(source, result, "issuanceDate", "nbf", "iat")


def _merge_expiration_date(source: dict, result: dict, vp: dict) -> None:
    claims_to_date(source, result, "expirationDate", "exp")


_NORMALIZE_STEPS = (
    _merge_credentials,
    _merge_holder,
    _merge_verifier,
    _merge_id,
    _merge_type,
    _merge_context,
    _merge_issuance_date,
    _merge_expiration_date,
)


# ---------------------------------------------------------------------------
# W3C presentation -> JWT payload
# ---------------------------------------------------------------------------


def _split_context(source: dict, result: dict, vp: dict) -> None:
    vp["@context"] = union(
        source.get("context"), source.get("@context"), vp.get("@context")
    )
    result.pop("context", None)
    result.pop("@context", None)


def _split_type(source: dict, result: dict, vp: dict) -> None:
    vp["type"] = union(source.get("type"), vp.get("type"))
    result.pop("type", None)


def _split_credentials(source: dict, result: dict, vp: dict) -> None:
    credentials = concat(
        source.get("verifiableCredential"), vp.get("verifiableCredential")
    )
    vp["verifiableCredential"] = [embedded_jwt(c) or c for c in credentials]
    result.pop("verifiableCredential", None)


def _split_id(source: dict, result: dict, vp: dict) -> None:
    field_to_claim(source, result, "id", "jti")


def _split_issuance_date(source: dict, result: dict, vp: dict) -> None:
    date_to_claim(source, result, "issuanceDate", "nbf")


def _split_expiration_date(source: dict, result: dict, vp: dict) -> None:
    date_to_claim(source, result, "expirationDate", "exp")


def _split_holder(source: dict, result: dict, vp: dict) -> None:
    party_to_claim(source, result, "holder", "iss")


def _split_verifier(source: dict, result: dict, vp: dict) -> None:
    # An explicit aud=None suppresses the claim
    if source.get("verifier") is None or ("aud" in source and source["aud"] is None):
        return
    result["aud"] = concat(source["verifier"], source.get("aud"))
    result.pop("verifier", None)


_TRANSFORM_STEPS = (
    _split_context,
    _split_type,
    _split_credentials,
    _split_id,
    _split_issuance_date,
    _split_expiration_date,
    _split_holder,
    _split_verifier,
)
