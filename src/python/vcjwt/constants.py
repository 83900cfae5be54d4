"""Shared constants for the JWT <-> W3C credential converters."""

import re

# Proof type attached to credentials/presentations decoded from a compact JWT
DEFAULT_JWT_PROOF_TYPE = "JwtProof2020"

# header.payload.signature, signature segment may be empty (unsigned tokens)
JWT_FORMAT = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*$")

# JWT envelope claims
VC_CLAIM = "vc"
VP_CLAIM = "vp"
