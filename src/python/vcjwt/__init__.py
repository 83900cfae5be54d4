"""vcjwt - JWT <-> W3C data model converters for Verifiable Credentials.

This package reconciles the two encodings of credentials and presentations:
- Normalizing a JWT, JWT payload or W3C document into a W3C document
- Transforming a W3C document into the JWT claim set that gets signed

Usage:
    from vcjwt import normalize_credential, transform_credential_input
    from vcjwt import normalize_presentation, transform_presentation_input
"""

from vcjwt.credential import normalize_credential, transform_credential_input
from vcjwt.errors import ConversionError, ShapeError, UnknownFormatError
from vcjwt.presentation import normalize_presentation, transform_presentation_input

__all__ = [
    # Credentials
    "normalize_credential",
    "transform_credential_input",
    # Presentations
    "normalize_presentation",
    "transform_presentation_input",
    # Errors
    "ConversionError",
    "UnknownFormatError",
    "ShapeError",
]
