"""Exceptions raised by the credential/presentation converters."""


class ConversionError(ValueError):
    """Base class for converter errors."""


class UnknownFormatError(ConversionError):
    """Raised when input is neither a JSON document nor a decodable JWT.

    The underlying decode or parse failure is always chained as ``__cause__``.
    """


class ShapeError(ConversionError):
    """Raised when a credential has a shape the JWT encoding cannot carry."""
