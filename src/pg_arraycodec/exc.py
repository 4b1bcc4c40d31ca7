from __future__ import annotations

from collections.abc import Sequence


class ConversionError(ValueError):
    """
    Base exception class all other exceptions are derived from.
    """


class ArrayParseError(ConversionError):
    """
    Raised when an array literal is malformed.
    """

    def __init__(self, message: str, offset: int):
        super().__init__(message)

        #: The byte offset into the literal where parsing failed.
        self.offset = offset


class DimensionMismatchError(ConversionError):
    """
    Raised when the dimensions of an array literal don't line up, either because the literal is
    ragged or because it doesn't fit a fixed-length destination.
    """

    def __init__(self, message: str, dims: Sequence[int]):
        super().__init__(message)

        #: The dimensions that were parsed out of the literal.
        self.dims = list(dims)


class MultidimensionalArrayError(ConversionError, NotImplementedError):
    """
    Raised when a multi-dimensional array literal is converted into a flat list. The literal
    itself parsed fine; :attr:`dims` holds its shape.
    """

    def __init__(self, message: str, dims: Sequence[int]):
        super().__init__(message)
        self.dims = list(dims)


class ElementConversionError(ConversionError):
    """
    Raised when a single element of an array couldn't be converted.
    """

    def __init__(self, index: int, cause: Exception):
        self.index = index
        self.cause = cause

    def __str__(self):
        return f"parsing array element index {self.index}: {self.cause}"

    __repr__ = __str__


class InvalidByteaError(ConversionError):
    """
    Raised when bytea data isn't valid hex or escape format.
    """


class InvalidValueError(ConversionError):
    """
    Raised when a scalar value isn't a valid text representation for its type.
    """


class MissingDecoderError(ConversionError):
    """
    Raised when decoding is attempted with a converter that can only encode.
    """
