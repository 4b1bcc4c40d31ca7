"""
Parser for the text form of PostgreSQL arrays.

Only literals emitted by the server are supported. Whitespace around braces and delimiters is
significant, ``NULL`` is case-sensitive, and explicit lower bounds (``[0:1]={1,2}``) are rejected.
"""

from __future__ import annotations

from collections.abc import Sequence

import attr

from pg_arraycodec.conversion.quoting import QUOTE, scan_quoted
from pg_arraycodec.exc import ArrayParseError, DimensionMismatchError, MultidimensionalArrayError
from pg_arraycodec.util import LoggerWithTrace

logger = LoggerWithTrace.get(__name__)

LBRACE = ord("{")
RBRACE = ord("}")
NULL = b"NULL"


@attr.s(slots=True, frozen=True)
class ParsedArray:
    """
    The raw contents of an array literal.
    """

    #: The number of elements at each nesting level, outermost first.
    dims: list[int] = attr.ib()

    #: Every element in order, flattened. ``None`` is a NULL, not an empty string.
    elements: list[bytes | None] = attr.ib()


def format_dims(dims: Sequence[int]) -> str:
    """
    Formats dimensions the way PostgreSQL writes array types, e.g. ``[2][3]``.
    """
    return "".join(f"[{d}]" for d in dims)


def _unexpected(src: bytes, idx: int) -> ArrayParseError:
    return ArrayParseError(
        f"unable to parse array; unexpected {chr(src[idx])!r} at offset {idx}", idx
    )


def _missing_close(idx: int) -> ArrayParseError:
    return ArrayParseError(f"unable to parse array; expected '}}' at offset {idx}", idx)


def _token_end(src: bytes, start: int, delimiter: bytes) -> int:
    end = src.find(delimiter, start)
    if end < 0:
        end = len(src)

    # only look for a closing brace before the delimiter, so every byte is searched once
    brace = src.find(b"}", start, end)
    return brace if brace >= 0 else end


def _parse_empty(src: bytes, idx: int, depth: int) -> ParsedArray:
    while idx < len(src):
        if src[idx] != RBRACE or depth == 0:
            raise _unexpected(src, idx)

        depth -= 1
        idx += 1

    if depth > 0:
        raise _missing_close(idx)

    # an empty array has a single dimension of zero, no matter how many braces it was wrapped in
    return ParsedArray(dims=[0], elements=[])


def parse_array(data: bytes, delimiter: bytes = b",") -> ParsedArray:
    """
    Extracts the dimensions and elements of an array in text format.

    This is a single forward scan. The number of opening braces before the first element fixes
    the number of dimensions; every nested group is counted as it closes, and the final element
    count must be divisible by every dimension.

    :param data: The raw array literal.
    :param delimiter: The delimiter used between elements, as declared by the element type.
    :raises ArrayParseError: If the literal is malformed.
    :raises DimensionMismatchError: If the nested groups don't have matching sizes.
    """
    if not delimiter:
        raise ValueError("The array delimiter can't be empty")

    if not data or data[0] != LBRACE:
        raise ArrayParseError("unable to parse array; expected '{' at offset 0", 0)

    size = len(data)
    depth = 0
    idx = 0

    while idx < size and data[idx] == LBRACE:
        depth += 1
        idx += 1

    if idx < size and data[idx] == RBRACE:
        return _parse_empty(data, idx, depth)

    dims = [0] * depth
    elements: list[bytes | None] = []

    while True:
        ## Element: any further nested groups, then exactly one element.
        while idx < size:
            byte = data[idx]

            if byte == LBRACE:
                if depth == len(dims):
                    break

                depth += 1
                dims[depth - 1] = 0
                idx += 1

            elif byte == QUOTE:
                element, idx = scan_quoted(data, idx + 1)
                if element is not None:
                    elements.append(element)
                break

            else:
                end = _token_end(data, idx, delimiter)
                if end < size:
                    if end == idx:
                        raise _unexpected(data, idx)

                    token = data[idx:end]
                    elements.append(None if token == NULL else token)

                idx = end
                break

        ## Separator: a delimiter goes back to the element scan, braces close groups.
        while idx < size:
            if depth > 0 and data.startswith(delimiter, idx):
                dims[depth - 1] += 1
                idx += len(delimiter)
                break

            if depth > 0 and data[idx] == RBRACE:
                dims[depth - 1] += 1
                depth -= 1
                idx += 1
            else:
                raise _unexpected(data, idx)
        else:
            break

    if depth > 0:
        raise _missing_close(idx)

    for dim in dims:
        if len(elements) % dim != 0:
            raise DimensionMismatchError(
                "multidimensional arrays must have elements with matching dimensions", dims
            )

    logger.trace(f"Parsed array with dimensions {format_dims(dims)}")
    return ParsedArray(dims=dims, elements=elements)


def scan_linear_array(data: bytes, delimiter: bytes, target: str) -> list[bytes | None]:
    """
    Parses a one-dimensional array literal into its raw elements.

    :param target: A description of the destination type, used in error messages.
    :raises MultidimensionalArrayError: If the literal has more than one dimension.
    """
    parsed = parse_array(data, delimiter)
    if len(parsed.dims) > 1:
        raise MultidimensionalArrayError(
            f"cannot convert ARRAY{format_dims(parsed.dims)} to {target}", parsed.dims
        )

    return parsed.elements
