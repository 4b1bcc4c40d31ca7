"""
Serializer for the text form of PostgreSQL arrays.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import attr

from pg_arraycodec.conversion.quoting import append_quoted


@attr.s(slots=True, frozen=True)
class ArrayElement:
    """
    A single scalar element, already converted into its text form.
    """

    #: The encoded element, or None for NULL.
    data: bytes | None = attr.ib()

    #: If the element needs to be double-quoted.
    quoted: bool = attr.ib(default=True)

    #: The delimiter to place before the next element.
    delimiter: bytes = attr.ib(default=b",")


type ElementEncoder = Callable[[Any], ArrayElement]


def _is_nested(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _append_element(buf: bytearray, value: Any, encode_one: ElementEncoder) -> bytes:
    if _is_nested(value):
        if value:
            return _append_array(buf, value, encode_one)

        # empty sub-arrays are written as nothing at all
        return b""

    element = encode_one(value)
    if element.data is None:
        buf += b"NULL"
    elif element.quoted:
        append_quoted(buf, element.data)
    else:
        buf += element.data

    return element.delimiter


def _append_array(buf: bytearray, values: Sequence[Any], encode_one: ElementEncoder) -> bytes:
    buf += b"{"

    delimiter = _append_element(buf, values[0], encode_one)
    for value in values[1:]:
        buf += delimiter
        delimiter = _append_element(buf, value, encode_one)

    buf += b"}"
    return delimiter


def format_array(values: Sequence[Any], encode_one: ElementEncoder) -> bytes:
    """
    Formats ``values`` into an array literal.

    Nested lists and tuples become nested arrays. Every other value is handed to ``encode_one``,
    and the delimiter it returns is written before the following value.

    :param values: The values to format.
    :param encode_one: Called to encode every scalar value.
    """
    if not values:
        return b"{}"

    buf = bytearray()
    _append_array(buf, values, encode_one)
    return bytes(buf)
