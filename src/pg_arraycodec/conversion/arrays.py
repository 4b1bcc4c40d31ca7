"""
Converter type for array objects.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, override

from pg_arraycodec.conversion.abc import ConversionContext, Converter
from pg_arraycodec.conversion.array_format import ArrayElement, format_array
from pg_arraycodec.conversion.array_parse import format_dims, scan_linear_array
from pg_arraycodec.exc import (
    DimensionMismatchError,
    ElementConversionError,
    MissingDecoderError,
)
from pg_arraycodec.util import LoggerWithTrace, decode_text, encode_text

if TYPE_CHECKING:
    from collections.abc import Callable

logger = LoggerWithTrace.get(__name__)


class ArrayConverter[T](Converter[list[T | None]]):
    """
    Converts arrays to Python lists. This requires a subconverter which will be called to convert
    every value in the array.

    Only one-dimensional arrays can be converted from PostgreSQL, but nested lists are written out
    as multi-dimensional arrays. NULL elements are ``None`` in both directions.
    """

    def __init__(
        self,
        oid: int,
        subconverter: Converter[T],
        *,
        quote_inner: bool | None = None,
        length: int | None = None,
        name: str | None = None,
    ) -> None:
        """
        :param oid: The OID of the array type (not the base type!)
        :param subconverter: The converter for individual elements inside the array.
        :param quote_inner: When converting to PostgreSQL, if inner elements should be quoted.
                            Defaults to what the subconverter asks for.
        :param length: If set, arrays coming from PostgreSQL must have exactly this many elements.
        :param name: A human-readable name for the array type, used in error messages.
        """
        self.oid = oid
        self._subconverter = subconverter
        self._quote_inner = quote_inner
        self._length = length
        self._name = name or f"array (OID {oid})"

    def __repr__(self) -> str:
        return f"<ArrayConverter {self._name} of {self._subconverter!r}>"

    @property
    def subconverter(self) -> Converter[T]:
        """
        The converter used for every element.
        """
        return self._subconverter

    @property
    def delimiter(self) -> str:
        """
        The delimiter between elements. This is looked up on the subconverter every time, so that
        converters can change it after construction.
        """
        return getattr(self._subconverter, "array_delimiter", ",")

    @property
    @override
    def supports_decoding(self) -> bool:
        return self._subconverter.supports_decoding

    def _decode_element(
        self,
        decode: Callable[[ConversionContext, str], T],
        context: ConversionContext,
        idx: int,
        raw: bytes | None,
    ) -> T | None:
        if raw is None:
            return None

        try:
            return decode(context, decode_text(raw, context.client_encoding))
        except (ValueError, TypeError) as e:
            raise ElementConversionError(idx, e) from e

    @override
    def from_postgres(self, context: ConversionContext, data: str | bytes) -> list[T | None]:
        if not self._subconverter.supports_decoding:
            raise MissingDecoderError(
                f"Can't convert to {self._name}: {self._subconverter!r} can't decode elements"
            )

        encoding = context.client_encoding
        raw = encode_text(data, encoding) if isinstance(data, str) else data
        delimiter = encode_text(self.delimiter, encoding)

        elements = scan_linear_array(raw, delimiter, self._name)
        if self._length is not None and len(elements) != self._length:
            raise DimensionMismatchError(
                f"cannot convert ARRAY{format_dims([len(elements)])} to "
                f"{self._name} of length {self._length}",
                [len(elements)],
            )

        decode = self._subconverter.from_postgres
        return [
            self._decode_element(decode, context, idx, raw_element)
            for idx, raw_element in enumerate(elements)
        ]

    def _encode_element(self, context: ConversionContext, value: Any) -> ArrayElement:
        encoding = context.client_encoding
        delimiter = encode_text(self.delimiter, encoding)
        if value is None:
            return ArrayElement(None, quoted=False, delimiter=delimiter)

        quoted = self._quote_inner
        if quoted is None:
            quoted = getattr(self._subconverter, "array_quoted", True)

        converted = self._subconverter.to_postgres(context, value)
        return ArrayElement(encode_text(converted, encoding), quoted=quoted, delimiter=delimiter)

    @override
    def to_postgres(self, context: ConversionContext, data: Iterable[T | None]) -> str:
        if isinstance(data, (str, bytes, bytearray, memoryview)):
            raise TypeError(f"Can't convert {type(data).__name__} to {self._name}, use a list")

        values = data if isinstance(data, (list, tuple)) else list(data)
        result = format_array(values, lambda value: self._encode_element(context, value))

        logger.trace(f"Formatted {len(values)} values as {self._name}")
        return decode_text(result, context.client_encoding)
