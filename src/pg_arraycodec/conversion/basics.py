from __future__ import annotations

import math
import operator
import re
import struct
from collections.abc import Callable
from typing import TYPE_CHECKING, override

from pg_arraycodec.conversion.abc import Converter
from pg_arraycodec.conversion.bytea import encode_bytea, parse_bytea
from pg_arraycodec.exc import InvalidValueError, MissingDecoderError
from pg_arraycodec.util import encode_text

if TYPE_CHECKING:
    from pg_arraycodec.conversion.abc import ConversionContext


INT_RE = re.compile(r"[+-]?[0-9]+")
FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
FLOAT32 = struct.Struct("<f")


class SimpleFunctionConverter[ConvType](Converter[ConvType]):
    """
    A simple converter that calls fn_from_pg to convert to a Python type, and fn_to_pg to convert
    from a Python type.

    This is the way to put an arbitrary type into an array. Passing ``None`` for ``fn_from_pg``
    makes an encode-only converter.
    """

    def __init__(
        self,
        oid: int,
        fn_from_pg: Callable[[str], ConvType] | None,
        fn_to_pg: Callable[[ConvType], str],
        *,
        array_delimiter: str = ",",
        array_quoted: bool = True,
    ) -> None:
        """
        :param oid: The OID of the PostgreSQL type.
        :param fn_from_pg: Called with the PostgreSQL text to produce the Python value.
        :param fn_to_pg: Called with the Python value to produce the PostgreSQL text.
        :param array_delimiter: The delimiter the type uses inside arrays.
        :param array_quoted: If the type's text should be quoted inside arrays.
        """
        self.oid = oid
        self.array_delimiter = array_delimiter
        self.array_quoted = array_quoted

        self._from_pg = fn_from_pg
        self._to_pg = fn_to_pg

    @property
    @override
    def supports_decoding(self) -> bool:
        return self._from_pg is not None

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> ConvType:
        if self._from_pg is None:
            raise MissingDecoderError(f"Converter for OID {self.oid} can't decode values")

        return self._from_pg(data)

    @override
    def to_postgres(self, context: ConversionContext, data: ConvType) -> str:
        return self._to_pg(data)


class BoolConverter(Converter[bool]):
    """
    Converter that converts for booleans. Uses the same single-letter form as the server in both
    directions.
    """

    oid = 16
    array_quoted = False

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> bool:
        match data:
            case "t":
                return True

            case "f":
                return False

        raise InvalidValueError(f"invalid boolean {data!r}")

    @override
    def to_postgres(self, context: ConversionContext, data: bool) -> str:
        return "t" if data else "f"


class IntConverter(Converter[int]):
    """
    Converter for the fixed-width integer types.
    """

    array_quoted = False

    def __init__(self, oid: int, bits: int, *, signed: bool = True) -> None:
        self.oid = oid

        if signed:
            self._min, self._max = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
        else:
            self._min, self._max = 0, (1 << bits) - 1

    def _check_range(self, value: int) -> int:
        if not self._min <= value <= self._max:
            raise InvalidValueError(f"value {value} out of range [{self._min}, {self._max}]")

        return value

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> int:
        if not INT_RE.fullmatch(data):
            raise InvalidValueError(f"invalid integer {data!r}")

        return self._check_range(int(data))

    @override
    def to_postgres(self, context: ConversionContext, data: int) -> str:
        if isinstance(data, float):
            if not data.is_integer():
                raise InvalidValueError(f"value {data!r} is not an integer")

            return str(self._check_range(int(data)))

        try:
            value = operator.index(data)
        except TypeError:
            raise InvalidValueError(f"value {data!r} is not an integer") from None

        return str(self._check_range(value))


def _format_special(value: float) -> str | None:
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    return None


def _to_float32(value: float) -> float:
    try:
        single = FLOAT32.unpack(FLOAT32.pack(value))[0]
    except OverflowError:
        raise InvalidValueError(f"value {value!r} out of range for real") from None

    if single == 0.0 and value != 0.0:
        raise InvalidValueError(f"value {value!r} out of range for real")

    return single


def _format_float32(value: float) -> str:
    single = _to_float32(value)
    if (special := _format_special(single)) is not None:
        return special

    # shortest text that reads back as the same single precision value
    for precision in range(1, 10):
        text = f"{single:.{precision}g}"
        if _to_float32(float(text)) == single:
            return text

    return repr(single)


class FloatConverter(Converter[float]):
    """
    Converter for ``real`` and ``double precision``. Values are written using the shortest text
    that reads back to the same value at the type's precision.
    """

    array_quoted = False

    def __init__(self, oid: int, bits: int = 64) -> None:
        if bits not in (32, 64):
            raise ValueError(f"Floats are either 32 or 64 bits wide, not {bits}")

        self.oid = oid
        self._bits = bits

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> float:
        if not FLOAT_RE.fullmatch(data):
            raise InvalidValueError(f"invalid floating point value {data!r}")

        value = float(data)
        if self._bits == 32 and not math.isinf(value):
            return _to_float32(value)

        return value

    @override
    def to_postgres(self, context: ConversionContext, data: float) -> str:
        data = float(data)
        if self._bits == 32:
            return _format_float32(data)

        special = _format_special(data)
        return special if special is not None else repr(data)


class TextConverter(Converter[str]):
    """
    Text converter for default text types.
    """

    def __init__(self, oid: int):
        self.oid = oid

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> str:
        return data

    @override
    def to_postgres(self, context: ConversionContext, data: str) -> str:
        return str(data)


class ByteaConverter(Converter[bytes]):
    """
    Converter that turns bytes objects into bytea objects.
    """

    oid = 17

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> bytes:
        return parse_bytea(encode_text(data, context.client_encoding))

    @override
    def to_postgres(self, context: ConversionContext, data: bytes) -> str:
        # both formats are pure ascii
        return encode_bytea(context.server_version, bytes(data)).decode("ascii")
