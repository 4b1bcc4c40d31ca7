"""
Package containing the converters for Python types to PostgreSQL types.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence

from pg_arraycodec.conversion.abc import ConversionContext, Converter, InfinityTimestamps
from pg_arraycodec.conversion.arrays import ArrayConverter
from pg_arraycodec.conversion.basics import (
    BoolConverter,
    ByteaConverter,
    FloatConverter,
    IntConverter,
    SimpleFunctionConverter,
    TextConverter,
)
from pg_arraycodec.conversion.dt import (
    STATIC_DATE_CONVERTER,
    STATIC_DATEA_CONVERTER,
    STATIC_TIME_CONVERTER,
    STATIC_TIMEA_CONVERTER,
    STATIC_TIMESTAMPNOTZ_CONVERTER,
    STATIC_TIMESTAMPNOTZA_CONVERTER,
    STATIC_TIMESTAMPTZ_CONVERTER,
    STATIC_TIMESTAMPTZA_CONVERTER,
    format_timestamp,
)


def _make_array_converters(
    oids: Sequence[int],
    cvs: Sequence[Converter],
    names: Sequence[str],
) -> list[ArrayConverter]:
    return [
        ArrayConverter(oid, cv, name=name)
        for (oid, cv, name) in zip(oids, cvs, names, strict=True)
    ]


# int2, int4, int8, oid
INT_CONVERTERS = [
    IntConverter(21, 16),
    IntConverter(23, 32),
    IntConverter(20, 64),
    IntConverter(26, 32, signed=False),
]
INTA_CONVERTERS = _make_array_converters(
    (1005, 1007, 1016, 1028), INT_CONVERTERS, ("int2[]", "int4[]", "int8[]", "oid[]")
)

# char, name, text, bpchar, varchar
KNOWN_TEXT_OIDS = (18, 19, 25, 1042, 1043)
STR_CONVERTERS = [TextConverter(oid) for oid in KNOWN_TEXT_OIDS]
STRA_CONVERTERS = _make_array_converters(
    (1002, 1003, 1009, 1014, 1015),
    STR_CONVERTERS,
    ("char[]", "name[]", "text[]", "bpchar[]", "varchar[]"),
)

# float4, float8
FLOAT_CONVERTERS = [FloatConverter(700, 32), FloatConverter(701, 64)]
FLOATA_CONVERTERS = _make_array_converters(
    (1021, 1022), FLOAT_CONVERTERS, ("float4[]", "float8[]")
)

STATIC_BOOLEAN_CONVERTER = BoolConverter()
STATIC_BOOLEANA_CONVERTER = ArrayConverter(1000, STATIC_BOOLEAN_CONVERTER, name="bool[]")
STATIC_BYTES_CONVERTER = ByteaConverter()
STATIC_BYTESA_CONVERTER = ArrayConverter(1001, STATIC_BYTES_CONVERTER, name="bytea[]")

STATIC_INT8A_CONVERTER = INTA_CONVERTERS[2]
STATIC_TEXTA_CONVERTER = STRA_CONVERTERS[2]
STATIC_FLOAT8A_CONVERTER = FLOATA_CONVERTERS[1]

#: The canonical array converter for each plain Python element type.
ARRAY_CONVERTERS_BY_TYPE: dict[type, ArrayConverter] = {
    bool: STATIC_BOOLEANA_CONVERTER,
    bytes: STATIC_BYTESA_CONVERTER,
    float: STATIC_FLOAT8A_CONVERTER,
    int: STATIC_INT8A_CONVERTER,
    str: STATIC_TEXTA_CONVERTER,
}


def array_converter_for(element_type: type) -> ArrayConverter:
    """
    Gets the built-in array converter for lists of ``element_type``. Other element types need an
    :class:`.ArrayConverter` built around their own converter.
    """
    try:
        return ARRAY_CONVERTERS_BY_TYPE[element_type]
    except KeyError:
        raise ValueError(
            f"No built-in array converter for {element_type!r}, use an ArrayConverter"
        ) from None


def default_converters() -> dict[int, Converter]:
    """
    Gets a new mapping of OID to converter for every built-in converter.
    """

    # fmt: off
    return {
        cv.oid: cv for cv in itertools.chain(
            INT_CONVERTERS, INTA_CONVERTERS,
            STR_CONVERTERS, STRA_CONVERTERS,
            FLOAT_CONVERTERS, FLOATA_CONVERTERS,
            (
                STATIC_BOOLEAN_CONVERTER, STATIC_BOOLEANA_CONVERTER,
                STATIC_BYTES_CONVERTER, STATIC_BYTESA_CONVERTER,
                STATIC_TIMESTAMPTZ_CONVERTER, STATIC_TIMESTAMPTZA_CONVERTER,
                STATIC_TIMESTAMPNOTZ_CONVERTER, STATIC_TIMESTAMPNOTZA_CONVERTER,
                STATIC_DATE_CONVERTER, STATIC_DATEA_CONVERTER,
                STATIC_TIME_CONVERTER, STATIC_TIMEA_CONVERTER,
            ),
        )
    }
    # fmt: on


__all__ = (
    "ArrayConverter",
    "ConversionContext",
    "Converter",
    "InfinityTimestamps",
    "SimpleFunctionConverter",
    "array_converter_for",
    "default_converters",
    "format_timestamp",
)
