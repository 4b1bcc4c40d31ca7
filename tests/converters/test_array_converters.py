import math

import attr
import pytest

from pg_arraycodec import (
    ArrayConverter,
    DimensionMismatchError,
    ElementConversionError,
    InvalidValueError,
    MissingDecoderError,
    MultidimensionalArrayError,
    SimpleFunctionConverter,
    array_converter_for,
    default_converters,
)
from pg_arraycodec.conversion import (
    FLOATA_CONVERTERS,
    INTA_CONVERTERS,
    STATIC_BOOLEANA_CONVERTER,
    STATIC_BYTESA_CONVERTER,
    STATIC_TEXTA_CONVERTER,
)
from pg_arraycodec.conversion.basics import IntConverter
from tests.util import LEGACY_SERVER_VERSION, make_context

INT2A, INT4A, INT8A, OIDA = INTA_CONVERTERS
FLOAT4A, FLOAT8A = FLOATA_CONVERTERS


@attr.s(frozen=True, slots=True)
class Box:
    x1: float = attr.ib()
    y1: float = attr.ib()
    x2: float = attr.ib()
    y2: float = attr.ib()


def parse_box(data: str) -> Box:
    return Box(*(float(i) for i in data.replace("(", "").replace(")", "").split(",")))


def format_box(box: Box) -> str:
    return f"({box.x1},{box.y1}),({box.x2},{box.y2})"


def _roundtrip(converter: ArrayConverter, values: list, **context_args) -> list:
    context = make_context(**context_args)
    return converter.from_postgres(context, converter.to_postgres(context, values))


def test_basic_arrays():
    """
    Tests basic array functionality.
    """
    context = make_context()
    assert INT8A.to_postgres(context, [1, 2, 3]) == "{1,2,3}"
    assert INT8A.from_postgres(context, "{1,2,3}") == [1, 2, 3]


def test_empty_arrays():
    """
    Tests that every built-in array type writes empty arrays the same way.
    """
    context = make_context()
    for converter in default_converters().values():
        if isinstance(converter, ArrayConverter):
            assert converter.to_postgres(context, []) == "{}"
            assert converter.from_postgres(context, "{}") == []


def test_string_array():
    """
    Tests string arrays with commas, quotes and backslashes.
    """
    context = make_context()
    values = ["one, two", "three,", 'a"b\\c', "NULL", ""]

    assert STATIC_TEXTA_CONVERTER.to_postgres(context, ['a"b\\c']) == '{"a\\"b\\\\c"}'
    assert _roundtrip(STATIC_TEXTA_CONVERTER, values) == values


def test_string_array_null():
    """
    Tests that NULL and the text "NULL" stay apart.
    """
    context = make_context()
    result = STATIC_TEXTA_CONVERTER.from_postgres(context, '{NULL,"NULL"}')
    assert result == [None, "NULL"]

    assert STATIC_TEXTA_CONVERTER.to_postgres(context, [None, "NULL"]) == '{NULL,"NULL"}'


def test_bool_array():
    """
    Tests that boolean arrays use the single letter form.
    """
    context = make_context()
    assert STATIC_BOOLEANA_CONVERTER.to_postgres(context, [True, False]) == "{t,f}"
    assert STATIC_BOOLEANA_CONVERTER.from_postgres(context, "{t,f}") == [True, False]
    assert _roundtrip(STATIC_BOOLEANA_CONVERTER, [True, None, False]) == [True, None, False]


def test_bool_array_invalid():
    """
    Tests that invalid booleans report their index.
    """
    with pytest.raises(ElementConversionError) as e:
        STATIC_BOOLEANA_CONVERTER.from_postgres(make_context(), "{t,f,true}")

    assert e.value.index == 2
    assert "index 2" in str(e.value)


def test_int_arrays():
    """
    Tests the integer array family, including range checks.
    """
    assert _roundtrip(INT8A, [-(2**63), 0, 2**63 - 1]) == [-(2**63), 0, 2**63 - 1]
    assert _roundtrip(INT4A, [-(2**31), None, 2**31 - 1]) == [-(2**31), None, 2**31 - 1]

    context = make_context()
    with pytest.raises(ElementConversionError) as e:
        INT4A.from_postgres(context, "{1,2147483648}")
    assert e.value.index == 1

    with pytest.raises(ElementConversionError):
        INT2A.from_postgres(context, "{1, 2}")

    with pytest.raises(ValueError):
        INT2A.to_postgres(context, [40000])

    with pytest.raises(ElementConversionError):
        OIDA.from_postgres(context, "{-1}")


def test_float_arrays():
    """
    Tests the floating point array family.
    """
    context = make_context()
    values = [0.1, -2.5, 1e300, 5e-324, float("inf"), float("-inf")]
    assert _roundtrip(FLOAT8A, values) == values

    assert FLOAT8A.to_postgres(context, [0.1, 1.0]) == "{0.1,1.0}"
    assert FLOAT4A.to_postgres(context, [0.1, 16777216.0]) == "{0.1,16777216}"
    assert FLOAT4A.from_postgres(context, "{0.1}") != [0.1]
    assert _roundtrip(FLOAT4A, [0.1, 3.25]) == FLOAT4A.from_postgres(context, "{0.1,3.25}")

    [nan] = FLOAT8A.from_postgres(context, FLOAT8A.to_postgres(context, [math.nan]))
    assert math.isnan(nan)

    with pytest.raises(ElementConversionError):
        FLOAT8A.from_postgres(context, "{1_0}")

    with pytest.raises(ElementConversionError):
        FLOAT4A.from_postgres(context, "{1e39}")


def test_bytea_array():
    """
    Tests bytea arrays in both hex and escape format.
    """
    context = make_context()
    values = [b"\x00\x01", b"", b'"\\', None]
    assert STATIC_BYTESA_CONVERTER.to_postgres(context, [b"\x00\x01"]) == '{"\\\\x0001"}'
    assert _roundtrip(STATIC_BYTESA_CONVERTER, values) == values

    legacy = _roundtrip(STATIC_BYTESA_CONVERTER, values, server_version=LEGACY_SERVER_VERSION)
    assert legacy == values

    # escape format as sent by the server
    result = STATIC_BYTESA_CONVERTER.from_postgres(context, '{"\\\\000a\\\\\\\\"}')
    assert result == [b"\x00a\\"]


def test_multidimensional_arrays():
    """
    Tests that multi-dimensional arrays can be written, but not read.
    """
    context = make_context()
    assert INT8A.to_postgres(context, [[1, 2], [3, 4]]) == "{{1,2},{3,4}}"

    with pytest.raises(MultidimensionalArrayError) as e:
        INT8A.from_postgres(context, "{{1,2},{3,4}}")
    assert e.value.dims == [2, 2]

    with pytest.raises(DimensionMismatchError):
        INT8A.from_postgres(context, "{{1,2},{3}}")


def test_fixed_length_array():
    """
    Tests arrays that must have an exact number of elements.
    """
    converter = ArrayConverter(1007, IntConverter(23, 32), length=2)
    context = make_context()

    assert converter.from_postgres(context, "{1,2}") == [1, 2]
    with pytest.raises(DimensionMismatchError):
        converter.from_postgres(context, "{1,2,3}")


def test_custom_delimiter():
    """
    Tests an element type with its own delimiter.
    """
    box = SimpleFunctionConverter(603, parse_box, format_box, array_delimiter=";")
    converter = ArrayConverter(1020, box)
    context = make_context()

    literal = converter.to_postgres(context, [Box(1, 1, 0, 0), Box(2, 2, 1, 1)])
    assert literal == '{"(1,1),(0,0)";"(2,2),(1,1)"}'
    assert converter.from_postgres(context, "{(1,1),(0,0);(2,2),(1,1)}") == [
        Box(1.0, 1.0, 0.0, 0.0),
        Box(2.0, 2.0, 1.0, 1.0),
    ]

    # the delimiter is looked up when used, not when the array converter is made
    box.array_delimiter = ","
    assert converter.to_postgres(context, [Box(1, 1, 0, 0), None]) == '{"(1,1),(0,0)",NULL}'


def test_quote_inner_override():
    """
    Tests overriding quoting of inner elements.
    """
    converter = ArrayConverter(1009, SimpleFunctionConverter(25, str, str), quote_inner=False)
    assert converter.to_postgres(make_context(), ["a", "b"]) == "{a,b}"


def test_encode_only_converter():
    """
    Tests that an element converter without a decoder can write arrays but not read them.
    """
    converter = ArrayConverter(1009, SimpleFunctionConverter(25, None, str))
    context = make_context()

    assert not converter.supports_decoding
    assert converter.to_postgres(context, ["x"]) == '{"x"}'

    with pytest.raises(MissingDecoderError):
        converter.from_postgres(context, '{"x"}')


def test_array_converter_for():
    """
    Tests looking up array converters by Python type.
    """
    assert array_converter_for(bool) is STATIC_BOOLEANA_CONVERTER
    assert array_converter_for(bytes) is STATIC_BYTESA_CONVERTER
    assert array_converter_for(int).oid == 1016
    assert array_converter_for(float).oid == 1022
    assert array_converter_for(str).oid == 1009

    with pytest.raises(ValueError):
        array_converter_for(complex)


def test_arrays_reject_lossy_values():
    """
    Tests that values which can't be written exactly are refused rather than truncated.
    """
    context = make_context()
    with pytest.raises(InvalidValueError):
        INT8A.to_postgres(context, [1, 1.9])

    assert INT8A.to_postgres(context, [2.0]) == "{2}"

    with pytest.raises(ElementConversionError) as e:
        FLOAT4A.from_postgres(context, "{1,1e-50}")
    assert e.value.index == 1

    for value in ("abc", b"abc"):
        with pytest.raises(TypeError):
            STATIC_TEXTA_CONVERTER.to_postgres(context, value)

    assert STATIC_TEXTA_CONVERTER.to_postgres(context, ("abc",)) == '{"abc"}'
