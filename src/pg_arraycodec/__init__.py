# flake8: noqa

import logging
from pg_arraycodec.util import TRACE
from pg_arraycodec.conversion import (
    ArrayConverter as ArrayConverter,
    ConversionContext as ConversionContext,
    Converter as Converter,
    InfinityTimestamps as InfinityTimestamps,
    SimpleFunctionConverter as SimpleFunctionConverter,
    array_converter_for as array_converter_for,
    default_converters as default_converters,
    format_timestamp as format_timestamp,
)
from pg_arraycodec.conversion.abc import parse_server_version as parse_server_version
from pg_arraycodec.conversion.array_format import (
    ArrayElement as ArrayElement,
    format_array as format_array,
)
from pg_arraycodec.conversion.array_parse import (
    ParsedArray as ParsedArray,
    parse_array as parse_array,
    scan_linear_array as scan_linear_array,
)
from pg_arraycodec.conversion.bytea import (
    encode_bytea as encode_bytea,
    parse_bytea as parse_bytea,
)
from pg_arraycodec.conversion.quoting import (
    quote_element as quote_element,
    unquote_element as unquote_element,
)
from pg_arraycodec.exc import (
    ConversionError as ConversionError,
    ArrayParseError as ArrayParseError,
    DimensionMismatchError as DimensionMismatchError,
    MultidimensionalArrayError as MultidimensionalArrayError,
    ElementConversionError as ElementConversionError,
    InvalidByteaError as InvalidByteaError,
    InvalidValueError as InvalidValueError,
    MissingDecoderError as MissingDecoderError,
)


logging.addLevelName(TRACE, "TRACE")
del logging, TRACE
