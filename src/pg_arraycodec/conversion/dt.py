from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Literal, override

import dateutil.parser
import whenever

from pg_arraycodec.conversion.abc import Converter
from pg_arraycodec.conversion.arrays import ArrayConverter

if TYPE_CHECKING:
    from pg_arraycodec.conversion.abc import ConversionContext, InfinityTimestamps


type PostgresInfinity = Literal["infinity", "-infinity"]
type PostgresTimestampTz = whenever.OffsetDateTime | PostgresInfinity
type PostgresTimestampWithoutTz = whenever.PlainDateTime | PostgresInfinity


def format_timestamp(
    value: whenever.OffsetDateTime,
    infinity: InfinityTimestamps | None = None,
) -> str:
    """
    Formats a timestamp into a form PostgreSQL understands.

    :param value: The timestamp to format.
    :param infinity: If provided, timestamps at or past these bounds are written as ``-infinity``
                     or ``infinity``.
    """
    if infinity is not None:
        if value <= infinity.negative:
            return "-infinity"

        if value >= infinity.positive:
            return "infinity"

    return value.format_common_iso()


class TimestampTzConverter(Converter[PostgresTimestampTz]):
    """
    Converts from a TIMESTAMP WITH TIMEZONE to an :class:`whenever.OffsetDateTime`.
    """

    oid = 1184
    array_quoted = False

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> PostgresTimestampTz:
        if data == "infinity" or data == "-infinity":
            return data

        # TIMESTAMPTZ are stored in UTC, and are converted to the server's timezone on retrieval.
        # So we provide the returned date in the server's timezone.
        parsed = dateutil.parser.isoparse(data)

        # whenever wants a fixed offset, not dateutil's tzinfo classes.
        fixed = parsed.replace(tzinfo=datetime.timezone(parsed.utcoffset()))
        return whenever.OffsetDateTime.from_py_datetime(fixed)

    @override
    def to_postgres(self, context: ConversionContext, data: PostgresTimestampTz) -> str:
        match data:
            case "infinity" | "-infinity":
                return data

            case whenever.OffsetDateTime():
                return format_timestamp(data, context.infinity)

        raise TypeError(f"Can't convert {data!r} to a timestamptz")


STATIC_TIMESTAMPTZ_CONVERTER = TimestampTzConverter()
STATIC_TIMESTAMPTZA_CONVERTER = ArrayConverter(
    1185, STATIC_TIMESTAMPTZ_CONVERTER, name="timestamptz[]"
)


class TimestampNoTzConverter(Converter[PostgresTimestampWithoutTz]):
    """
    Converts from a TIMESTAMP WITHOUT TIMEZONE to a :class:`whenever.PlainDateTime`.
    """

    oid = 1114
    array_quoted = False

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> PostgresTimestampWithoutTz:
        if data == "infinity" or data == "-infinity":
            return data

        parsed = dateutil.parser.isoparse(data)
        return whenever.PlainDateTime.from_py_datetime(parsed)

    @override
    def to_postgres(self, context: ConversionContext, data: PostgresTimestampWithoutTz) -> str:
        match data:
            case "infinity" | "-infinity":
                return data

            case whenever.PlainDateTime():
                return data.format_common_iso()

        raise TypeError(f"Can't convert {data!r} to a timestamp")


STATIC_TIMESTAMPNOTZ_CONVERTER = TimestampNoTzConverter()
STATIC_TIMESTAMPNOTZA_CONVERTER = ArrayConverter(
    1115, STATIC_TIMESTAMPNOTZ_CONVERTER, name="timestamp[]"
)


class DateConverter(Converter[datetime.date]):
    """
    Converts from a DATE to a :class:`datetime.date` object.
    """

    oid = 1082
    array_quoted = False

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> datetime.date:
        return datetime.date.fromisoformat(data)

    @override
    def to_postgres(self, context: ConversionContext, data: datetime.date) -> str:
        return data.isoformat()


STATIC_DATE_CONVERTER = DateConverter()
STATIC_DATEA_CONVERTER = ArrayConverter(1182, STATIC_DATE_CONVERTER, name="date[]")


class TimeConverter(Converter[datetime.time]):
    """
    Converts from a TIME WITHOUT TIMEZONE to a :class:`datetime.time` object.
    """

    oid = 1083
    array_quoted = False

    @override
    def from_postgres(self, context: ConversionContext, data: str) -> datetime.time:
        return datetime.time.fromisoformat(data)

    @override
    def to_postgres(self, context: ConversionContext, data: datetime.time) -> str:
        return data.isoformat()


STATIC_TIME_CONVERTER = TimeConverter()
STATIC_TIMEA_CONVERTER = ArrayConverter(1183, STATIC_TIME_CONVERTER, name="time[]")
