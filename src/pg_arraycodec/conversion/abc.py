from __future__ import annotations

import abc
import re
from datetime import tzinfo
from typing import Any

import attr
import dateutil.tz
import whenever
from dateutil.tz import UTC

from pg_arraycodec.util import LoggerWithTrace

logger = LoggerWithTrace.get(__name__)

SERVER_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?")


class Converter[T](metaclass=abc.ABCMeta):
    """
    Base class for all conversion classes. Implement this to create a custom converter.
    """

    #: The OID of the PostgreSQL type this converter uses.
    oid: int

    #: The delimiter placed between elements of this type inside an array literal. PostgreSQL
    #: uses a comma for everything except ``box``.
    array_delimiter: str = ","

    #: If the text form of this type should be double-quoted inside an array literal.
    array_quoted: bool = True

    @property
    def supports_decoding(self) -> bool:
        """
        If this converter can turn PostgreSQL text into a Python object.
        """
        return True

    @abc.abstractmethod
    def from_postgres(self, context: ConversionContext, data: str) -> T:
        """
        Converts ``data`` from the PostgreSQL string representation to a Python type.

        :param context: The conversion context this converter was invoked in.
        :param data: The raw string data.
        :return: Any Python object that resulted from the conversion.
        """

    @abc.abstractmethod
    def to_postgres(self, context: ConversionContext, data: T) -> str:
        """
        Converts ``data`` from the Python type to the PostgreSQL string representation.

        :param context: The conversion context this converter was invoked in.
        :param data: The Python object that needs to be converted.
        :return: The string data that will be used in a query string.
        """


def _check_bounds(instance: InfinityTimestamps, attribute: Any, value: whenever.OffsetDateTime):
    if not instance.negative < value:
        raise ValueError("The negative infinity bound must be before the positive bound")


@attr.s(slots=True, frozen=True)
class InfinityTimestamps:
    """
    Bounds that map timestamps onto PostgreSQL's ``-infinity`` and ``infinity`` values when
    formatting. Anything at or before :attr:`negative` becomes ``-infinity``, and anything at or
    after :attr:`positive` becomes ``infinity``.
    """

    negative: whenever.OffsetDateTime = attr.ib()
    positive: whenever.OffsetDateTime = attr.ib(validator=_check_bounds)


@attr.s(slots=True, frozen=False)
class ConversionContext:
    """
    A conversion context contains information that might be needed to convert from the PostgreSQL
    string representation to the real representation.
    """

    #: The encoding of the client.
    client_encoding: str = attr.ib(default="UTF8")

    #: The timezone of the server.
    timezone: tzinfo = attr.ib(default=UTC)

    #: The server version, in the same format as ``server_version_num``. Zero if unknown.
    server_version: int = attr.ib(default=0)

    #: Optional infinity bounds used when formatting timestamps.
    infinity: InfinityTimestamps | None = attr.ib(default=None)

    def apply_parameter(self, name: str, value: str) -> None:
        """
        Updates this context from a ``ParameterStatus`` sent by the server. Unrelated parameters
        are ignored.
        """
        if name == "client_encoding":
            self.client_encoding = value
        elif name == "TimeZone":
            gotten = dateutil.tz.gettz(value)
            if gotten is None:
                raise ValueError(f"PG returned invalid timezone {value}!")

            # coerce 'UTC' zoneinfo into tzutc
            if gotten == dateutil.tz.gettz("UTC"):
                gotten = UTC

            self.timezone = gotten
        elif name == "server_version":
            self.server_version = parse_server_version(value)
        else:
            return

        logger.trace(f"Parameter status: {name} -> {value}")


def parse_server_version(value: str) -> int:
    """
    Turns a ``server_version`` string such as ``9.6.3`` or ``16.2 (Debian 16.2-1)`` into the
    ``server_version_num`` format. Only the first two components are used.

    Before 10, the second component is the major release and takes two digits (``9.6`` is
    ``90600``). From 10 on, it is the minor release (``10.1`` is ``100001``).
    """
    match = SERVER_VERSION_RE.match(value)
    if match is None:
        raise ValueError(f"Can't parse server version {value!r}")

    major, minor = int(match.group(1)), int(match.group(2) or 0)
    if major >= 10:
        return major * 10000 + minor

    return major * 10000 + minor * 100
