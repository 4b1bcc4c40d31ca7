from __future__ import annotations

import codecs
from logging import Logger, getLogger
from typing import Any

import attr

from pg_arraycodec.exc import ConversionError

TRACE = 5

#: PostgreSQL encoding names that Python spells differently.
ENCODING_NAMES = {
    "SQL_ASCII": "ascii",
    "UTF8": "utf-8",
    "LATIN1": "iso8859_1",
    "LATIN2": "iso8859_2",
    "LATIN3": "iso8859_3",
    "LATIN4": "iso8859_4",
    "LATIN5": "iso8859_9",
    "LATIN6": "iso8859_10",
    "LATIN7": "iso8859_13",
    "LATIN8": "iso8859_14",
    "LATIN9": "iso8859_15",
    "LATIN10": "iso8859_16",
    "ISO_8859_5": "iso8859_5",
    "ISO_8859_6": "iso8859_6",
    "ISO_8859_7": "iso8859_7",
    "ISO_8859_8": "iso8859_8",
    "WIN866": "cp866",
    "WIN874": "cp874",
    "WIN1250": "cp1250",
    "WIN1251": "cp1251",
    "WIN1252": "cp1252",
    "WIN1253": "cp1253",
    "WIN1254": "cp1254",
    "WIN1255": "cp1255",
    "WIN1256": "cp1256",
    "WIN1257": "cp1257",
    "WIN1258": "cp1258",
    "KOI8R": "koi8_r",
    "KOI8U": "koi8_u",
    "EUC_CN": "gb2312",
    "EUC_JP": "euc_jp",
    "EUC_JIS_2004": "euc_jis_2004",
    "EUC_KR": "euc_kr",
    "SJIS": "shift_jis",
    "SHIFT_JIS_2004": "shift_jis_2004",
    "BIG5": "big5",
    "GBK": "gbk",
    "GB18030": "gb18030",
    "UHC": "cp949",
    "JOHAB": "johab",
}


@attr.s(slots=True, frozen=True, kw_only=True)
class LoggerWithTrace:
    logger: Logger = attr.ib()

    @classmethod
    def get(cls, name: str) -> LoggerWithTrace:
        return LoggerWithTrace(logger=getLogger(name))

    def trace(self, message: str, *args: Any, **kws: Any) -> None:
        self.logger.log(TRACE, message, *args, **kws)


def decode_text(data: bytes, encoding: str) -> str:
    """
    Decodes a raw element using a PostgreSQL client encoding name.
    """
    return data.decode(_python_encoding(encoding))


def encode_text(data: str, encoding: str) -> bytes:
    """
    Encodes text using a PostgreSQL client encoding name.
    """
    return data.encode(_python_encoding(encoding))


def _python_encoding(encoding: str) -> str:
    name = ENCODING_NAMES.get(encoding.upper(), encoding)
    try:
        return codecs.lookup(name).name
    except LookupError:
        raise ConversionError(f"Unsupported client encoding {encoding!r}") from None
