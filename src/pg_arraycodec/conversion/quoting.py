"""
Quoting for single elements inside an array literal.
"""

from __future__ import annotations

import re

from pg_arraycodec.exc import ArrayParseError

QUOTE = ord('"')
BACKSLASH = ord("\\")

SPECIAL_RE = re.compile(rb'["\\]')


def append_quoted(buf: bytearray, data: bytes) -> None:
    """
    Appends ``data`` to ``buf`` as a double-quoted array element, escaping quotes and backslashes.
    """
    buf += b'"'
    pos = 0

    while (match := SPECIAL_RE.search(data, pos)) is not None:
        idx = match.start()
        buf += data[pos:idx]
        buf += b"\\"
        buf.append(data[idx])
        pos = idx + 1

    buf += data[pos:]
    buf += b'"'


def quote_element(data: bytes) -> bytes:
    """
    Quotes ``data`` for embedding into an array literal.
    """
    buf = bytearray()
    append_quoted(buf, data)
    return bytes(buf)


def scan_quoted(src: bytes, start: int) -> tuple[bytes | None, int]:
    """
    Reads a quoted element starting just after its opening quote.

    :return: The unescaped element and the offset just past the closing quote. If the closing
             quote is missing, returns ``None`` and the length of ``src``.
    """
    out = bytearray()
    pos = start

    while (match := SPECIAL_RE.search(src, pos)) is not None:
        idx = match.start()
        out += src[pos:idx]

        if src[idx] == QUOTE:
            return bytes(out), idx + 1

        # a backslash takes the next byte literally, whatever it is
        if idx + 1 >= len(src):
            break

        out.append(src[idx + 1])
        pos = idx + 2

    return None, len(src)


def unquote_element(data: bytes) -> bytes:
    """
    Decodes a single quoted element, the inverse of :func:`quote_element`.
    """
    if not data or data[0] != QUOTE:
        raise ArrayParseError("unable to parse element; expected '\"' at offset 0", 0)

    result, end = scan_quoted(data, 1)
    if result is None:
        raise ArrayParseError(f"unable to parse element; expected '\"' at offset {end}", end)

    if end != len(data):
        raise ArrayParseError(
            f"unable to parse element; unexpected {chr(data[end])!r} at offset {end}", end
        )

    return result
