"""
Codec for the text forms of ``bytea`` values.
"""

from __future__ import annotations

import binascii
import re

from pg_arraycodec.exc import InvalidByteaError

HEX_PREFIX = b"\\x"
OCTAL_RE = re.compile(rb"[0-7]{3}")

#: The first server version (in ``server_version_num`` format) that understands hex format.
HEX_FORMAT_VERSION = 90000


def parse_bytea(data: bytes) -> bytes:
    """
    Decodes bytea text in either hex format (``\\x0001``) or the older escape format.
    """
    if data.startswith(HEX_PREFIX):
        try:
            return binascii.unhexlify(data[2:])
        except binascii.Error as e:
            raise InvalidByteaError(f"could not parse bytea value: {e}") from e

    out = bytearray()
    pos = 0
    size = len(data)

    while pos < size:
        if data[pos] != 0x5C:
            end = data.find(b"\\", pos)
            if end == -1:
                out += data[pos:]
                break

            out += data[pos:end]
            pos = end
            continue

        if data[pos + 1 : pos + 2] == b"\\":
            out += b"\\"
            pos += 2
            continue

        if size - pos < 4:
            raise InvalidByteaError(f"invalid bytea sequence {data[pos:]!r}")

        digits = data[pos + 1 : pos + 4]
        if not OCTAL_RE.fullmatch(digits) or (value := int(digits, 8)) > 0xFF:
            raise InvalidByteaError(f"could not parse bytea value: invalid escape {digits!r}")

        out.append(value)
        pos += 4

    return bytes(out)


def encode_bytea(server_version: int, data: bytes) -> bytes:
    """
    Encodes ``data`` into bytea text. Hex format is used when the server is known to support it,
    otherwise escape format.

    :param server_version: The server version, in ``server_version_num`` format.
    """
    if server_version >= HEX_FORMAT_VERSION:
        return HEX_PREFIX + binascii.hexlify(data)

    out = bytearray()
    for byte in data:
        if byte == 0x5C:
            out += b"\\\\"
        elif byte < 0x20 or byte > 0x7E:
            out += b"\\%03o" % byte
        else:
            out.append(byte)

    return bytes(out)
