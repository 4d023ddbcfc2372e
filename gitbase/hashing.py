"""Cache keys for language detection and UAST parsing."""

from __future__ import annotations

import os
import re
import zlib
from typing import Any, Optional, Sequence, Union

from .expression import Expression
from .filters import to_text

LANGUAGE_CACHE_SIZE_KEY = "GITBASE_LANGUAGE_CACHE_SIZE"
DEFAULT_LANGUAGE_CACHE_SIZE = 10000

_INTEGER = re.compile(r"[+-]?[0-9]+")
_CRC64_ISO_POLY = 0xD800000000000000
_MASK64 = (1 << 64) - 1


def _make_crc64_table(poly: int) -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ poly if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC64_ISO_TABLE = _make_crc64_table(_CRC64_ISO_POLY)


def language_cache_size() -> int:
    """Size of the language cache, from the environment or the default."""
    value = os.environ.get(LANGUAGE_CACHE_SIZE_KEY, "")
    if _INTEGER.fullmatch(value):
        size = int(value)
        if size > 0:
            return size
    return DEFAULT_LANGUAGE_CACHE_SIZE


def filename_hash(filename: str) -> int:
    """CRC-32 (IEEE) of the file name."""
    return zlib.crc32(filename.encode("utf-8"))


def blob_hash(blob: bytes) -> int:
    """CRC-32 (IEEE) of the content, or 0 for empty content."""
    if not blob:
        return 0
    return zlib.crc32(blob)


def language_hash(filename: str, blob: bytes) -> int:
    """64-bit key: file name hash in the high half, content hash in the low."""
    return (filename_hash(filename) << 32) | blob_hash(blob)


def crc64_iso(data: bytes) -> int:
    """CRC-64 with the ISO polynomial."""
    crc = _MASK64
    for byte in data:
        crc = _CRC64_ISO_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK64


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def compute_key(
    mode: Union[str, bytes], lang: Union[str, bytes], blob: bytes
) -> int:
    """Cache key of a parse request: CRC-64 of mode, language and content."""
    return crc64_iso(_as_bytes(mode) + _as_bytes(lang) + _as_bytes(blob))


def expr_to_string(
    expr: Optional[Expression], row: Optional[Sequence[Any]]
) -> str:
    """Evaluate the expression as text; missing expressions and NULL give ""."""
    if expr is None:
        return ""
    value = expr.eval(row)
    if value is None:
        return ""
    return to_text(value)