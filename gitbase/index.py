"""Binary encoding of index keys and iteration over index values."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Iterable, Sequence

HASH_SIZE = 40

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MASK = (1 << 64) - 1


class ColumnNotFoundError(LookupError):
    """A column is not in the table's schema."""

    def __init__(self, column: str, table: str) -> None:
        super().__init__(f"column {column} not found for table {table}")
        self.column = column
        self.table = table


class InvalidHashSizeError(ValueError):
    """A hash does not have the expected hexadecimal length."""

    def __init__(self, size: int) -> None:
        super().__init__(f"invalid hash size: {size}, expecting 40 bytes")
        self.size = size


def _read_exact(buf: BinaryIO, n: int) -> bytes:
    data = buf.read(n)
    if len(data) != n:
        raise ValueError(f"unexpected EOF: read {len(data)} of {n} bytes")
    return data


def write_int64(buf: BinaryIO, n: int) -> None:
    """Write a zig-zag encoded signed 64-bit integer, little endian."""
    if not _INT64_MIN <= n <= _INT64_MAX:
        raise OverflowError(f"{n} does not fit in a signed 64-bit integer")
    ux = (n << 1) & _UINT64_MASK
    if n < 0:
        ux = ~ux & _UINT64_MASK
    buf.write(struct.pack("<Q", ux))


def read_int64(buf: BinaryIO) -> int:
    """Read a zig-zag encoded signed 64-bit integer."""
    try:
        data = _read_exact(buf, 8)
    except ValueError as e:
        raise ValueError(f"can't read int64: {e}") from e
    (ux,) = struct.unpack("<Q", data)
    x = ux >> 1
    if ux & 1:
        x = ~x
    return x


def write_string(buf: BinaryIO, s: str) -> None:
    """Write a length-prefixed UTF-8 string."""
    data = s.encode("utf-8")
    write_int64(buf, len(data))
    buf.write(data)


def read_string(buf: BinaryIO) -> str:
    """Read a length-prefixed UTF-8 string."""
    try:
        size = read_int64(buf)
    except ValueError as e:
        raise ValueError(f"can't read string size: {e}") from e
    if size < 0:
        raise ValueError(f"can't read string of size {size}")
    try:
        data = _read_exact(buf, size)
    except ValueError as e:
        raise ValueError(f"can't read string of size {size}: {e}") from e
    return data.decode("utf-8")


def write_bool(buf: BinaryIO, b: bool) -> None:
    """Write a boolean as a single byte."""
    buf.write(b"\x01" if b else b"\x00")


def read_bool(buf: BinaryIO) -> bool:
    """Read a boolean written as a single byte."""
    data = buf.read(1)
    if not data:
        raise ValueError("can't read bool: EOF")
    return data[0] == 1


def write_hash(buf: BinaryIO, s: str) -> None:
    """Write a 40-character hexadecimal hash."""
    data = s.encode("utf-8")
    if len(data) != HASH_SIZE:
        raise InvalidHashSizeError(len(data))
    buf.write(data)


def read_hash(buf: BinaryIO) -> str:
    """Read a 40-character hexadecimal hash."""
    data = buf.read(HASH_SIZE)
    if len(data) != HASH_SIZE:
        raise ValueError(f"can't read hash, only read {len(data)}: unexpected EOF")
    return data.decode("utf-8")


@dataclass
class PackOffsetIndexKey:
    """Locates an object either by packfile offset or by its hash."""

    repository: str
    packfile: str
    offset: int = -1
    hash: str = ""

    def encode(self) -> bytes:
        """Serialize the key."""
        import io

        buf = io.BytesIO()
        write_string(buf, self.repository)
        write_hash(buf, self.packfile)
        write_bool(buf, self.offset >= 0)
        if self.offset >= 0:
            write_int64(buf, self.offset)
        else:
            write_hash(buf, self.hash)
        return buf.getvalue()

    @classmethod
    def decode(cls, data: bytes) -> "PackOffsetIndexKey":
        """Deserialize a key produced by encode."""
        import io

        buf = io.BytesIO(data)
        repository = read_string(buf)
        packfile = read_hash(buf)
        if read_bool(buf):
            return cls(repository, packfile, read_int64(buf), "")
        return cls(repository, packfile, -1, read_hash(buf))


def encode_index_key(key: Any) -> bytes:
    """Serialize a key and compress it with zlib."""
    return zlib.compress(key.encode())


def decode_index_key(data: bytes, key_type: Any) -> Any:
    """Decompress data and decode it as an instance of key_type."""
    return key_type.decode(zlib.decompress(data))


def row_index_values(
    row: Sequence[Any], columns: Iterable[str], schema: Sequence[Any]
) -> list:
    """Values of the named columns in the row, in the order of columns."""
    positions = {}
    for i, col in enumerate(schema):
        positions.setdefault(col.name, i)
    values = []
    for col in columns:
        if col not in positions:
            table = schema[0].source if schema else ""
            raise ColumnNotFoundError(col, table)
        values.append(row[positions[col]])
    return values


class RowIndexIter:
    """Iterates rows decoded from index values; closes the index on error."""

    def __init__(
        self, index: Iterable[bytes], to_row: Callable[[bytes], Sequence[Any]]
    ) -> None:
        self._index = index
        self._values = iter(index)
        self._to_row = to_row

    def __iter__(self) -> "RowIndexIter":
        return self

    def __next__(self) -> Sequence[Any]:
        try:
            data = next(self._values)
            return self._to_row(data)
        except StopIteration:
            raise
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        """Close the underlying index."""
        close = getattr(self._index, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "RowIndexIter":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()