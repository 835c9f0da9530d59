"""Length-prefixed binary records.

Every length or count is a big-endian signed 32-bit integer written before
the data it describes. Strings are UTF-8.
"""

from __future__ import annotations

import struct
from typing import IO, Iterable, Mapping

_INT32 = struct.Struct(">i")


def _write_int(fp: IO[bytes], value: int) -> None:
    fp.write(_INT32.pack(value))


def _read_exact(fp: IO[bytes], size: int) -> bytes:
    data = fp.read(size)
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise EOFError(f"Expected {size} bytes, got {got}.")
    return data


def _read_size(fp: IO[bytes], what: str) -> int:
    (value,) = _INT32.unpack(_read_exact(fp, _INT32.size))
    if value < 0:
        raise ValueError(f"Negative {what}: {value}")
    return value


def write_length_prefixed(fp: IO[bytes], data: bytes) -> None:
    _write_int(fp, len(data))
    fp.write(data)


def read_length_prefixed(fp: IO[bytes]) -> bytes:
    size = _read_size(fp, "length prefix")
    return _read_exact(fp, size)


def write_prefixed_string(fp: IO[bytes], value: str) -> None:
    write_length_prefixed(fp, value.encode("utf-8"))


def read_prefixed_string(fp: IO[bytes]) -> str:
    return read_length_prefixed(fp).decode("utf-8")


def write_string_list(fp: IO[bytes], values: Iterable[str]) -> None:
    values = list(values)
    _write_int(fp, len(values))
    for value in values:
        write_prefixed_string(fp, value)


def read_string_list(fp: IO[bytes]) -> list[str]:
    size = _read_size(fp, "list size")
    return [read_prefixed_string(fp) for _ in range(size)]


def write_string_map(fp: IO[bytes], mapping: Mapping[str, str]) -> None:
    _write_int(fp, len(mapping))
    for key, value in mapping.items():
        write_prefixed_string(fp, key)
        write_prefixed_string(fp, value)


def read_string_map(fp: IO[bytes]) -> dict[str, str]:
    size = _read_size(fp, "map size")
    out: dict[str, str] = {}
    for _ in range(size):
        key = read_prefixed_string(fp)
        out[key] = read_prefixed_string(fp)
    return out
