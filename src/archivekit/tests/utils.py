"""Helpers for building and inspecting trees and zips in tests."""

import io
import zipfile


def put_file(store, raw_path, data: bytes):
    path = store.path(raw_path)
    if path.parent != path:
        store.create_directories(path.parent)
    with store.open_write(path) as fp:
        fp.write(data)
    return path


def get_file(store, raw_path) -> bytes:
    with store.open_read(store.path(raw_path)) as fp:
        return fp.read()


def put_zip(store, raw_path, entries):
    """Write a zip built from `(name_or_zipinfo, data)` pairs, in order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries:
            zf.writestr(name, data)
    return put_file(store, raw_path, buf.getvalue())


def zip_namelist(store, raw_path) -> list[str]:
    with zipfile.ZipFile(io.BytesIO(get_file(store, raw_path))) as zf:
        return zf.namelist()


def zip_read(store, raw_path, name) -> bytes:
    with zipfile.ZipFile(io.BytesIO(get_file(store, raw_path))) as zf:
        return zf.read(name)
