## callmonitor/reader.py

from __future__ import annotations
import codecs
from .schemas import FileHandle, FilePayload
from .utils import DecodeError, FileReadError, StartupConfigError


def validate_charset(charset: str) -> str:
    try:
        info = codecs.lookup(charset)
        b"".decode(charset)  # bytes-to-bytes codecs (hex, base64, ...) fail here
    except LookupError as e:
        raise StartupConfigError(f"Unknown or non-text charset: {charset}") from e
    return info.name


def read_payload(handle: FileHandle, charset: str) -> FilePayload:
    try:
        with open(handle.path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise FileReadError(handle.path, e.strerror or str(e)) from e
    try:
        text = raw.decode(charset)  # strict: never substitute characters
    except UnicodeDecodeError as e:
        raise DecodeError(handle.path, charset, e.reason) from e
    return FilePayload(handle=handle, text=text, charset=charset)
