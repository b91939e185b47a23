"""File parameters for multipart/form-data requests.

Generated operations accept files in several shapes. ``build_request_file_object``
turns each of them into a ``FileObject`` with a resolved filename and content
type:

- ``FileWithMetadata`` (or a ``{"data": ..., "filename": ..., "content_type": ...}`` mapping)
- ``FileObject`` (or a legacy ``{"value": ..., "options": {...}}`` mapping) as ``data``
- ``bytes`` or ``str`` (encoded as UTF-8)
- a binary stream; a stream opened from a path also provides filename and type

Example:
    ```python
    with open("report.pdf", "rb") as f:
        file_obj = await build_request_file_object(FileWithMetadata(data=f))
    file_obj.options.filename      # 'report.pdf'
    file_obj.options.content_type  # 'application/pdf'
    ```
"""

import mimetypes
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, BinaryIO

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_FILENAME = "_"

# Longest signature offset + length we look at.
SNIFF_LENGTH = 32

# (offset, signature, content type), checked in order
FILE_SIGNATURES: list[tuple[int, bytes, str]] = [
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"BM", "image/bmp"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
    (0, b"%PDF", "application/pdf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"BZh", "application/x-bzip2"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (0, b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (0, b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "application/x-cfb"),
    (0, b"OggS", "audio/ogg"),
    (0, b"fLaC", "audio/x-flac"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"\xff\xfb", "audio/mpeg"),
    (0, b"\xff\xf3", "audio/mpeg"),
    (0, b"\xff\xf2", "audio/mpeg"),
    (0, b"\x1aE\xdf\xa3", "video/webm"),
    (4, b"ftypqt", "video/quicktime"),
    (4, b"ftyp", "video/mp4"),
]

# RIFF containers carry their format at bytes 8-12
RIFF_FORMATS = {
    b"WEBP": "image/webp",
    b"WAVE": "audio/wav",
    b"AVI ": "video/x-msvideo",
}


class FileValueKind(Enum):
    """Shape of a file value, decided once when the value is ingested."""

    BUFFER = "buffer"
    STREAM = "stream"
    PATH_STREAM = "path_stream"


@dataclass
class FileOptions:
    filename: str | None = None
    content_type: str | None = None


@dataclass
class FileObject:
    """A file value plus the metadata sent with it in a multipart part."""

    value: bytes | BinaryIO
    options: FileOptions = field(default_factory=FileOptions)
    kind: FileValueKind | None = None


@dataclass
class FileWithMetadata:
    """A file parameter as passed to a generated operation."""

    data: Any
    filename: str | None = None
    content_type: str | None = None


def classify_file_value(value: Any) -> FileValueKind | None:
    """Return the kind of file value, or None if value is not file data."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return FileValueKind.BUFFER
    if callable(getattr(value, "read", None)):
        name = getattr(value, "name", None)
        if name and isinstance(name, (str, bytes, os.PathLike)):
            return FileValueKind.PATH_STREAM
        return FileValueKind.STREAM
    return None


def is_file_data(value: Any) -> bool:
    return classify_file_value(value) is not None


def is_file_with_metadata(value: Any) -> bool:
    """Return True if value is a file parameter with metadata."""
    if isinstance(value, FileWithMetadata):
        return True
    return isinstance(value, Mapping) and "data" in value and is_file_data(value["data"])


def _as_file_object(data: Any) -> FileObject | None:
    if isinstance(data, FileObject):
        return data
    if isinstance(data, Mapping) and data.get("value"):
        options = data.get("options") or {}
        return FileObject(
            value=data["value"],
            options=FileOptions(
                filename=options.get("filename"),
                content_type=options.get("content_type") or options.get("contentType"),
            ),
        )
    return None


def _as_file_with_metadata(file_param: Any) -> FileWithMetadata:
    if isinstance(file_param, FileWithMetadata):
        return file_param
    if isinstance(file_param, Mapping):
        return FileWithMetadata(
            data=file_param.get("data"),
            filename=file_param.get("filename"),
            content_type=file_param.get("content_type") or file_param.get("contentType"),
        )
    return FileWithMetadata(data=file_param)


def sniff_content_type(head: bytes) -> str | None:
    """Infer a content type from the leading bytes of a file."""
    if head.startswith(b"RIFF") and len(head) >= 12:
        riff_type = RIFF_FORMATS.get(head[8:12])
        if riff_type:
            return riff_type

    for offset, signature, content_type in FILE_SIGNATURES:
        if head[offset : offset + len(signature)] == signature:
            return content_type
    return None


async def get_content_type(value: Any) -> str | None:
    """Determine the content type of file data.

    Streams opened from a path are typed by the path's extension, buffers by
    their leading bytes. Other streams are not inspected.

    Args:
        value: File data.

    Returns:
        The content type, or None if it cannot be determined.
    """
    kind = classify_file_value(value)
    if kind is FileValueKind.PATH_STREAM:
        content_type, _ = mimetypes.guess_type(os.fsdecode(value.name))
        return content_type
    if kind is FileValueKind.BUFFER:
        return sniff_content_type(bytes(value[:SNIFF_LENGTH]))
    return None


async def build_request_file_object(file_param: FileWithMetadata | Mapping[str, Any]) -> FileObject:
    """Build the multipart representation of a file parameter.

    Filename resolution: explicit filename, else the base name of a path
    stream's source path, else ``"_"``. Content type resolution: explicit
    content type, else sniffed from the data, else ``application/octet-stream``.

    Args:
        file_param: The file parameter. When its ``data`` is already a
            FileObject, the FileObject's value is reused and explicit
            ``filename``/``content_type`` override its nested options.

    Returns:
        FileObject with filename, content type and kind resolved.

    Raises:
        TypeError: If the value is not bytes, str or a readable stream.
    """
    file_param = _as_file_with_metadata(file_param)

    nested = _as_file_object(file_param.data)
    if nested is not None:
        value = nested.value
        options = FileOptions(
            filename=file_param.filename or nested.options.filename,
            content_type=file_param.content_type or nested.options.content_type,
        )
    else:
        value = file_param.data
        options = FileOptions(filename=file_param.filename, content_type=file_param.content_type)

    if isinstance(value, str):
        value = value.encode("utf-8")

    kind = classify_file_value(value)
    if kind is None:
        raise TypeError(f"Unsupported file data type: {type(value).__name__}")
    if kind is FileValueKind.BUFFER and not isinstance(value, bytes):
        value = bytes(value)

    filename = options.filename
    if not filename and kind is FileValueKind.PATH_STREAM:
        filename = value.name
    options.filename = os.path.basename(os.fsdecode(filename)) if filename else DEFAULT_FILENAME

    if not options.content_type:
        options.content_type = await get_content_type(value) or DEFAULT_CONTENT_TYPE

    return FileObject(value=value, options=options, kind=kind)
