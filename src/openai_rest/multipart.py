"""Multipart form assembly for upload endpoints.

Each multipart operation declares an ordered schema of the fields it
sends. File fields name a local path in the request; the file is read
whole and sent as a part carrying the path as its file name.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import InvalidRequestError, LocalFileError


@dataclass(frozen=True)
class FormPart:
    """One field of a multipart/form-data body."""

    name: str
    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class FieldSpec:
    """How one request field is turned into a form part."""

    name: str
    file: bool = False
    content_type: Optional[str] = None


def file_field(name: str, content_type: str) -> FieldSpec:
    return FieldSpec(name, file=True, content_type=content_type)


def text_field(name: str) -> FieldSpec:
    return FieldSpec(name)


IMAGE_EDIT_FIELDS: Tuple[FieldSpec, ...] = (
    file_field("image", "image/png"),
    text_field("prompt"),
    file_field("mask", "image/png"),
    text_field("model"),
    text_field("n"),
    text_field("size"),
    text_field("response_format"),
    text_field("user"),
)

IMAGE_VARIATION_FIELDS: Tuple[FieldSpec, ...] = (
    file_field("image", "image/png"),
    text_field("model"),
    text_field("n"),
    text_field("response_format"),
    text_field("size"),
    text_field("user"),
)

TRANSCRIPTION_FIELDS: Tuple[FieldSpec, ...] = (
    file_field("file", "audio/mpeg"),
    text_field("model"),
    text_field("language"),
    text_field("prompt"),
    text_field("response_format"),
    text_field("temperature"),
)

TRANSLATION_FIELDS: Tuple[FieldSpec, ...] = (
    file_field("file", "audio/mpeg"),
    text_field("model"),
    text_field("prompt"),
    text_field("response_format"),
    text_field("temperature"),
)

FILE_UPLOAD_FIELDS: Tuple[FieldSpec, ...] = (
    file_field("file", "application/json"),
    text_field("purpose"),
)


def read_file(path: Union[str, os.PathLike]) -> bytes:
    """Read a whole local file into memory.

    Raises:
        LocalFileError: If the file cannot be opened or read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise LocalFileError(str(path), e.strerror or str(e)) from e


def format_scalar(value: Any) -> str:
    """Render a scalar request value as form field text."""
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    return json.dumps(value)


def build_form_parts(
    request: Mapping[str, Any],
    fields: Sequence[FieldSpec],
) -> List[FormPart]:
    """Build form parts for `request` in the order declared by `fields`.

    Fields missing from the request, or unknown to the schema, are skipped.
    The request is not modified.

    Args:
        request: Field name to value mapping supplied by the caller
        fields: Ordered field schema for the operation

    Returns:
        Ordered list of form parts

    Raises:
        InvalidRequestError: If the request is not a mapping, or a file
            field does not hold a path
        LocalFileError: If a file field names a path that cannot be read
    """
    if not isinstance(request, Mapping):
        raise InvalidRequestError(
            f"request must be an object of fields, got {type(request).__name__}"
        )

    parts: List[FormPart] = []

    for spec in fields:
        if spec.name not in request:
            continue

        value = request[spec.name]
        if spec.file:
            if not isinstance(value, (str, os.PathLike)):
                raise InvalidRequestError(
                    f"field {spec.name!r} must be a local file path, got {type(value).__name__}"
                )
            path = os.fspath(value)
            parts.append(
                FormPart(
                    name=spec.name,
                    content=read_file(path),
                    filename=path,
                    content_type=spec.content_type,
                )
            )
        else:
            parts.append(FormPart(name=spec.name, content=format_scalar(value).encode("utf-8")))

    return parts


def to_httpx_files(parts: Sequence[FormPart]) -> List[Tuple[str, tuple]]:
    """Render form parts as an ordered httpx ``files`` list.

    Text parts use a None file name so httpx emits them without a
    filename or content type, keeping every part in declared order.
    """
    files = []
    for part in parts:
        if part.filename is None:
            files.append((part.name, (None, part.content)))
        else:
            files.append((part.name, (part.filename, part.content, part.content_type)))
    return files
