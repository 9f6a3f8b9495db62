#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Line format for manifest and reduction ledger records.

Manifest:   relativeName|sizeBytes|contentHash
Reduction:  relativeName|sizeBytes|contentHash|bytesSaved

Fields are escaped (backslash, delimiter, newline) so any file name
round-trips. Unescaped lines from older manifests decode unchanged as
long as the name holds no backslash.
"""

from typing import List

from ..config import FIELD_DELIMITER
from ..errors import ManifestParseError
from ..models.identity import Identity, ReductionRecord

_ESCAPES = {"\\": "\\\\", FIELD_DELIMITER: "\\" + FIELD_DELIMITER, "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", FIELD_DELIMITER: FIELD_DELIMITER, "n": "\n", "r": "\r"}


def escape_field(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def split_fields(line: str) -> List[str]:
    """Split an escaped line on unescaped delimiters."""
    fields: List[str] = []
    current: List[str] = []
    chars = iter(line)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, None)
            if nxt is None or nxt not in _UNESCAPES:
                raise ManifestParseError(line, "dangling escape")
            current.append(_UNESCAPES[nxt])
        elif ch == FIELD_DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def _parse_size(line: str, value: str, label: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise ManifestParseError(line, f"{label} is not an integer")
    if size < 0:
        raise ManifestParseError(line, f"{label} is negative")
    return size


def encode_identity(identity: Identity) -> str:
    return FIELD_DELIMITER.join((
        escape_field(identity.relative_name),
        str(identity.size_bytes),
        escape_field(identity.content_hash),
    ))


def decode_identity(line: str) -> Identity:
    fields = split_fields(line)
    if len(fields) != 3:
        raise ManifestParseError(line, f"expected 3 fields, found {len(fields)}")
    name, size, content_hash = fields
    if not name or not content_hash:
        raise ManifestParseError(line, "empty name or hash")
    return Identity(
        relative_name=name,
        size_bytes=_parse_size(line, size, "size"),
        content_hash=content_hash,
    )


def encode_reduction(record: ReductionRecord) -> str:
    return encode_identity(record.identity) + FIELD_DELIMITER + str(record.bytes_saved)


def decode_reduction(line: str) -> ReductionRecord:
    fields = split_fields(line)
    if len(fields) != 4:
        raise ManifestParseError(line, f"expected 4 fields, found {len(fields)}")
    name, size, content_hash, saved = fields
    if not name or not content_hash:
        raise ManifestParseError(line, "empty name or hash")
    identity = Identity(
        relative_name=name,
        size_bytes=_parse_size(line, size, "size"),
        content_hash=content_hash,
    )
    return ReductionRecord(identity=identity, bytes_saved=_parse_size(line, saved, "bytes saved"))
