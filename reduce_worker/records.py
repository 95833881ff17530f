"""
KeyValue record codec
One JSON object per line: {"Key":"...","Value":"..."}. Intermediate files
and reduce output share this format, and the output merger decodes it
byte-for-byte, so encoding mirrors the compact, HTML-safe JSON the map side
produces.
"""

import re
import json
from typing import NamedTuple

from reduce_worker.errors import DecodeError

KEY_FIELD = 'Key'
VALUE_FIELD = 'Value'

# Characters the map side escapes even though JSON allows them raw
_SAFE_ESCAPES = {
    '<': '\\u003c',
    '>': '\\u003e',
    '&': '\\u0026',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}
_SAFE_ESCAPE_RE = re.compile('[<>&\u2028\u2029]')
_SURROGATE_RE = re.compile('[\ud800-\udfff]')


class KeyValue(NamedTuple):
    """A single (key, value) record"""
    key: str
    value: str


def _reject_constant(name):
    raise ValueError(f"invalid literal {name}")


def encode(key: str, value: str) -> str:
    """
    Encode one record as a single JSON line (without the trailing newline)

    Args:
        key: Record key
        value: Record value

    Returns:
        The encoded record
    """
    key = _SURROGATE_RE.sub('\ufffd', key)
    value = _SURROGATE_RE.sub('\ufffd', value)
    data = json.dumps({KEY_FIELD: key, VALUE_FIELD: value},
                      ensure_ascii=False, separators=(',', ':'))
    return _SAFE_ESCAPE_RE.sub(lambda m: _SAFE_ESCAPES[m.group(0)], data)


def decode(line) -> KeyValue:
    """
    Decode one line into a KeyValue

    Field names match case-insensitively, missing or null fields decode as
    the empty string and unknown fields are ignored.

    Args:
        line: The line, as str or bytes, with or without its line ending

    Returns:
        The decoded KeyValue

    Raises:
        DecodeError: If the line is not a JSON object with string fields
    """
    if isinstance(line, (bytes, bytearray)):
        line = line.decode('utf-8', errors='replace')

    try:
        record = json.loads(line, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"invalid JSON: {e}") from e

    if not isinstance(record, dict):
        raise DecodeError(f"expected a JSON object, got {type(record).__name__}")

    fields = {KEY_FIELD: '', VALUE_FIELD: ''}
    for name, value in record.items():
        for field in (KEY_FIELD, VALUE_FIELD):
            if name == field or name.lower() == field.lower():
                if value is None:
                    continue
                if not isinstance(value, str):
                    raise DecodeError(
                        f"field {name!r} must be a string, got {type(value).__name__}")
                fields[field] = _SURROGATE_RE.sub('\ufffd', value)

    return KeyValue(fields[KEY_FIELD], fields[VALUE_FIELD])
