from __future__ import annotations

import json
import re
from typing import Any, Optional

import yaml


# --------------------------
# Helpers
# --------------------------

def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        enc = encoding or 'utf-8'
        try:
            return data.decode(enc, errors='replace')
        except LookupError:
            # Unknown charset label
            return data.decode('utf-8', errors='replace')
    if isinstance(data, str):
        return data
    return str(data)


def _encoding_from_content_type(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    m = re.search(r'charset\s*=\s*([^\s;]+)', content_type, re.IGNORECASE)
    if m:
        return m.group(1).strip('"').strip("'")
    return None


def detect_format(content_type: Optional[str] = None,
                  locator: Optional[str] = None,
                  data_hint: Optional[str] = None) -> Optional[str]:
    """
    Returns 'json' or 'yaml'.
    Uses Content-Type first, then the locator's extension, then sniffs the data.
    """
    ct = (content_type or "").lower()
    if 'json' in ct:
        return 'json'
    if 'yaml' in ct:
        return 'yaml'

    if locator:
        lowered = locator.lower().split('?', 1)[0]
        if lowered.endswith('.json'):
            return 'json'
        if lowered.endswith(('.yaml', '.yml')):
            return 'yaml'

    if data_hint is not None:
        s = data_hint.lstrip()
        if s.startswith('{') or s.startswith('['):
            return 'json'
    return None


# --------------------------
# Public API
# --------------------------

def decode_text(data: bytes | bytearray | str, *, content_type: Optional[str] = None) -> str:
    """Decode raw resource bytes using the charset announced in content_type (UTF-8 otherwise)."""
    return _norm_text(data, encoding=_encoding_from_content_type(content_type))


def deserialize(data: bytes | bytearray | str,
                *,
                content_type: Optional[str] = None,
                locator: Optional[str] = None,
                fmt: Optional[str] = None) -> Any:
    """
    Convert wire data (bytes/string) to native Python structures.
    Supported fmt: 'json', 'yaml'. If fmt is None, uses content_type, the
    locator's extension, then sniffing. Malformed input raises ValueError.
    """
    text = decode_text(data, content_type=content_type)
    f = fmt or detect_format(content_type, locator, text)
    if f == 'json':
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"malformed JSON: {e}") from e
    if f == 'yaml':
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"malformed YAML: {e}") from e
    raise ValueError(f"Unsupported format for {locator or 'resource'}: {f!r}")


__all__ = [
    "decode_text",
    "deserialize",
    "detect_format",
]
