"""Compact token decomposition without signature checks."""

import base64
import binascii
import json
import re
from typing import Any

from apple_auth.core.errors import MalformedTokenError
from apple_auth.crypto.types import ParsedToken

_SEGMENTS = 3
_B64URL = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def b64url_decode(segment: str) -> bytes:
    """Decode base64url, tolerating missing padding.

    Characters outside the URL-safe alphabet are an error, not skipped.
    """
    if _B64URL.fullmatch(segment) is None:
        raise binascii.Error("invalid base64url character")
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _decode_json_segment(segment: str, name: str) -> dict[str, Any]:
    try:
        value = json.loads(b64url_decode(segment).decode("utf-8"))
    except ValueError as exc:
        raise MalformedTokenError(f"token {name} is not base64url JSON") from exc
    if not isinstance(value, dict):
        raise MalformedTokenError(f"token {name} is not a JSON object")
    return value


def decompose(token: str) -> ParsedToken:
    """Split a compact token into header, payload, and signature.

    Splits at the first two dots only; anything after the second dot,
    further dots included, is kept verbatim as the signature.
    """
    parts = token.split(".", _SEGMENTS - 1)
    if len(parts) < _SEGMENTS:
        raise MalformedTokenError("token must have three dot-separated segments")
    header = _decode_json_segment(parts[0], "header")
    payload = _decode_json_segment(parts[1], "payload")
    return ParsedToken(header=header, payload=payload, signature=parts[2])
