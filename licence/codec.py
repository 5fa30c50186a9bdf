"""Separator-safe payload encoding for licence keys.

Payloads travel as compact JSON, base64 encoded with the URL-safe alphabet
(``-`` and ``_`` in place of ``+`` and ``/``) and no ``=`` padding. The
result can contain ``-``, so key parsers must re-join trailing segments.
"""

import base64
import binascii
import json
from typing import Any, Mapping, Union

from licence.errors import DecodeError
from licence.payload import LicencePayload

_TO_STANDARD = str.maketrans("-_", "+/")
_TO_SAFE = str.maketrans("+/", "-_")


def encode(payload: Union[LicencePayload, Mapping[str, Any]]) -> str:
    """Encode a payload into a separator-safe text blob."""
    if isinstance(payload, LicencePayload):
        payload = payload.to_dict()
    text = json.dumps(
        dict(payload), separators=(",", ":"), ensure_ascii=False, default=str
    )
    blob = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return blob.translate(_TO_SAFE).rstrip("=")


def decode(blob: str) -> dict:
    """Decode a text blob produced by :func:`encode`.

    Raises:
        DecodeError: If the blob is not base64, not UTF-8, not JSON, or not
            a JSON object.
    """
    if not isinstance(blob, str):
        raise DecodeError(f"Encoded payload must be a string, got {type(blob).__name__}")

    standard = blob.translate(_TO_STANDARD)
    standard += "=" * (-len(standard) % 4)
    try:
        raw = base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Payload is not valid base64: {exc}") from exc

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("Payload is not valid UTF-8") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Payload is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise DecodeError(
            f"Payload must be a JSON object, got {type(data).__name__}"
        )
    return data


class KeyCodec:
    """Object wrapper over :func:`encode` and :func:`decode`."""

    def encode(self, payload: Union[LicencePayload, Mapping[str, Any]]) -> str:
        return encode(payload)

    def decode(self, blob: str) -> dict:
        return decode(blob)
