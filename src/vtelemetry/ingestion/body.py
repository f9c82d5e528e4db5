"""Request body decoding.

ESP32 firmware is inconsistent about what it sends: proper
``application/json``, JSON labelled as ``text/plain``, URL-encoded forms,
or no ``Content-Type`` at all. The transport layer wraps whatever arrived in
one of the :data:`RawBody` variants and :func:`decode_body` turns it into a
plain mapping plus a flag saying whether a usable object was received.

Decoding never raises: failures are reported through :class:`DecodeResult`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

from vtelemetry._constants import FORM_CONTENT_TYPE, JSON_CONTENT_TYPES, TEXT_CONTENT_TYPE
from vtelemetry.exceptions import PayloadDecodeError

if TYPE_CHECKING:
    from aiohttp import web

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextBody:
    """Body already decoded to text by the transport."""

    text: str


@dataclass(frozen=True)
class BytesBody:
    """Undecoded body buffer."""

    data: bytes


@dataclass(frozen=True)
class StructuredBody:
    """Body the transport already parsed into a mapping (e.g. a form)."""

    mapping: Mapping[str, Any]


RawBody = TextBody | BytesBody | StructuredBody


class BodyKind(StrEnum):
    """How the payload was obtained."""

    JSON = "json"
    TEXT_JSON = "text_json"
    FORM = "form"
    OBJECT = "object"
    RAW_TEXT = "raw_text"
    EMPTY = "empty"
    INVALID_JSON = "invalid_json"


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one request body."""

    payload: dict[str, Any] = field(default_factory=dict)
    structured: bool = False
    kind: BodyKind = BodyKind.EMPTY
    error: str | None = None
    raw_text: str = ""
    content_type: str | None = None
    content_length: int | None = None

    def raise_for_error(self) -> None:
        """Raise :class:`PayloadDecodeError` unless a payload was obtained."""
        if self.structured:
            return
        raise PayloadDecodeError(
            self.error or "No valid JSON data received",
            kind=self.kind,
            content_type=self.content_type,
        )


def media_type(content_type: str | None) -> str | None:
    """Return the bare, lower-cased media type of a ``Content-Type`` header."""
    if content_type is None:
        return None
    value = content_type.split(";", 1)[0].strip().lower()
    return value or None


def _is_json_type(mime: str | None) -> bool:
    if mime is None:
        return False
    return mime in JSON_CONTENT_TYPES or mime.endswith("+json")


def _parse_json_object(text: str) -> tuple[dict[str, Any] | None, str | None]:
    """Parse *text* as a JSON object; return ``(mapping, error)``."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        return None, f"Invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}"
    except (ValueError, RecursionError) as exc:
        # Oversized integer literals and excessive nesting.
        return None, f"Invalid JSON: {exc}"
    if not isinstance(parsed, dict):
        return None, f"Expected a JSON object, got {type(parsed).__name__}"
    return parsed, None


def _parse_form(text: str) -> dict[str, Any]:
    # Repeated keys: last value wins.
    return dict(parse_qsl(text, keep_blank_values=True))


def _mapping_result(payload: dict[str, Any], kind: BodyKind, text: str, meta: dict[str, Any]) -> DecodeResult:
    if not payload:
        return DecodeResult(kind=BodyKind.EMPTY, error="Payload object is empty", raw_text=text, **meta)
    return DecodeResult(payload=payload, structured=True, kind=kind, raw_text=text, **meta)


def _decode_text(text: str, mime: str | None, meta: dict[str, Any]) -> DecodeResult:
    stripped = text.strip()
    if not stripped:
        return DecodeResult(kind=BodyKind.EMPTY, error="Request body is empty", **meta)

    if _is_json_type(mime):
        payload, error = _parse_json_object(stripped)
        if payload is None:
            _logger.debug("JSON body failed to parse: %s", error)
            return DecodeResult(kind=BodyKind.INVALID_JSON, error=error, raw_text=text, **meta)
        return _mapping_result(payload, BodyKind.JSON, text, meta)

    if mime == FORM_CONTENT_TYPE:
        return _mapping_result(_parse_form(stripped), BodyKind.FORM, text, meta)

    # text/plain, missing or unrecognised type: accept JSON that was mislabelled.
    if stripped.startswith("{"):
        payload, error = _parse_json_object(stripped)
        if payload is not None:
            _logger.debug("Parsed JSON from %s body", mime or "untyped")
            return _mapping_result(payload, BodyKind.TEXT_JSON, text, meta)
        _logger.debug("Body looked like JSON but failed to parse: %s", error)
        return DecodeResult(kind=BodyKind.RAW_TEXT, error=error, raw_text=text, **meta)

    label = mime or "untyped"
    if mime not in (None, TEXT_CONTENT_TYPE):
        _logger.debug("Unrecognised content type %s treated as raw text", mime)
    return DecodeResult(
        kind=BodyKind.RAW_TEXT,
        error=f"Body is not a JSON object ({label})",
        raw_text=text,
        **meta,
    )


def decode_body(
    body: RawBody,
    content_type: str | None = None,
    content_length: int | None = None,
) -> DecodeResult:
    """Normalize a request body into a key/value payload.

    Parameters
    ----------
    body : RawBody
        The body as the transport handed it over.
    content_type : str or None
        Declared ``Content-Type`` header. May be missing or wrong.
    content_length : int or None
        Declared ``Content-Length`` header, carried through for logging.

    Returns
    -------
    DecodeResult
        ``structured`` is ``True`` only when a non-empty mapping was obtained.
    """
    mime = media_type(content_type)
    meta: dict[str, Any] = {"content_type": content_type, "content_length": content_length}

    match body:
        case StructuredBody(mapping=mapping):
            return _mapping_result(dict(mapping), BodyKind.OBJECT, "", meta)
        case BytesBody(data=data):
            return _decode_text(data.decode("utf-8", errors="replace"), mime, meta)
        case TextBody(text=text):
            return _decode_text(text, mime, meta)
    raise TypeError(f"Unsupported body type: {type(body).__name__}")


async def decode_request(request: web.Request) -> DecodeResult:
    """Buffer the full request body and decode it."""
    data = await request.read()
    return decode_body(
        BytesBody(data),
        content_type=request.headers.get("Content-Type"),
        content_length=request.content_length,
    )
