from __future__ import annotations

import json

import pytest

from vtelemetry.exceptions import PayloadDecodeError
from vtelemetry.ingestion.body import (
    BodyKind,
    BytesBody,
    StructuredBody,
    TextBody,
    decode_body,
    media_type,
)

_OBD = {
    "deviceID": "ESP32_001",
    "dataSource": "veepeak_obd",
    "vin": "1HGCM82633A004352",
    "rpm": 850,
    "speed": 0,
    "batteryVoltage": 12.6,
    "nested": {"pids": ["0C", "0D"]},
}


def test_json_body_with_json_content_type_reproduces_payload() -> None:
    result = decode_body(TextBody(json.dumps(_OBD)), content_type="application/json")

    assert result.structured is True
    assert result.kind == BodyKind.JSON
    assert result.payload == _OBD
    assert result.error is None


def test_content_type_parameters_and_case_are_ignored() -> None:
    result = decode_body(BytesBody(json.dumps(_OBD).encode()), content_type="Application/JSON; charset=UTF-8")

    assert result.structured is True
    assert result.payload == _OBD


def test_text_plain_json_decodes_like_json_content_type() -> None:
    body = "  " + json.dumps(_OBD) + "\n"

    as_text = decode_body(TextBody(body), content_type="text/plain")
    as_json = decode_body(TextBody(body), content_type="application/json")

    assert as_text.structured is True
    assert as_text.kind == BodyKind.TEXT_JSON
    assert as_text.payload == as_json.payload


def test_missing_content_type_still_accepts_json_object() -> None:
    result = decode_body(BytesBody(b'{"status":"connected","device":"ESP32"}'))

    assert result.structured is True
    assert result.payload == {"status": "connected", "device": "ESP32"}


def test_invalid_json_with_json_content_type_is_reported_not_raised() -> None:
    result = decode_body(TextBody('{"status": "connected",'), content_type="application/json")

    assert result.structured is False
    assert result.kind == BodyKind.INVALID_JSON
    assert result.payload == {}
    assert result.error is not None and "Invalid JSON" in result.error


def test_broken_json_in_text_plain_falls_through_to_raw_text() -> None:
    result = decode_body(TextBody("{not json"), content_type="text/plain")

    assert result.structured is False
    assert result.kind == BodyKind.RAW_TEXT
    assert result.raw_text == "{not json"


def test_plain_text_is_not_structured() -> None:
    result = decode_body(TextBody("hello from esp32"), content_type="text/plain")

    assert result.structured is False
    assert result.kind == BodyKind.RAW_TEXT
    assert result.payload == {}


@pytest.mark.parametrize("body", [TextBody(""), TextBody("   \n"), BytesBody(b"")])
def test_empty_body_is_not_structured(body) -> None:
    result = decode_body(body, content_type="application/json", content_length=0)

    assert result.structured is False
    assert result.kind == BodyKind.EMPTY
    assert result.content_length == 0


def test_empty_json_object_is_not_structured() -> None:
    result = decode_body(TextBody("{}"), content_type="application/json")

    assert result.structured is False
    assert result.kind == BodyKind.EMPTY


def test_json_array_is_rejected() -> None:
    result = decode_body(TextBody("[1, 2, 3]"), content_type="application/json")

    assert result.structured is False
    assert result.error == "Expected a JSON object, got list"


def test_form_encoded_body_becomes_mapping() -> None:
    result = decode_body(
        BytesBody(b"status=connected&device=ESP32&rssi=-61"),
        content_type="application/x-www-form-urlencoded",
    )

    assert result.structured is True
    assert result.kind == BodyKind.FORM
    assert result.payload == {"status": "connected", "device": "ESP32", "rssi": "-61"}


def test_structured_body_passes_through() -> None:
    result = decode_body(StructuredBody({"status": "connected"}))

    assert result.structured is True
    assert result.kind == BodyKind.OBJECT
    assert result.payload == {"status": "connected"}


def test_invalid_utf8_bytes_do_not_raise() -> None:
    result = decode_body(BytesBody(b'{"device": "\xff\xfe"}'), content_type="application/json")

    assert result.structured is True
    assert result.payload["device"] == "��"


def test_raise_for_error() -> None:
    ok = decode_body(StructuredBody({"a": 1}))
    ok.raise_for_error()

    failed = decode_body(TextBody(""), content_type="text/plain")
    with pytest.raises(PayloadDecodeError) as excinfo:
        failed.raise_for_error()
    assert excinfo.value.kind == BodyKind.EMPTY


def test_media_type() -> None:
    assert media_type(None) is None
    assert media_type("") is None
    assert media_type("text/plain; charset=utf-8") == "text/plain"


def test_oversized_integer_literal_is_reported_not_raised() -> None:
    body = '{"deviceID":"ESP32","mileage":' + "9" * 5000 + "}"

    result = decode_body(TextBody(body), content_type="application/json")

    assert result.structured is False
    assert result.kind == BodyKind.INVALID_JSON
    assert result.error is not None and result.error.startswith("Invalid JSON")


def test_deeply_nested_json_is_reported_not_raised() -> None:
    body = "[" * 100_000 + "]" * 100_000

    result = decode_body(TextBody(body), content_type="application/json")

    assert result.structured is False
    assert result.kind == BodyKind.INVALID_JSON


def test_deeply_nested_json_in_text_plain_falls_through_to_raw_text() -> None:
    body = '{"a":' + "[" * 100_000 + "]" * 100_000 + "}"

    result = decode_body(TextBody(body), content_type="text/plain")

    assert result.structured is False
    assert result.kind == BodyKind.RAW_TEXT
