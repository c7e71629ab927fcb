"""Request body parsing/validation for `POST /relay` and `POST /rates/record`."""

from __future__ import annotations

from typing import Any

import orjson

from clawrelay.state.rates import RateRecord
from clawrelay.state.relay import AttachmentRef

KEY_TEXT = "text"
KEY_ATTACHMENTS = "attachments"


def _parse_attachment(item: Any, index: int) -> AttachmentRef:
    if not isinstance(item, dict):
        raise ValueError(f"attachment {index} must be an object")

    path = item.get("path")
    if not isinstance(path, str) or not path.strip():
        raise ValueError(f"attachment {index} missing non-empty 'path'")

    file_name = item.get("file_name")
    if not isinstance(file_name, str) or not file_name.strip():
        file_name = path.rstrip("/").rsplit("/", 1)[-1]

    type_label = item.get("type_label")
    if not isinstance(type_label, str) or not type_label.strip():
        type_label = "file"

    size_bytes = item.get("size_bytes")
    if size_bytes is not None and (isinstance(size_bytes, bool) or not isinstance(size_bytes, int)):
        raise ValueError(f"attachment {index} 'size_bytes' must be an integer")

    return AttachmentRef(
        file_name=file_name.strip(),
        path=path.strip(),
        type_label=type_label.strip(),
        size_bytes=size_bytes,
    )


def parse_relay_body(raw: bytes | str) -> tuple[str, tuple[AttachmentRef, ...]]:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("body must be a JSON object")

    text = msg.get(KEY_TEXT)
    if not isinstance(text, str) or not text.strip():
        raise ValueError("body missing non-empty 'text'")

    attachments = msg.get(KEY_ATTACHMENTS, [])
    if attachments is None:
        attachments = []
    if not isinstance(attachments, list):
        raise ValueError("body 'attachments' must be a list")

    return text, tuple(_parse_attachment(item, i) for i, item in enumerate(attachments))


def _optional_number(msg: dict[str, Any], key: str) -> float | None:
    value = msg.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"body '{key}' must be a number")
    return float(value)


def parse_rate_record(raw: bytes | str) -> RateRecord:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("body must be a JSON object")

    status_code = msg.get("status_code")
    if isinstance(status_code, bool) or not isinstance(status_code, int):
        raise ValueError("body missing integer 'status_code'")

    endpoint = msg.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValueError("body missing non-empty 'endpoint'")

    headers = msg.get("headers") or {}
    if not isinstance(headers, dict):
        raise ValueError("body 'headers' must be an object")

    tts_characters = _optional_number(msg, "tts_characters")
    tts_model = msg.get("tts_model") or ""
    if not isinstance(tts_model, str):
        raise ValueError("body 'tts_model' must be a string")

    return RateRecord(
        status_code=status_code,
        endpoint=endpoint.strip(),
        headers={str(k): str(v) for k, v in headers.items()},
        estimated_cost_usd=_optional_number(msg, "estimated_cost_usd"),
        stt_duration_s=_optional_number(msg, "stt_duration_s"),
        tts_characters=int(tts_characters) if tts_characters is not None else None,
        tts_model=tts_model,
    )


__all__ = ["parse_rate_record", "parse_relay_body"]
