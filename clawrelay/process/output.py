"""Decode the agent CLI's JSON result, tolerating log lines around it."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

import orjson

from clawrelay.errors import ProtocolViolationError


@dataclass(frozen=True, slots=True)
class AgentResult:
    payload_texts: tuple[str, ...] = ()

    @property
    def first_non_empty_text(self) -> str | None:
        for text in self.payload_texts:
            stripped = text.strip()
            if stripped:
                return stripped
        return None


def _matching_brace_end(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        ch = text[index]

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index
            if depth < 0:
                return None
    return None


def extract_json_object(data: bytes) -> bytes | None:
    """Return the first balanced `{...}` span that parses as a JSON object."""
    try:
        raw = data.decode("utf-8")
    except UnicodeDecodeError:
        return None

    cursor = raw.find("{")
    while cursor != -1:
        end = _matching_brace_end(raw, cursor)
        if end is not None:
            span = raw[cursor : end + 1]
            try:
                parsed = orjson.loads(span)
            except orjson.JSONDecodeError:
                parsed = None
            if isinstance(parsed, dict):
                return span.encode("utf-8")
        cursor = raw.find("{", cursor + 1)
    return None


def _agent_result_from(doc: dict[str, Any]) -> AgentResult:
    result = doc.get("result")
    if not isinstance(result, dict):
        return AgentResult()
    payloads = result.get("payloads")
    if not isinstance(payloads, list):
        return AgentResult()
    texts = tuple(
        p["text"] for p in payloads if isinstance(p, dict) and isinstance(p.get("text"), str)
    )
    return AgentResult(payload_texts=texts)


def decode_agent_result(data: bytes) -> AgentResult:
    try:
        doc = orjson.loads(data)
    except orjson.JSONDecodeError:
        doc = None
    if isinstance(doc, dict):
        return _agent_result_from(doc)

    span = extract_json_object(data)
    if span is None:
        raise ProtocolViolationError("agent CLI returned non-JSON output")
    return _agent_result_from(orjson.loads(span))


__all__ = ["AgentResult", "decode_agent_result", "extract_json_object"]
