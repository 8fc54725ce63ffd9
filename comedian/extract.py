"""Plain-text extraction from Responses API payloads.

The service has shipped several envelope shapes over time:

    {"output_text": "..."}
    {"output": [{"content": [{"text": "..."}, ...]}, ...]}
    {"data": [{"content": [{"text": "..."}]}]}

Payloads may be plain dicts or SDK objects exposing the same fields as
attributes. Nothing is assumed about their structure.
"""

from collections.abc import Mapping
from typing import Any


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _first(seq: Any) -> Any:
    if isinstance(seq, (list, tuple)) and seq:
        return seq[0]
    return None


def _join_output_blocks(blocks: Any) -> str:
    if not isinstance(blocks, (list, tuple)):
        return ""
    joined = []
    for block in blocks:
        parts = _field(block, "content") or []
        if not isinstance(parts, (list, tuple)):
            parts = []
        texts = []
        for part in parts:
            text = _field(part, "text")
            texts.append(text if isinstance(text, str) else "")
        joined.append("".join(texts))
    return " ".join(joined).strip()


def extract_text(response: Any) -> str:
    """Return the best-effort plain-text answer in *response*, or ``""``."""
    if response is None:
        return ""

    output_text = _field(response, "output_text")
    if isinstance(output_text, str) and output_text.strip():
        return output_text.strip()

    combined = _join_output_blocks(_field(response, "output"))
    if combined:
        return combined

    message_text = _field(_first(_field(_first(_field(response, "data")), "content")), "text")
    if isinstance(message_text, str) and message_text.strip():
        return message_text.strip()

    return ""
