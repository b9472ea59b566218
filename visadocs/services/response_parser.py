"""
Response Parser - pull one JSON object out of model output.

Models are asked for bare JSON but sometimes wrap it in ```json fences or
surround it with prose. parse_json_response() handles both:

1. strip a surrounding code fence
2. try the whole text as JSON
3. otherwise scan for the first balanced top-level {...} span (quotes and
   escapes inside strings are respected) and parse that

The result is tagged: ParseResult(ok=True, data=dict) or
ParseResult(ok=False, error=reason). Nothing here ever invents data.
"""

import json
import re
from typing import NamedTuple, Optional

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)


class ParseResult(NamedTuple):
    ok: bool
    data: Optional[dict] = None
    error: Optional[str] = None


def strip_code_fence(text: str) -> str:
    text = text.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def find_json_object(text: str) -> Optional[str]:
    """Return the first balanced top-level ``{...}`` span, or None."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
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
                    return text[start:i + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def _as_object(value) -> ParseResult:
    if not isinstance(value, dict):
        return ParseResult(ok=False, error=f"Expected a JSON object, got {type(value).__name__}")
    return ParseResult(ok=True, data=value)


def parse_json_response(text: Optional[str]) -> ParseResult:
    if not text or not text.strip():
        return ParseResult(ok=False, error="Empty response")

    cleaned = strip_code_fence(text)

    try:
        return _as_object(json.loads(cleaned))
    except json.JSONDecodeError:
        pass

    span = find_json_object(cleaned)
    if span is None:
        return ParseResult(ok=False, error="No JSON object found in response")

    try:
        return _as_object(json.loads(span))
    except json.JSONDecodeError as e:
        return ParseResult(ok=False, error=f"Invalid JSON: {e.msg} at position {e.pos}")
