"""Tolerant JSON parsing for model output.

Models are asked for strict JSON but under token limits they stop
mid-value. The repair pass scans the text once, tracking open containers
and strings, keeps the longest structurally valid prefix (or closes an
unterminated string value in place) and appends the missing closers.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from itemlister.logging.logger import Log
from itemlister.parsing.exceptions import MalformedOutputError

_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_DANGLING_UNICODE_ESCAPE = re.compile(r"\\u[0-9a-fA-F]{0,3}$")
_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class ParseOutcome:
    """Parsed object plus how much help it needed."""

    value: dict[str, Any]
    repaired: bool = False


def strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    return cleaned


def _load_object(text: str) -> dict[str, Any]:
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise MalformedOutputError("JSON response must be an object")
    return parsed


def _close_partial_string(raw_content: str) -> str:
    """Make a cut-off string body safe to close, dropping the cut-off word."""
    content = _DANGLING_UNICODE_ESCAPE.sub("", raw_content)
    trailing = len(content) - len(content.rstrip("\\"))
    if trailing % 2:
        content = content[:-1]
    if re.search(r"\s", content):
        content = re.split(r"\s+(?=\S*$)", content)[0]
    return content.rstrip()


def repair_truncated_json(text: str) -> str | None:
    """Return a structurally closed version of truncated JSON, or None.

    An unterminated string value is closed where it stopped; an
    unterminated key, a dangling `:` or `,`, or a cut-off literal is
    dropped back to the last complete value.
    """
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    start = min(starts)

    stack: list[str] = []
    in_string = False
    escape = False
    string_start = -1
    string_is_key = False
    expect_key = False
    safe_end: int | None = None
    safe_stack: list[str] = []

    def mark_safe(position: int) -> None:
        nonlocal safe_end, safe_stack
        safe_end = position
        safe_stack = list(stack)

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
                if not string_is_key:
                    mark_safe(i + 1)
            continue
        if ch == '"':
            in_string = True
            string_start = i
            string_is_key = bool(stack) and stack[-1] == "{" and expect_key
        elif ch in "{[":
            stack.append(ch)
            expect_key = ch == "{"
            mark_safe(i + 1)
        elif ch in "}]":
            if not stack:
                break
            stack.pop()
            mark_safe(i + 1)
            if not stack:
                return text[start : i + 1]
            expect_key = False
        elif ch == ":":
            expect_key = False
        elif ch == ",":
            expect_key = bool(stack) and stack[-1] == "{"
        elif not ch.isspace():
            following = text[i + 1] if i + 1 < len(text) else ""
            if following and (following in ",}]" or following.isspace()):
                mark_safe(i + 1)

    if in_string and not string_is_key:
        body = _close_partial_string(text[string_start + 1 :])
        closers = "".join(_CLOSERS[c] for c in reversed(stack))
        return f'{text[start:string_start]}"{body}"{closers}'

    if safe_end is None:
        return None
    closers = "".join(_CLOSERS[c] for c in reversed(safe_stack))
    return text[start:safe_end] + closers


def parse_json_object(raw: str) -> ParseOutcome:
    """Strict parse first, then trailing-comma cleanup, then truncation repair.

    Raises:
        MalformedOutputError: when nothing parses to a JSON object.
    """
    cleaned = strip_code_fences(raw or "")
    if not cleaned:
        raise MalformedOutputError("Model returned an empty response")

    try:
        return ParseOutcome(_load_object(cleaned))
    except json.JSONDecodeError as exc:
        Log.warning(f"Strict JSON parse failed: {exc.msg} at char {exc.pos}")
        first_error = exc

    candidates = [_TRAILING_COMMA.sub(r"\1", cleaned)]
    repaired = repair_truncated_json(cleaned)
    if repaired is not None:
        candidates.append(repaired)
        candidates.append(_TRAILING_COMMA.sub(r"\1", repaired))

    for candidate in candidates:
        try:
            value = _load_object(candidate)
        except json.JSONDecodeError:
            continue
        Log.info(f"Repaired malformed model JSON ({len(cleaned)} -> {len(candidate)} chars)")
        Log.debug(f"Repaired JSON:\n{candidate}")
        return ParseOutcome(value, repaired=True)

    raise MalformedOutputError(f"Invalid JSON response: {first_error}") from first_error


def extract_string_field(raw: str, field: str) -> str | None:
    """Regex-extract a complete `"field": "..."` string value from broken JSON."""
    match = re.search(rf'"{re.escape(field)}"\s*:\s*"((?:[^"\\]|\\.)*)"', raw or "")
    if match is None:
        return None
    try:
        return json.loads(f'"{match.group(1)}"')
    except json.JSONDecodeError:
        return match.group(1)
