"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json


def extract_json(text: str) -> dict | list:
    """Extract JSON from LLM response, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. Find first '{' to last '}' and parse
    4. Find first '[' to last ']' and parse (JSON array)

    Truncated output is not repaired: a half-written report must fail
    validation rather than come back as a partial result.
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected text from LLM, got {type(text).__name__}")
    text = text.strip()

    # 1) Direct parse
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # 2) Strip fenced code block markers
    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
        result = _extract_braces(stripped)
        if result is not None:
            return result

    # 3) First '{' to last '}' on original
    result = _extract_braces(text)
    if result is not None:
        return result

    # 4) First '[' to last ']' (JSON array)
    result = _extract_brackets(text)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text ({len(text)} chars)")


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers, including prose around a fenced block."""
    start = text.find("```")
    if start == -1:
        return text
    body = text[start + 3 :]
    # Drop the language tag line (```json)
    newline = body.find("\n")
    if newline != -1 and body[:newline].strip().isalpha():
        body = body[newline + 1 :]
    end = body.rfind("```")
    if end != -1:
        body = body[:end]
    return body.strip()


def _extract_braces(text: str) -> dict | None:
    """Try to extract JSON object from first '{' to last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None


def _extract_brackets(text: str) -> list | None:
    """Try to extract JSON array from first '[' to last ']'."""
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
