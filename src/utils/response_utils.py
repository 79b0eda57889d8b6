import json
import re
from typing import Any, Dict, Optional

from ..exceptions import ProviderError, TranslationFormatError

TRANSLATION_KEYS = ("title", "summary", "content")
CODE_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```", re.DOTALL)


def _first_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def extract_answer_text(payload: Any, provider: Optional[str] = None) -> str:
    """
    Pull the answer text out of a provider response payload.

    Tolerates Gemini-style {candidates:[{content:{parts:[{text}]}}]},
    OpenAI-chat-style {choices:[{message:{content}}]} and Anthropic-style
    {content:[{type:"text", text}]}. Raises ProviderError when none of the
    shapes yields non-empty text.
    """
    if not isinstance(payload, dict):
        raise ProviderError("Provider returned a non-object payload", provider)

    for candidate in payload.get("candidates") or []:
        parts = ((candidate or {}).get("content") or {}).get("parts") or []
        texts = [part.get("text") for part in parts if isinstance(part, dict) and _first_text(part.get("text"))]
        if texts:
            return "".join(texts).strip()

    for choice in payload.get("choices") or []:
        message = (choice or {}).get("message") or {}
        text = _first_text(message.get("content"))
        if text:
            return text.strip()

    content = payload.get("content")
    if isinstance(content, list):
        texts = [block.get("text") for block in content if isinstance(block, dict) and _first_text(block.get("text"))]
        if texts:
            return "".join(texts).strip()

    raise ProviderError("Provider response is missing the answer text", provider)


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse the first JSON object in a model reply, ignoring code fences and chatter."""
    if not text or not text.strip():
        raise TranslationFormatError("Empty translation response")

    candidates = [match.group(1) for match in CODE_FENCE.finditer(text)]
    candidates.append(text)

    for candidate in candidates:
        candidate = candidate.strip()
        try:
            parsed = json.loads(candidate)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        parsed = _find_balanced_object(candidate)
        if parsed is not None:
            return parsed

    raise TranslationFormatError("Translation response contains no JSON object")


def _find_balanced_object(text: str) -> Optional[Dict[str, Any]]:
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(text[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue

            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    try:
                        parsed = json.loads(text[start:i + 1])
                    except json.JSONDecodeError:
                        break
                    if isinstance(parsed, dict):
                        return parsed
                    break
        start = text.find("{", start + 1)
    return None


def validate_translation_payload(payload: Any) -> Dict[str, str]:
    if not isinstance(payload, dict):
        raise TranslationFormatError("Translation payload is not an object")

    missing = [key for key in TRANSLATION_KEYS if key not in payload or payload[key] is None]
    if missing:
        raise TranslationFormatError(f"Translation payload is missing: {', '.join(missing)}")

    non_text = [key for key in TRANSLATION_KEYS if not isinstance(payload[key], str)]
    if non_text:
        raise TranslationFormatError(f"Translation fields must be strings: {', '.join(non_text)}")

    return {key: payload[key] for key in TRANSLATION_KEYS}
