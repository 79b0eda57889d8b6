"""
Greeting detection for the article Q&A flow

Conversational openers ("hi", "good morning") are answered with a canned
reply instead of a paid provider call. The check is a documented regex
heuristic: a message counts as a greeting only if the whole message
matches one of the patterns and carries no question mark.
"""

import re
from typing import Iterable, List, Optional

import structlog

from ..config import DEFAULT_GREETING_PATTERNS

logger = structlog.get_logger(__name__)

DEFAULT_MAX_WORDS = 6
DEFAULT_GREETING_RESPONSE = "Hello! How can I help you with this article?"


class GreetingDetector:
    """Classifies a question as conversational noise or a real question"""

    def __init__(
        self,
        patterns: Optional[Iterable[str]] = None,
        max_words: int = DEFAULT_MAX_WORDS,
        response: str = DEFAULT_GREETING_RESPONSE,
    ):
        self.patterns: List[re.Pattern] = [
            re.compile(pattern, re.IGNORECASE)
            for pattern in (patterns if patterns is not None else DEFAULT_GREETING_PATTERNS)
        ]
        self.max_words = max_words
        self.response = response

    @classmethod
    def from_settings(cls, settings) -> "GreetingDetector":
        return cls(
            patterns=settings.greeting_patterns,
            max_words=settings.greeting_max_words,
            response=settings.greeting_response,
        )

    def is_greeting(self, text: Optional[str]) -> bool:
        if not text or not text.strip():
            return False

        message = text.strip()
        if "?" in message:
            return False
        if self.max_words and len(message.split()) > self.max_words:
            return False

        return any(pattern.search(message) for pattern in self.patterns)
