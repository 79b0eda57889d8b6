import re
from typing import List

SENTENCE_DELIMITERS = re.compile(r'[.!?]+')
NON_ALPHANUMERIC = re.compile(r'[^a-z0-9\s]')


def clean_text(text: str) -> str:
    return ' '.join(text.split())


def normalize_for_comparison(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    lowered = NON_ALPHANUMERIC.sub('', text.lower())
    return clean_text(lowered)


def split_sentences(text: str, min_length: int = 10) -> List[str]:
    """Collapse whitespace, split on .!? and keep sentences longer than min_length."""
    if not text:
        return []
    sentences = (part.strip() for part in SENTENCE_DELIMITERS.split(clean_text(text)))
    return [sentence for sentence in sentences if len(sentence) > min_length]


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."
