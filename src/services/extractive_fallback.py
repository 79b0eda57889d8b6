"""
Network-free answer extraction

Scores article sentences against the question's keywords and returns the
best ones. Always produces a non-empty answer.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from ..utils.string_utils import split_sentences, truncate_text

MAX_ANSWER_SENTENCES = 3
LEADING_SENTENCES = 2
SUPPORTING_MAX_LENGTH = 200
KEYWORD_MATCH_SCORE = 3
SHORT_SENTENCE_LENGTH = 30
SHORT_SENTENCE_PENALTY = 2
NO_CONTENT_ANSWER = "I couldn't find enough information in this article to answer that question."

STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'is', 'are', 'was', 'were', 'be', 'been', 'being',
    'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would', 'could',
    'should', 'may', 'might', 'must', 'can', 'what', 'when', 'where', 'why',
    'how', 'who', 'which', 'this', 'that', 'these', 'those', 'it', 'its',
    'about', 'from', 'into', 'than', 'then', 'there', 'their', 'they',
    'you', 'your', 'me', 'my', 'tell', 'article', 'say', 'says',
})

EDGE_PUNCTUATION = re.compile(r"^[^\w]+|[^\w]+$")


@dataclass
class ExtractiveAnswer:
    answer: str
    supporting: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    strategy: str = "keyword-match"


def extract_keywords(question: Optional[str]) -> List[str]:
    keywords = []
    for token in (question or '').lower().split():
        token = EDGE_PUNCTUATION.sub('', token)
        if len(token) <= 2 or token in STOP_WORDS or token in keywords:
            continue
        keywords.append(token)
    return keywords


def score_sentence(sentence: str, index: int, keywords: List[str]) -> int:
    lowered = sentence.lower()
    score = sum(KEYWORD_MATCH_SCORE for keyword in keywords if keyword in lowered)
    score += max(0, 5 - index // 3)
    if len(sentence) < SHORT_SENTENCE_LENGTH:
        score -= SHORT_SENTENCE_PENALTY
    return score


def _join(sentences: List[str]) -> str:
    return '. '.join(sentences) + '.'


def extractive_answer(article_text: Optional[str], question: Optional[str]) -> ExtractiveAnswer:
    """
    Pick the sentences that best answer the question

    Top three by score, ties kept in article order. If nothing scores
    above zero the answer is the first two sentences instead; with the
    position bonus the first sentence always scores at least 3, so this
    only guards changes to score_sentence. Supporting evidence is always
    the top three. An article with no usable sentences gets a fixed message.
    """
    sentences = split_sentences(article_text or '')
    keywords = extract_keywords(question)

    if not sentences:
        return ExtractiveAnswer(NO_CONTENT_ANSWER, [], keywords, "no-content")

    scored = [
        (score_sentence(sentence, index, keywords), index, sentence)
        for index, sentence in enumerate(sentences)
    ]
    # sorted() is stable, so equal scores stay in article order
    ranked = sorted(scored, key=lambda item: item[0], reverse=True)
    top = [sentence for _, _, sentence in ranked[:MAX_ANSWER_SENTENCES]]

    if ranked[0][0] <= 0:
        return ExtractiveAnswer(
            _join(sentences[:LEADING_SENTENCES]),
            [truncate_text(s, SUPPORTING_MAX_LENGTH) for s in top],
            keywords,
            "leading-sentences",
        )

    return ExtractiveAnswer(
        _join(top),
        [truncate_text(s, SUPPORTING_MAX_LENGTH) for s in top],
        keywords,
        "keyword-match",
    )
