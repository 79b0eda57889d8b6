"""
Lexicon-based headline sentiment

A fixed weighted lexicon with single-token negation. The tables are
read-only module constants shared by every caller.
"""

import re
from types import MappingProxyType
from typing import List, Optional

from ..models.article import Sentiment

POSITIVE_THRESHOLD = 1.5
NEGATIVE_THRESHOLD = -2.0

LEXICON = MappingProxyType({
    # strong positive
    'acclaimed': 6.8, 'award': 7.1, 'breakthrough': 8.1, 'booming': 6.6,
    'celebrated': 7.3, 'champion': 7.2, 'flawless': 8.5, 'great': 7.0,
    'heartwarming': 7.9, 'historic': 7.1, 'innovative': 7.5, 'masterpiece': 9.2,
    'miracle': 8.5, 'outstanding': 9.6, 'pioneering': 6.8, 'prestigious': 6.2,
    'record-breaking': 8.8, 'spectacular': 8.3, 'superb': 7.9, 'triumph': 8.2,
    'victory': 7.8,

    # moderate positive
    'accomplish': 5.1, 'achieve': 4.1, 'acquisition': 2.9, 'advancement': 4.3,
    'alliance': 3.5, 'approve': 3.2, 'bullish': 6.0, 'charity': 3.8,
    'deal': 2.6, 'donation': 4.3, 'earnings': 4.2, 'empower': 5.2,
    'endorse': 3.9, 'expansion': 3.1, 'hope': 4.1, 'peace': 8.2,
    'positive': 3.5, 'profit': 4.6, 'recover': 3.6, 'reform': 2.8,
    'relief': 3.4, 'rescue': 4.8, 'solid': 2.7, 'stabilize': 3.1,
    'success': 5.9, 'wins': 4.5,

    # mild positive
    'agreement': 2.1, 'appoints': 0.8, 'boost': 2.5, 'commitment': 1.8,
    'confidence': 2.3, 'denies': 1.5, 'growth': 2.2, 'investment': 1.9,
    'launch': 1.7, 'massive': 1.0, 'merger': 1.5, 'negotiation': 1.2,
    'pledge': 1.4, 'rebound': 2.4, 'surge': 2.2, 'talks': 1.1,
    'upgrade': 2.1,

    # neutral
    'announces': 0, 'committee': 0, 'federal': 0, 'government': 0,
    'hearing': 0, 'legislation': 0.4, 'meeting': 0, 'policy': 0,
    'report': 0, 'rules': 0, 'shares': 0, 'study': 0,

    # mild negative
    'allegation': -2.1, 'caution': -1.2, 'concern': -2.2, 'dispute': -2.5,
    'drop': -2.1, 'delay': -1.6, 'disappointing': -2.4, 'disruption': -1.9,
    'investigation': -2.2, 'issue': -1.8, 'jobless': -2.3, 'lawsuit': -2.5,
    'questions': -1.1, 'risk': -2.4, 'speculation': -1.5, 'uncertainty': -1.9,
    'volatile': -2.5,

    # moderate negative
    'attack': -7.1, 'backlash': -4.8, 'blame': -4.1, 'boycott': -4.6,
    'clash': -4.2, 'condemn': -5.6, 'confrontation': -4.9, 'controversial': -3.6,
    'cuts': -3.2, 'damage': -5.8, 'deadlock': -5.5, 'debt': -4.9,
    'decline': -3.8, 'deficit': -4.1, 'glitch': -3.7, 'impasse': -4.4,
    'leak': -4.8, 'outage': -5.8, 'outcry': -4.7, 'panic': -5.9,
    'protest': -4.3, 'reject': -3.3, 'restrictions': -4.4, 'sanctions': -5.3,
    'scarcity': -4.6, 'slump': -5.7, 'standoff': -3.9, 'strain': -5.2,
    'struggle': -3.7, 'threat': -4.7, 'turmoil': -5.1, 'veto': -4.2,
    'warning': -2.8,

    # strong negative
    'assault': -7.2, 'bankrupt': -7.6, 'brutality': -8.7, 'catastrophe': -9.7,
    'chaos': -8.1, 'collapse': -8.2, 'collusion': -7.8, 'convicted': -7.8,
    'corruption': -8.6, 'crisis': -7.3, 'cyberattack': -8.3, 'danger': -5.5,
    'deadly': -9.3, 'devastating': -9.1, 'disaster': -9.8, 'disease': -6.8,
    'eviction': -6.2, 'explode': -7.7, 'fraud': -7.5, 'hostage': -8.4,
    'illegal': -6.7, 'incarcerated': -7.9, 'invasion': -8.9, 'massacre': -9.9,
    'outbreak': -7.5, 'recession': -8.1, 'scandal': -7.1, 'shutdown': -6.9,
    'slaughter': -9.4, 'tragedy': -8.7, 'treason': -9.2, 'virus': -5.1,
    'vulnerability': -6.6, 'war': -9.5,
})

NEGATIONS = frozenset({
    'not', 'no', 'never', 'isnt', 'wasnt', 'shouldnt',
    'wouldnt', 'couldnt', 'wont', 'cant', 'dont', 'doesnt',
})

# Apostrophes go too, so "isn't" becomes the negation "isnt"
PUNCTUATION = re.compile(r"[.,/#!$%^&*;:{}=_`~()\"'‘’“”?\[\]<>|\\+@]")


def tokenize(text: str) -> List[str]:
    """Lowercase, strip punctuation, split on whitespace; internal hyphens survive"""
    stripped = PUNCTUATION.sub('', text.lower())
    tokens = (token.strip('-') for token in stripped.split())
    return [token for token in tokens if token]


def score_text(text: Optional[str]) -> float:
    total = 0.0
    negated = False

    for token in tokenize(text or ''):
        if token in NEGATIONS:
            negated = True
            continue

        weight = LEXICON.get(token)
        if weight is None:
            continue

        total += -weight if negated else weight
        negated = False

    return total


def classify_score(total: float) -> Sentiment:
    if total > POSITIVE_THRESHOLD:
        return Sentiment.POSITIVE
    if total < NEGATIVE_THRESHOLD:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def analyze_sentiment(text: Optional[str]) -> Sentiment:
    """Classify a headline or free text as positive, negative or neutral"""
    if not text or not isinstance(text, str):
        return Sentiment.NEUTRAL
    return classify_score(score_text(text))
