from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


def to_utc_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_utc_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class Article:
    """
    Canonical unit flowing through aggregation.

    Built by a source mapper, re-keyed by the deduplicator and annotated with
    sentiment by the source manager. Read-only afterwards; use with_updates()
    to derive a changed copy.
    """
    id: str
    title: str
    link: str
    source: str
    published_at: datetime
    summary: str = ""
    content: str = ""
    author: str = "Unknown"
    categories: FrozenSet[str] = field(default_factory=frozenset)
    sentiment: Sentiment = Sentiment.NEUTRAL
    original_item: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Article title must be non-empty")
        if not self.link or not self.link.strip():
            raise ValueError("Article link must be non-empty")
        if not isinstance(self.categories, frozenset):
            object.__setattr__(self, "categories", frozenset(self.categories))
        if not isinstance(self.sentiment, Sentiment):
            object.__setattr__(self, "sentiment", Sentiment(str(self.sentiment).lower()))

    @property
    def published_at_iso(self) -> str:
        return to_utc_iso(self.published_at)

    def with_updates(self, **changes: Any) -> "Article":
        return replace(self, **changes)

    def has_category(self, category: str) -> bool:
        return category.lower() in {c.lower() for c in self.categories}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "summary": self.summary,
            "content": self.content,
            "author": self.author,
            "source": self.source,
            "publishedAt": self.published_at_iso,
            "categories": sorted(self.categories),
            "sentiment": self.sentiment.value,
            "originalItem": dict(self.original_item),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            id=data["id"],
            title=data["title"],
            link=data["link"],
            summary=data.get("summary", ""),
            content=data.get("content", ""),
            author=data.get("author") or "Unknown",
            source=data.get("source", ""),
            published_at=parse_utc_iso(data["publishedAt"]),
            categories=frozenset(data.get("categories") or []),
            sentiment=Sentiment(data.get("sentiment", Sentiment.NEUTRAL.value)),
            original_item=dict(data.get("originalItem") or {}),
        )


def sources_of(articles: Iterable[Article]) -> list:
    return sorted({article.source for article in articles})
