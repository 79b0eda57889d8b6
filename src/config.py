from functools import lru_cache
from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode


class FeedConfig(BaseModel):
    url: str
    source: str
    category: str = "general"


DEFAULT_RSS_FEEDS = [
    FeedConfig(url="http://feeds.bbci.co.uk/news/rss.xml", source="BBC News", category="general"),
    FeedConfig(url="https://feeds.a.dj.com/rss/RSSWorldNews.xml", source="Wall Street Journal", category="business"),
    FeedConfig(url="https://feeds.feedburner.com/TechCrunch", source="TechCrunch", category="technology"),
    FeedConfig(url="https://www.wired.com/feed/rss", source="Wired", category="technology"),
    FeedConfig(url="https://feeds.arstechnica.com/arstechnica/index", source="Ars Technica", category="technology"),
    FeedConfig(url="https://feeds.feedburner.com/venturebeat/SZYF", source="VentureBeat", category="technology"),
    FeedConfig(url="https://feeds.bloomberg.com/markets/news.rss", source="Bloomberg Markets", category="business"),
    FeedConfig(url="https://feeds.feedburner.com/entrepreneur/latest", source="Entrepreneur", category="business"),
    FeedConfig(url="https://feeds.feedburner.com/sciencedaily", source="Science Daily", category="science"),
    FeedConfig(url="http://feeds.bbci.co.uk/sport/rss.xml", source="BBC Sport", category="sports"),
    FeedConfig(url="https://feeds.feedburner.com/thr/news", source="The Hollywood Reporter", category="entertainment"),
    FeedConfig(url="https://feeds.feedburner.com/ndtvnews-top-stories", source="NDTV", category="general"),
]

DEFAULT_GREETING_PATTERNS = [
    r"^(hi|hello|hey|hiya|yo|howdy)(\s+(there|everyone|all))?[\s.,!]*$",
    r"^good (morning|afternoon|evening|night)\b[\s\w]{0,12}[.!]*$",
]

# Values shipped in sample .env files; never real credentials.
PLACEHOLDER_CREDENTIALS = frozenset({
    "changeme",
    "change_me",
    "placeholder",
    "none",
    "null",
    "test",
    "xxx",
    "your_api_key",
    "your_api_key_here",
    "your-api-key",
    "your-api-key-here",
    "api_key_here",
})

GEMINI_KEY_PREFIX = "AIzaSy"
GEMINI_KEY_MIN_LENGTH = 35
GROQ_PLACEHOLDER_PREFIX = "sk-or-v1-e0b1a07"


def is_usable_credential(
    value: Optional[str],
    required_prefix: Optional[str] = None,
    min_length: int = 1,
    forbidden_prefix: Optional[str] = None,
) -> bool:
    if not value or not value.strip():
        return False

    candidate = value.strip()
    lowered = candidate.lower()
    if lowered in PLACEHOLDER_CREDENTIALS or lowered.startswith(("your_", "your-", "<")):
        return False
    if len(candidate) < min_length:
        return False
    if required_prefix and not candidate.startswith(required_prefix):
        return False
    if forbidden_prefix and candidate.startswith(forbidden_prefix):
        return False
    return True


class Settings(BaseSettings):

    # News source credentials
    newsapi_key: Optional[str] = Field(default=None, description="NewsAPI.org API key")
    gnews_api_key: Optional[str] = Field(default=None, description="GNews API key")
    newsdata_api_key: Optional[str] = Field(default=None, description="NewsData.io API key")

    newsapi_base_url: str = Field(default="https://newsapi.org/v2", description="NewsAPI base URL")
    gnews_base_url: str = Field(default="https://gnews.io/api/v4", description="GNews base URL")
    newsdata_base_url: str = Field(default="https://newsdata.io/api/1", description="NewsData.io base URL")

    # RSS configuration
    rss_enabled: bool = Field(default=True, description="Include RSS feeds in aggregation")
    rss_feeds: list[FeedConfig] = Field(default_factory=lambda: list(DEFAULT_RSS_FEEDS), description="RSS feeds to aggregate")
    rss_items_per_feed: int = Field(default=20, description="Maximum entries read from a single feed")
    rss_max_concurrency: int = Field(default=5, description="Feeds fetched at once inside the RSS source")

    # Aggregation
    source_fetch_timeout_seconds: float = Field(default=10.0, description="HTTP timeout for a single source fetch")
    source_task_timeout_seconds: float = Field(default=15.0, description="Wall-clock guard for one fetch task")
    default_total_limit: int = Field(default=200, description="Default number of aggregated articles")
    max_total_limit: int = Field(default=200, description="Upper bound for a requested total limit")
    default_max_concurrency: int = Field(default=4, description="Default fetch batch size")
    user_agent: str = Field(default="AI-News-Aggregator/1.0.0", description="User-Agent for outbound requests")

    # LLM Provider API Keys
    google_api_key: Optional[str] = Field(
        default=None,
        description="Google API key for Gemini",
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    )
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")

    # LLM Model Names
    gemini_model_name: str = Field(default="gemini-2.0-flash", description="Google Gemini model name")
    groq_model_name: str = Field(default="llama3-8b-8192", description="Groq model name")
    openai_model_name: str = Field(default="gpt-4o-mini", description="OpenAI model name")
    anthropic_model_name: str = Field(default="claude-3-haiku-20240307", description="Anthropic Claude model name")
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1", description="Groq OpenAI-compatible endpoint")

    # Provider chain
    ai_provider_order: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["gemini", "groq", "openai", "anthropic"],
        description="Priority order of AI providers",
    )
    gemini_timeout_seconds: float = Field(default=8.0, description="Timeout for Gemini calls")
    groq_timeout_seconds: float = Field(default=6.0, description="Timeout for Groq calls")
    openai_timeout_seconds: float = Field(default=8.0, description="Timeout for OpenAI calls")
    anthropic_timeout_seconds: float = Field(default=8.0, description="Timeout for Anthropic calls")
    ai_temperature: float = Field(default=0.7, description="Generation temperature for answers")
    ai_max_tokens: int = Field(default=500, description="Max tokens for answers")
    translation_temperature: float = Field(default=0.2, description="Generation temperature for translations")
    translation_max_tokens: int = Field(default=2048, description="Max tokens for translations")

    # Greeting heuristic
    greeting_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_GREETING_PATTERNS), description="Regexes treated as greetings")
    greeting_max_words: int = Field(default=6, description="Longer messages are never treated as greetings")
    greeting_response: str = Field(default="Hello! How can I help you with this article?", description="Canned greeting reply")

    # Article cache
    cache_dir: str = Field(default="./data", description="Directory for the article cache file")
    cache_ttl_seconds: int = Field(default=3600, description="Freshness window for cached aggregations")
    article_lookup_max_age_seconds: int = Field(default=86400, description="Max cache age for single-article lookups")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")

    @field_validator("ai_provider_order", mode="before")
    @classmethod
    def parse_provider_order(cls, value):
        if isinstance(value, str):
            return [name.strip().lower() for name in value.split(",") if name.strip()]
        return value

    @property
    def gemini_configured(self) -> bool:
        return is_usable_credential(
            self.google_api_key, required_prefix=GEMINI_KEY_PREFIX, min_length=GEMINI_KEY_MIN_LENGTH
        )

    @property
    def groq_configured(self) -> bool:
        return is_usable_credential(self.groq_api_key, forbidden_prefix=GROQ_PLACEHOLDER_PREFIX)

    class Config:
        env_file = [".env", ".env.local"]  # .env.local takes precedence over .env
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
