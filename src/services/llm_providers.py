"""
AI answer providers

Each provider wraps one SDK behind the same attempt() call. Any failure,
including a missing credential, surfaces as ProviderError so the
dispatcher can move on to the next provider.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import anthropic
import google.generativeai as genai
import openai
import structlog

from ..config import (
    GEMINI_KEY_MIN_LENGTH,
    GEMINI_KEY_PREFIX,
    GROQ_PLACEHOLDER_PREFIX,
    Settings,
    is_usable_credential,
)
from ..core.performance_timer import PerformanceTimer
from ..exceptions import ConfigurationGap, ProviderError
from ..utils.response_utils import extract_answer_text

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProviderAttempt:
    name: str
    model: str
    timeout: float
    priority: int


@dataclass(frozen=True)
class ProviderPrompt:
    system: str
    user: str
    temperature: float = 0.7
    max_tokens: int = 500


@dataclass
class ProviderAnswer:
    text: str
    provider: str
    model: str
    elapsed_seconds: float = 0.0
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


class AnswerProvider(ABC):
    """Capability interface for one AI provider"""

    def __init__(self, name: str, model: str, api_key: Optional[str], timeout: float, priority: int = 0):
        self.name = name
        self.model = model
        self.api_key = api_key.strip() if api_key else None
        self.timeout = timeout
        self.priority = priority

    def is_configured(self) -> bool:
        return is_usable_credential(self.api_key)

    def describe(self) -> ProviderAttempt:
        return ProviderAttempt(self.name, self.model, self.timeout, self.priority)

    @abstractmethod
    async def _request(self, prompt: ProviderPrompt) -> Dict[str, Any]:
        """Call the provider and return its response as a plain dict"""
        pass

    async def attempt(self, prompt: ProviderPrompt, timeout: Optional[float] = None) -> ProviderAnswer:
        """One call under this provider's deadline; raises ProviderError on any failure"""
        if not self.is_configured():
            raise ConfigurationGap(f"{self.name} credential is missing or a placeholder", self.name)

        deadline = timeout if timeout is not None else self.timeout
        timer = PerformanceTimer(self.name)
        timer.start()

        try:
            payload = await asyncio.wait_for(self._request(prompt), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"{self.name} timed out after {deadline}s", self.name) from e
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"{self.name} request failed: {e}", self.name) from e

        text = extract_answer_text(payload, self.name)
        return ProviderAnswer(text, self.name, self.model, timer.stop(), payload)


class GeminiProvider(AnswerProvider):
    """Google Gemini via google-generativeai"""

    def __init__(self, settings: Settings, priority: int = 0):
        super().__init__("gemini", settings.gemini_model_name, settings.google_api_key,
                         settings.gemini_timeout_seconds, priority)
        self._configured_key: Optional[str] = None

    def is_configured(self) -> bool:
        return is_usable_credential(self.api_key, required_prefix=GEMINI_KEY_PREFIX,
                                    min_length=GEMINI_KEY_MIN_LENGTH)

    async def _request(self, prompt: ProviderPrompt) -> Dict[str, Any]:
        if self._configured_key != self.api_key:
            genai.configure(api_key=self.api_key)
            self._configured_key = self.api_key

        model = genai.GenerativeModel(self.model, system_instruction=prompt.system)
        generation_config = genai.types.GenerationConfig(
            temperature=prompt.temperature,
            max_output_tokens=prompt.max_tokens,
        )
        response = await model.generate_content_async(prompt.user, generation_config=generation_config)
        return _gemini_payload(response)


def _gemini_payload(response: Any) -> Dict[str, Any]:
    candidates = []
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        parts = [
            {"text": getattr(part, "text", "")}
            for part in (getattr(content, "parts", None) or [])
        ]
        candidates.append({"content": {"parts": parts}})
    return {"candidates": candidates}


class OpenAIChatProvider(AnswerProvider):
    """OpenAI chat completions; also used for OpenAI-compatible endpoints such as Groq"""

    def __init__(self, name: str, model: str, api_key: Optional[str], timeout: float,
                 base_url: Optional[str] = None, priority: int = 0, forbidden_prefix: Optional[str] = None):
        super().__init__(name, model, api_key, timeout, priority)
        self.base_url = base_url
        self.forbidden_prefix = forbidden_prefix
        self._client: Optional[openai.AsyncOpenAI] = None

    def is_configured(self) -> bool:
        return is_usable_credential(self.api_key, forbidden_prefix=self.forbidden_prefix)

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, max_retries=0)
        return self._client

    async def _request(self, prompt: ProviderPrompt) -> Dict[str, Any]:
        response = await self._get_client().chat.completions.create(
            model=self.model,
            temperature=prompt.temperature,
            max_tokens=prompt.max_tokens,
            messages=[
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user}
            ]
        )
        return response.model_dump()


class AnthropicProvider(AnswerProvider):
    """Anthropic Claude messages API"""

    def __init__(self, settings: Settings, priority: int = 0):
        super().__init__("anthropic", settings.anthropic_model_name, settings.anthropic_api_key,
                         settings.anthropic_timeout_seconds, priority)
        self._client: Optional[anthropic.AsyncAnthropic] = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=0)
        return self._client

    async def _request(self, prompt: ProviderPrompt) -> Dict[str, Any]:
        response = await self._get_client().messages.create(
            model=self.model,
            max_tokens=prompt.max_tokens,
            temperature=prompt.temperature,
            system=prompt.system,
            messages=[{"role": "user", "content": prompt.user}]
        )
        return response.model_dump()


def build_providers(settings: Settings) -> List[AnswerProvider]:
    """All known providers in ai_provider_order; unknown names are ignored"""
    factories = {
        "gemini": lambda rank: GeminiProvider(settings, rank),
        "groq": lambda rank: OpenAIChatProvider(
            "groq", settings.groq_model_name, settings.groq_api_key, settings.groq_timeout_seconds,
            base_url=settings.groq_base_url, priority=rank, forbidden_prefix=GROQ_PLACEHOLDER_PREFIX,
        ),
        "openai": lambda rank: OpenAIChatProvider(
            "openai", settings.openai_model_name, settings.openai_api_key, settings.openai_timeout_seconds,
            priority=rank,
        ),
        "anthropic": lambda rank: AnthropicProvider(settings, rank),
    }

    providers = []
    for name in settings.ai_provider_order:
        factory = factories.get(name)
        if factory is None:
            logger.warning("unknown_ai_provider", provider=name)
            continue
        if any(p.name == name for p in providers):
            continue
        providers.append(factory(len(providers)))
    return providers
