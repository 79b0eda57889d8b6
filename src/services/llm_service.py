import structlog
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import Settings, get_settings
from ..exceptions import ProviderError, TranslationFormatError, TranslationUnavailableError
from ..utils.prompt_strings import PromptStrings
from ..utils.response_utils import extract_json_object, validate_translation_payload
from .extractive_fallback import extractive_answer
from .intent_classifier import GreetingDetector
from .llm_providers import AnswerProvider, ProviderAttempt, ProviderPrompt, build_providers

logger = structlog.get_logger(__name__)

GREETING_MODEL = "greeting-handler"
FALLBACK_MODEL = "extractive-fallback"


@dataclass
class AIResponse:
    answer: str
    model: str
    grounded: bool
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "model": self.model,
            "grounded": self.grounded,
            "meta": dict(self.meta),
        }


@dataclass
class TranslationResult:
    title: str
    summary: str
    content: str
    model: Optional[str] = None
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "summary": self.summary, "content": self.content}


class LLMService:
    """
    Article question answering over an ordered provider chain.

    Providers are tried strictly one after another, each under its own
    timeout, and the first answer wins. Unconfigured providers are skipped.
    When the chain is exhausted the answer is extracted locally, so
    get_ai_response() always returns a non-empty answer.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        providers: Optional[List[AnswerProvider]] = None,
        greeting_detector: Optional[GreetingDetector] = None,
    ):
        self.settings = settings or get_settings()
        self.providers = providers if providers is not None else build_providers(self.settings)
        self.greeting_detector = greeting_detector or GreetingDetector.from_settings(self.settings)

    def get_available_providers(self) -> List[str]:
        """Names of configured providers in chain order."""
        return [provider.name for provider in self.providers if provider.is_configured()]

    def get_provider_attempts(self) -> List[ProviderAttempt]:
        return [provider.describe() for provider in self.providers if provider.is_configured()]

    async def get_ai_response(self, article_text: str, question: str) -> AIResponse:
        article_text = article_text or ""
        question = question or ""

        try:
            if self.greeting_detector.is_greeting(question):
                logger.info("ai_greeting_short_circuit")
                return AIResponse(self.greeting_detector.response, GREETING_MODEL, False, {"attempts": []})

            prompt = ProviderPrompt(
                system=PromptStrings.ARTICLE_ANSWER_SYSTEM,
                user=PromptStrings.ARTICLE_ANSWER.format(article_text=article_text, question=question),
                temperature=self.settings.ai_temperature,
                max_tokens=self.settings.ai_max_tokens,
            )

            attempts: List[Dict[str, Any]] = []
            for provider in self.providers:
                answer = await self._try_provider(provider, prompt, attempts)
                if answer is None:
                    continue

                logger.info("ai_answer_generated", provider=answer.provider, model=answer.model,
                            elapsed_seconds=round(answer.elapsed_seconds, 3))
                return AIResponse(answer.text, answer.model, True, {
                    "provider": answer.provider,
                    "attempts": attempts,
                })

            reason = "all_providers_failed" if any(a["status"] == "failed" for a in attempts) \
                else "no_providers_configured"
            return self._fallback(article_text, question, attempts, reason)

        except Exception as e:
            logger.error("ai_answer_unexpected_error", error=str(e), exc_info=True)
            return self._fallback(article_text, question, [], "unexpected_error")

    async def _try_provider(
        self,
        provider: AnswerProvider,
        prompt: ProviderPrompt,
        attempts: List[Dict[str, Any]],
    ):
        if not provider.is_configured():
            attempts.append({"provider": provider.name, "model": provider.model, "status": "skipped"})
            return None

        try:
            answer = await provider.attempt(prompt)
        except ProviderError as e:
            logger.warning("ai_provider_failed", provider=provider.name, error=str(e))
            attempts.append({"provider": provider.name, "model": provider.model,
                             "status": "failed", "error": str(e)})
            return None

        attempts.append({"provider": provider.name, "model": provider.model, "status": "succeeded",
                         "elapsedSeconds": round(answer.elapsed_seconds, 3)})
        return answer

    def _fallback(self, article_text: str, question: str, attempts: List[Dict[str, Any]], reason: str) -> AIResponse:
        result = extractive_answer(article_text, question)
        logger.info("ai_extractive_fallback_used", reason=reason, strategy=result.strategy)
        return AIResponse(result.answer, FALLBACK_MODEL, False, {
            "attempts": attempts,
            "fallbackReason": reason,
            "strategy": result.strategy,
            "keywords": result.keywords,
            "supportingSentences": result.supporting,
        })

    async def translate(self, text: str, target_language: str) -> TranslationResult:
        """
        Translate article text into {title, summary, content}.

        Transport and configuration failures move on to the next provider.
        The first provider that answers decides the outcome: a reply that
        does not hold a valid JSON object with all three keys raises
        TranslationFormatError. If no provider answers at all,
        TranslationUnavailableError (a TranslationFormatError) is raised.
        """
        prompt = ProviderPrompt(
            system=PromptStrings.TRANSLATION_SYSTEM,
            user=PromptStrings.TRANSLATION.format(target_language=target_language, text=text or ""),
            temperature=self.settings.translation_temperature,
            max_tokens=self.settings.translation_max_tokens,
        )

        attempts: List[Dict[str, Any]] = []
        for provider in self.providers:
            answer = await self._try_provider(provider, prompt, attempts)
            if answer is None:
                continue

            try:
                payload = validate_translation_payload(extract_json_object(answer.text))
            except TranslationFormatError as e:
                logger.warning("translation_format_invalid", provider=answer.provider, error=str(e))
                raise

            logger.info("translation_completed", provider=answer.provider, target_language=target_language)
            return TranslationResult(
                title=payload["title"],
                summary=payload["summary"],
                content=payload["content"],
                model=answer.model,
                provider=answer.provider,
            )

        logger.warning("translation_unavailable", target_language=target_language, attempts=attempts)
        raise TranslationUnavailableError("No AI provider was able to translate the article")
