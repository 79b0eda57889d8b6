from typing import Optional


class NewsDeskError(Exception):
    pass


class ValidationError(NewsDeskError):
    pass


class ArticleNotFoundError(NewsDeskError):
    pass


class ExternalServiceError(NewsDeskError):
    pass


class SourceFetchError(ExternalServiceError):
    pass


class ProviderError(ExternalServiceError):
    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class ConfigurationGap(ProviderError):
    pass


class TranslationFormatError(NewsDeskError):
    pass


class TranslationUnavailableError(TranslationFormatError):
    pass


class CacheError(NewsDeskError):
    pass
