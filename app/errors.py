from typing import Optional


class ChatError(Exception):
    """Base class for errors reported to the client as ``{"error": ...}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(ChatError):
    status_code = 400


class NotFoundError(ChatError):
    status_code = 404


class ConfigurationError(ChatError):
    pass


class StorageError(ChatError):
    pass


class ProviderError(ChatError):
    """Failure coming from a hosted LLM backend; always names the provider."""

    def __init__(self, provider: str, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.provider = provider
        self.original = original


class InvalidCredentialError(ProviderError):
    def __init__(self, provider: str, original: Optional[BaseException] = None):
        super().__init__(provider, f"Invalid {provider} API key. Please check your API key.", original)


class RateLimitedError(ProviderError):
    def __init__(self, provider: str, original: Optional[BaseException] = None):
        super().__init__(
            provider,
            f"{provider} rate limit exceeded. Please wait a moment and try again.",
            original,
        )


class BackendUnavailableError(ProviderError):
    def __init__(self, provider: str, original: Optional[BaseException] = None):
        super().__init__(
            provider,
            f"{provider} service temporarily unavailable. Please try again in a moment.",
            original,
        )


class ProviderTimeoutError(ProviderError):
    def __init__(self, provider: str, original: Optional[BaseException] = None):
        super().__init__(provider, f"Request to {provider} timed out. Please try again.", original)


class EmptyResponseError(ProviderError):
    def __init__(self, provider: str):
        super().__init__(provider, f"Empty response from {provider}")


class UnknownBackendError(ProviderError):
    def __init__(self, provider: str, original: BaseException):
        detail = str(original) or "Unknown error"
        super().__init__(provider, f"Failed to generate reply with {provider}: {detail}", original)
