from typing import Optional


class AstroInsightsError(Exception):
    """
    Base exception for all astro-insights errors.
    """
    pass


class UserInputError(AstroInsightsError):
    """
    Raised when birth inputs are malformed.
    Rejected before any network call is made.
    """
    pass


class NotFoundError(AstroInsightsError):
    """
    Raised when a place cannot be geocoded.
    """

    def __init__(self, place: str):
        self.place = place
        super().__init__(f"Location '{place}' not found")


class AuthError(AstroInsightsError):
    """
    Raised when the data provider rejects or fails to issue credentials.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class TransientError(AstroInsightsError):
    """
    Raised on network failures, timeouts and 5xx/429 responses.
    Safe to retry.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class LLMTimeoutError(TransientError):
    """
    Raised when a chat-completion request times out.
    """
    pass


class TruncationError(AstroInsightsError):
    """
    Raised when an LLM response looks incomplete.
    """
    pass


class FatalProviderError(AstroInsightsError):
    """
    Raised when an upstream failure cannot be recovered by retrying.
    """
    pass


class ChartFetchError(FatalProviderError):
    """
    Raised when chart data cannot be fully assembled.
    """
    pass


class ResponseParseError(FatalProviderError):
    """
    Raised when an LLM response cannot be parsed into the expected shape.
    """
    pass
