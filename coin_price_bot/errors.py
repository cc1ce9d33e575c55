class PriceSourceError(Exception):
    """Base error for every price/collection lookup failure."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class NotFoundError(PriceSourceError):
    pass


class RateLimitedError(PriceSourceError):
    def __init__(self, message: str, source: str | None = None, retry_after: float | None = None):
        super().__init__(message, source)
        self.retry_after = retry_after


class UnavailableError(PriceSourceError):
    pass


class MalformedError(PriceSourceError):
    pass
