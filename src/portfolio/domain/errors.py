"""Error taxonomy. Raised by inner layers, translated to HTTP at the API boundary."""


class PortfolioError(Exception):
    """Base class for all errors raised by the portfolio backend."""


class ValidationError(PortfolioError):
    """Bad or missing input. The message is safe to show to the caller."""


class AuthError(PortfolioError):
    """Missing or incorrect API key."""


class StorageError(PortfolioError):
    """A key-value store operation failed."""


class ConfigurationError(PortfolioError):
    """Required configuration is missing or invalid."""


class SubscriberNotFound(PortfolioError):
    """No subscriber matches the given identifier."""


class LinkNotFound(PortfolioError):
    """No short link exists for the given code."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Short link not found: {code}")
        self.code = code


class LinkUnavailable(PortfolioError):
    """A short link cannot be followed (missing, revoked or expired)."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"Short link {code} is unavailable: {reason}")
        self.code = code
        self.reason = reason
