"""Domain layer: entities and errors. No dependencies on outer layers."""

from portfolio.domain.entities import ShortLink, Subscriber, isoformat
from portfolio.domain.errors import (
    AuthError,
    ConfigurationError,
    LinkNotFound,
    LinkUnavailable,
    PortfolioError,
    StorageError,
    SubscriberNotFound,
    ValidationError,
)

__all__ = [
    "AuthError",
    "ConfigurationError",
    "LinkNotFound",
    "LinkUnavailable",
    "PortfolioError",
    "ShortLink",
    "StorageError",
    "Subscriber",
    "SubscriberNotFound",
    "ValidationError",
    "isoformat",
]
