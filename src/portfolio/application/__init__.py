"""Application layer: validators, identity resolution, use cases, ports, DTOs. Depends only on domain."""

from portfolio.application.dto import (
    Recipients,
    Resolution,
    SubscriptionRequest,
    SubscriptionResult,
)
from portfolio.application.identity import resolve
from portfolio.application.ports import KeyValueStore, SubscriberRepository
from portfolio.application.short_link_service import ShortenResult, ShortLinkService
from portfolio.application.subscriber_service import SubscriberService
from portfolio.application.urls import normalize_url
from portfolio.application.validators import (
    ValidationResult,
    validate_email,
    validate_phone_number,
)

__all__ = [
    "KeyValueStore",
    "Recipients",
    "Resolution",
    "ShortLinkService",
    "ShortenResult",
    "SubscriberRepository",
    "SubscriberService",
    "SubscriptionRequest",
    "SubscriptionResult",
    "ValidationResult",
    "normalize_url",
    "resolve",
    "validate_email",
    "validate_phone_number",
]
