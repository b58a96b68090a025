"""Data transfer objects passed between the API and the application services."""

from dataclasses import dataclass, field

from portfolio.domain import Subscriber


@dataclass(frozen=True)
class SubscriptionRequest:
    """A submission after validation: trimmed name, normalized contact channels."""

    full_name: str
    phone_number: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class Resolution:
    """What the identity resolver decided.

    previous is the stored version of record before this submission (None when new).
    merged_away_id names a record folded into record that must be deleted.
    """

    record: Subscriber
    is_new: bool
    previous: Subscriber | None = None
    merged_away_id: str | None = None


@dataclass(frozen=True)
class SubscriptionResult:
    subscriber: Subscriber
    is_new: bool
    merged_away_id: str | None = None


@dataclass(frozen=True)
class Recipients:
    """Broadcast targets: E.164 phone numbers and emails."""

    phone_numbers: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
