"""Subscribe, list, and unsubscribe newsletter recipients."""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from portfolio.application.dto import Recipients, SubscriptionRequest, SubscriptionResult
from portfolio.application.identity import resolve
from portfolio.application.ports import SubscriberRepository
from portfolio.application.validators import (
    ValidationResult,
    validate_email,
    validate_phone_number,
)
from portfolio.domain import Subscriber, SubscriberNotFound, ValidationError, isoformat

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class SubscriberService:
    """Validators -> identity resolver -> repository. Errors propagate to the caller."""

    def __init__(
        self,
        repository: SubscriberRepository,
        *,
        format_phone: Callable[[str], str] | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._repo = repository
        self._format_phone = format_phone
        self._clock = clock
        self._id_factory = id_factory

    @property
    def storage_type(self) -> str:
        return self._repo.storage_type

    def subscribe(
        self,
        full_name: str | None,
        phone_number: str | None = None,
        email: str | None = None,
    ) -> SubscriptionResult:
        """Create or update a subscriber. Raises ValidationError on bad input."""
        request = self._validate(full_name, phone_number, email)

        by_phone = self._repo.find_by_phone(request.phone_number) if request.phone_number else None
        by_email = self._repo.find_by_email(request.email) if request.email else None
        resolution = resolve(
            request,
            by_phone,
            by_email,
            now=isoformat(self._clock()),
            new_id=self._id_factory(),
        )
        self._repo.upsert(resolution)

        record = resolution.record
        if resolution.is_new:
            logger.info("New subscriber %s stored in %s", record.id, self.storage_type)
        elif resolution.merged_away_id:
            logger.info(
                "Merged subscriber %s into %s", resolution.merged_away_id, record.id
            )
        else:
            logger.info("Updated subscriber %s", record.id)
        return SubscriptionResult(
            subscriber=record,
            is_new=resolution.is_new,
            merged_away_id=resolution.merged_away_id,
        )

    def list_subscribers(self) -> list[Subscriber]:
        return self._repo.list_all()

    def find(
        self,
        *,
        subscriber_id: str | None = None,
        phone: str | None = None,
        email: str | None = None,
    ) -> Subscriber | None:
        """Locate a subscriber by id, phone, or email (first one given wins)."""
        subscriber_id = (subscriber_id or "").strip() or None
        phone = (phone or "").strip() or None
        email = (email or "").strip() or None
        if not (subscriber_id or phone or email):
            raise ValidationError("Subscriber id, phone number, or email is required")
        if subscriber_id:
            return self._repo.get(subscriber_id)
        if phone:
            return self._repo.find_by_phone(_normalized(validate_phone_number(phone)))
        return self._repo.find_by_email(_normalized(validate_email(email)))

    def unsubscribe(
        self,
        *,
        subscriber_id: str | None = None,
        phone: str | None = None,
        email: str | None = None,
    ) -> Subscriber:
        """Delete the matching subscriber with its index entries and return it."""
        subscriber = self.find(subscriber_id=subscriber_id, phone=phone, email=email)
        if subscriber is None:
            raise SubscriberNotFound("Subscriber not found")
        self._repo.delete(subscriber.id)
        logger.info("Deleted subscriber %s", subscriber.id)
        return subscriber

    def recipients(self) -> Recipients:
        """Phone numbers (E.164 when a formatter is configured) and emails of everyone subscribed."""
        phones, emails = [], []
        for subscriber in self._repo.list_all():
            if subscriber.phone_number:
                phone = subscriber.phone_number
                phones.append(self._format_phone(phone) if self._format_phone else phone)
            if subscriber.email:
                emails.append(subscriber.email)
        return Recipients(phone_numbers=phones, emails=emails)

    def _validate(
        self,
        full_name: str | None,
        phone_number: str | None,
        email: str | None,
    ) -> SubscriptionRequest:
        name = (full_name or "").strip()
        if not name:
            raise ValidationError("Full name is required")
        if not (phone_number or "").strip() and not (email or "").strip():
            raise ValidationError("Either phone number or email is required")
        phone = validate_phone_number(phone_number)
        if not phone.valid:
            raise ValidationError(phone.message or "Invalid phone number format")
        mail = validate_email(email)
        if not mail.valid:
            raise ValidationError(mail.message or "Invalid email address")
        return SubscriptionRequest(
            full_name=name,
            phone_number=phone.normalized,
            email=mail.normalized,
        )


def _normalized(result: ValidationResult) -> str:
    if not result.valid or result.normalized is None:
        raise ValidationError(result.message or "Invalid identifier")
    return result.normalized
