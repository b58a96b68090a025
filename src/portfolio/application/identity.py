"""Identity resolution: decide whether a submission creates, updates, or merges subscribers.

Inputs are the validated submission and two independent lookups (by phone, by email).
The checks run in a fixed order; the first that applies wins:

1. both lookups found the same record: refresh its name only;
2. only the phone lookup found a record: it takes the submitted email;
3. only the email lookup found a record: it takes the submitted phone;
4. the lookups found different records: the phone record survives, absorbs the
   email, and the email record is merged away;
5. nothing found: a new subscriber.
"""

from dataclasses import replace

from portfolio.application.dto import Resolution, SubscriptionRequest
from portfolio.domain import Subscriber


def resolve(
    submission: SubscriptionRequest,
    by_phone: Subscriber | None,
    by_email: Subscriber | None,
    *,
    now: str,
    new_id: str,
) -> Resolution:
    """Return the record to store for this submission.

    now is the timestamp stamped into dateJoined or lastUpdated; new_id is used only
    when a new subscriber is created.
    """
    name = submission.full_name

    if by_phone is not None and by_email is not None and by_phone.id == by_email.id:
        record = replace(by_phone, full_name=name, last_updated=now)
        return Resolution(record=record, is_new=False, previous=by_phone)

    if by_phone is not None and by_email is None:
        record = replace(
            by_phone,
            full_name=name,
            email=submission.email or by_phone.email,
            last_updated=now,
        )
        return Resolution(record=record, is_new=False, previous=by_phone)

    if by_email is not None and by_phone is None:
        record = replace(
            by_email,
            full_name=name,
            phone_number=submission.phone_number or by_email.phone_number,
            last_updated=now,
        )
        return Resolution(record=record, is_new=False, previous=by_email)

    if by_phone is not None and by_email is not None:
        record = replace(by_phone, full_name=name, email=submission.email, last_updated=now)
        return Resolution(
            record=record,
            is_new=False,
            previous=by_phone,
            merged_away_id=by_email.id,
        )

    record = Subscriber(
        id=new_id,
        full_name=name,
        phone_number=submission.phone_number,
        email=submission.email,
        date_joined=now,
    )
    return Resolution(record=record, is_new=True)
