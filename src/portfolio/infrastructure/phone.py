"""E.164 formatting of stored (10-digit, Indian) mobile numbers for SMS providers."""

import phonenumbers

DEFAULT_REGION = "IN"


def to_e164(phone: str, region: str = DEFAULT_REGION) -> str:
    """Return E.164 form (e.g. "+919812345670"). Falls back to the input if it cannot be parsed."""
    try:
        parsed = phonenumbers.parse(phone, region)
    except phonenumbers.NumberParseException:
        return phone
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
