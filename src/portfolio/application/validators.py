"""Phone and email validation. Pure functions: normalize input, reject spam-looking values."""

import re
from collections import Counter
from dataclasses import dataclass

_PHONE_STRIP = re.compile(r"[\s\-()]")
_MOBILE_PATTERN = re.compile(r"[6-9][0-9]{9}")
_SEQUENTIAL_NUMBERS = frozenset({"0123456789", "9876543210"})
# A digit appearing this many times out of ten is treated as a fake number.
MAX_REPEATED_DIGIT = 8

_EMAIL_SHAPE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

DISPOSABLE_EMAIL_DOMAINS = frozenset(
    {
        "mailinator.com",
        "10minutemail.com",
        "guerrillamail.com",
        "guerrillamail.net",
        "sharklasers.com",
        "tempmail.com",
        "temp-mail.org",
        "throwawaymail.com",
        "yopmail.com",
        "trashmail.com",
        "getnada.com",
        "maildrop.cc",
        "dispostable.com",
        "fakeinbox.com",
        "mailnesia.com",
    }
)

SUSPICIOUS_TLDS = (".xyz", ".top", ".tk", ".ml", ".ga", ".cf", ".gq", ".click", ".loan", ".work")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validator. normalized is None when the input was empty or invalid."""

    valid: bool
    message: str | None = None
    normalized: str | None = None


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(valid=False, message=message)


def validate_phone_number(raw: str | None) -> ValidationResult:
    """Validate an Indian mobile number and normalize it to 10 digits.

    Spaces, hyphens and parentheses are removed, then a leading +91 (or 91 when
    more than ten digits remain) is dropped. Empty input is valid and yields no
    normalized value.
    """
    if raw is None or not str(raw).strip():
        return ValidationResult(valid=True)
    phone = _PHONE_STRIP.sub("", str(raw))
    if phone.startswith("+91"):
        phone = phone[3:]
    elif phone.startswith("91") and len(phone) > 10:
        phone = phone[2:]

    if phone in _SEQUENTIAL_NUMBERS:
        return _invalid("Invalid phone number pattern")
    if phone.startswith("0"):
        return _invalid("Mobile number should not start with 0")
    if len(phone) != 10:
        return _invalid("Mobile number must be exactly 10 digits")
    if not _MOBILE_PATTERN.fullmatch(phone):
        return _invalid("Must be a valid Indian mobile number starting with 6, 7, 8, or 9")
    if max(Counter(phone).values()) >= MAX_REPEATED_DIGIT:
        return _invalid("Invalid phone number pattern")
    return ValidationResult(valid=True, normalized=phone)


def validate_email(raw: str | None) -> ValidationResult:
    """Validate an email address; normalized form is trimmed and lower-cased."""
    if raw is None or not str(raw).strip():
        return ValidationResult(valid=True)
    email = str(raw).strip().lower()
    if not _EMAIL_SHAPE.fullmatch(email):
        return _invalid("Please enter a valid email address")
    domain = email.rsplit("@", 1)[1]
    if domain in DISPOSABLE_EMAIL_DOMAINS:
        return _invalid("Disposable email addresses are not allowed")
    if domain.endswith(SUSPICIOUS_TLDS):
        return _invalid("This email domain is not accepted")
    return ValidationResult(valid=True, normalized=email)
