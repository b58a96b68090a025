"""Domain entities: Subscriber and ShortLink."""

from dataclasses import dataclass
from datetime import datetime, timezone


def isoformat(dt: datetime) -> str:
    """Format as UTC ISO-8601 with millisecond precision and a Z suffix."""
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Subscriber:
    """
    A newsletter recipient.
    phone_number and email are normalized; at least one of them is always present.
    date_joined is set once; last_updated is None until the first change.
    """

    id: str
    full_name: str
    date_joined: str
    phone_number: str | None = None
    email: str | None = None
    last_updated: str | None = None

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise ValueError("Subscriber id must be non-empty.")
        name = (self.full_name or "").strip()
        if not name:
            raise ValueError("Subscriber full_name must be non-empty.")
        object.__setattr__(self, "full_name", name)
        if not self.phone_number and not self.email:
            raise ValueError("Subscriber must have a phone number or an email.")

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys the admin UI reads. Absent fields are omitted."""
        out = {
            "id": self.id,
            "fullName": self.full_name,
            "phoneNumber": self.phone_number,
            "email": self.email,
            "dateJoined": self.date_joined,
            "lastUpdated": self.last_updated,
        }
        return {k: v for k, v in out.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict) -> "Subscriber":
        return cls(
            id=data["id"],
            full_name=data.get("fullName") or "",
            phone_number=data.get("phoneNumber") or None,
            email=data.get("email") or None,
            date_joined=data.get("dateJoined") or "",
            last_updated=data.get("lastUpdated") or None,
        )


@dataclass(frozen=True)
class ShortLink:
    """A short code pointing at a normalized URL."""

    code: str
    original_url: str
    created_at: str
    click_count: int = 0
    expires_at: str | None = None
    revoked: bool = False

    def __post_init__(self):
        if not self.code or not self.code.strip():
            raise ValueError("ShortLink code must be non-empty.")
        if not self.original_url:
            raise ValueError("ShortLink original_url must be non-empty.")
