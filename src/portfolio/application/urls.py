"""URL normalization so the same destination always maps to one short code."""

import logging
import re
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"https": 443, "http": 80}


def normalize_url(url: str) -> str:
    """Canonical lower-cased form: https:// added when missing; www. prefix, default port and trailing slashes dropped."""
    normalized = url.strip()
    if not _SCHEME.match(normalized):
        normalized = "https://" + normalized
    try:
        parts = urlsplit(normalized)
        hostname = parts.hostname or ""
        port = parts.port
    except ValueError as e:
        logger.warning("URL normalization failed for %r: %s", url, e)
        return normalized.lower()
    if not hostname:
        return normalized.lower()

    path = parts.path or "/"
    while path.endswith("/") and len(path) > 1:
        path = path[:-1]
    if hostname.startswith("www."):
        hostname = hostname[4:]
    netloc = hostname
    if port is not None and _DEFAULT_PORTS.get(parts.scheme.lower()) != port:
        netloc = f"{hostname}:{port}"
    query = f"?{parts.query}" if parts.query else ""
    fragment = f"#{parts.fragment}" if parts.fragment else ""
    return f"{parts.scheme}://{netloc}{path}{query}{fragment}".lower()
