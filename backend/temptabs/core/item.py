"""Item: the saved-link record and its derived domain.

Invariants:
    - Item is frozen: every change goes through dataclasses.replace and yields a new value
    - domain is computed once at creation from url; it is never recomputed on edit
    - expires_at None means pinned (never expires)
    - expiry_preset is an advisory UI label, never consulted for expiry decisions
"""

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class Item:
    """One saved link.

    added_at == 0 means "never recorded": records stored without addedAt decode
    to 0, and expiry anchoring treats 0 as unknown (see set_item_expiry).
    """

    id: str
    url: str
    title: str
    domain: str
    added_at: int
    expires_at: int | None = None
    expiry_preset: str | None = None

    @property
    def pinned(self) -> bool:
        return self.expires_at is None


def domain_from_url(url: str) -> str:
    """Lowercase hostname with a leading 'www.' stripped; '' when url is unparseable."""
    try:
        host = urlsplit(url).hostname
    except (ValueError, TypeError, AttributeError):
        return ""
    if not host:
        return ""
    return host[4:] if host.startswith("www.") else host
