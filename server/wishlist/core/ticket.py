"""Ticket references attached to feature requests.

A ticket reference is entered as either a full issue-tracker URL or a short
ticket key such as ``PROJ-123``. It is parsed into a :class:`TicketRef` at the
validation boundary and only collapsed into the single stored string when the
feature is saved, which is also where ticket keys are expanded against the
configured tracker base URL.
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

TICKET_KEY_PATTERN = re.compile(r"[A-Z][A-Z0-9]+-\d+")
ALLOWED_URL_SCHEMES = {"http", "https"}
MAX_TICKET_URL_LENGTH = 500


class InvalidTicketReferenceError(ValueError):
    """Raised when a value is neither blank, an http(s) URL, nor a ticket key."""


class TicketRefKind(str, Enum):
    EMPTY = "empty"
    URL = "url"
    TICKET_KEY = "ticket_key"


def looks_like_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


def looks_like_ticket_key(value: str) -> bool:
    return TICKET_KEY_PATTERN.fullmatch(value) is not None


def expand_ticket_key(key: str, base_url: str) -> str:
    """Join a ticket key onto the tracker base URL."""
    if base_url.endswith("/"):
        return base_url + key
    return f"{base_url}/{key}"


@dataclass(frozen=True)
class TicketRef:
    kind: TicketRefKind
    value: str | None = None

    def to_stored(self, base_url: str | None = None) -> str | None:
        """Collapse the reference into the value persisted on the feature.

        Ticket keys are expanded only when a non-blank base URL is given;
        otherwise the key itself is stored.
        """
        if self.kind == TicketRefKind.EMPTY:
            return None
        if self.kind == TicketRefKind.TICKET_KEY and base_url and base_url.strip():
            return expand_ticket_key(self.value, base_url.strip())
        return self.value


EMPTY_TICKET = TicketRef(TicketRefKind.EMPTY)


def parse_ticket_ref(raw: str | None) -> TicketRef:
    """Classify raw user input as an empty, URL or ticket-key reference."""
    if raw is None or not raw.strip():
        return EMPTY_TICKET

    value = raw.strip()
    if len(value) > MAX_TICKET_URL_LENGTH:
        raise InvalidTicketReferenceError(
            f"Ticket reference must be at most {MAX_TICKET_URL_LENGTH} characters"
        )
    if looks_like_url(value):
        return TicketRef(TicketRefKind.URL, value)
    if looks_like_ticket_key(value):
        return TicketRef(TicketRefKind.TICKET_KEY, value)
    raise InvalidTicketReferenceError(
        "Ticket must be a valid http(s) URL or a ticket key like PROJ-123"
    )
