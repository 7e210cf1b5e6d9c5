"""Pseudonymous voter ids carried in a long-lived browser cookie.

The voter id is independent of login: a browser keeps the same id across
sessions and accounts for as long as the cookie lives.
"""

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field

from fastapi import Request, Response

from wishlist.core.config import get_settings

MAX_VOTER_ID_LENGTH = 64
VOTER_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class RequestContext:
    """The parts of an incoming request the vote ledger needs."""

    cookies: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request) -> "RequestContext":
        return cls(cookies=dict(request.cookies))


@dataclass(frozen=True)
class VoterIdentity:
    voter_id: str
    is_new: bool = False


def _is_well_formed(value: str | None) -> bool:
    if not value or len(value) > MAX_VOTER_ID_LENGTH:
        return False
    return VOTER_ID_PATTERN.fullmatch(value) is not None


def new_voter_id() -> str:
    return str(uuid.uuid4())


def resolve_voter_identity(context: RequestContext, cookie_name: str | None = None) -> VoterIdentity:
    """Reuse the caller's voter-id cookie, or mint a fresh id when it is missing or malformed."""
    name = cookie_name or get_settings().voter_cookie_name
    existing = context.cookies.get(name)
    if _is_well_formed(existing):
        return VoterIdentity(voter_id=existing)
    return VoterIdentity(voter_id=new_voter_id(), is_new=True)


def issue_voter_cookie(response: Response, identity: VoterIdentity) -> None:
    """Persist a newly minted voter id on the client (1 year, whole site)."""
    if not identity.is_new:
        return
    settings = get_settings()
    response.set_cookie(
        key=settings.voter_cookie_name,
        value=identity.voter_id,
        max_age=settings.voter_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
