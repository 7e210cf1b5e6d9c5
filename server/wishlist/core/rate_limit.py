"""Rate limiting for login and vote submission, built on slowapi."""

import ipaddress
from functools import lru_cache

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from wishlist.core.config import get_settings

# slowapi does not expose the window reset time to the handler; limits are per minute
DEFAULT_RETRY_AFTER_SECONDS = 60


@lru_cache(maxsize=1)
def _get_trusted_proxies() -> tuple[
    frozenset[str],
    tuple[ipaddress.IPv4Network | ipaddress.IPv6Network, ...],
]:
    """Return trusted proxy IPs and CIDR networks from settings (cached).

    ``TRUSTED_PROXIES`` is a comma-separated list mixing plain addresses
    (``10.0.0.2``) and networks (``172.16.0.0/12``).
    """
    settings = get_settings()
    exact = set()
    networks = []
    for entry in settings.trusted_proxies.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "/" in entry:
            # strict=False accepts host bits set, e.g. "10.0.0.1/8"
            networks.append(ipaddress.ip_network(entry, strict=False))
        else:
            exact.add(entry)
    return frozenset(exact), tuple(networks)


def _is_trusted_proxy(ip: str) -> bool:
    """True when ``ip`` is listed exactly or falls inside a trusted network."""
    exact, networks = _get_trusted_proxies()
    if ip in exact:
        return True
    if not networks:
        return False
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        # Test clients and unix sockets report non-IP peer names
        return False
    return any(addr in net for net in networks)


def get_client_ip(request: Request) -> str:
    """Resolve the address used as the rate-limit bucket key.

    Forwarding headers are only believed when the direct peer is a trusted
    proxy; otherwise any client could pick its own bucket per request.

    Order:
    1. X-Real-IP (the reverse proxy overwrites it with the connecting client)
    2. First X-Forwarded-For entry
    3. The direct connection address
    """
    direct_ip = get_remote_address(request)
    if not _is_trusted_proxy(direct_ip):
        return direct_ip

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    # The left-most entry is the original client; later ones are hops
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return direct_ip


# One shared limiter; routes opt in with @limiter.limit(...)
limiter = Limiter(key_func=get_client_ip, enabled=get_settings().is_rate_limit_enabled)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Answer 429 with a Retry-After hint instead of slowapi's plain-text default."""
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "retry_after": DEFAULT_RETRY_AFTER_SECONDS,
        },
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER_SECONDS)},
    )
