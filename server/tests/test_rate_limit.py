"""Tests for the rate-limit bucket key and 429 response."""

from types import SimpleNamespace

import pytest

from wishlist.core import rate_limit
from wishlist.core.rate_limit import get_client_ip, rate_limit_exceeded_handler


def _request(peer: str, headers: dict[str, str] | None = None) -> SimpleNamespace:
    return SimpleNamespace(client=SimpleNamespace(host=peer), headers=headers or {})


@pytest.fixture
def trusted_proxy(monkeypatch):
    monkeypatch.setattr(
        rate_limit, "_get_trusted_proxies", lambda: (frozenset({"10.0.0.2"}), ())
    )


class TestClientIp:
    def test_direct_connection(self, trusted_proxy):
        assert get_client_ip(_request("203.0.113.5")) == "203.0.113.5"

    def test_forwarding_headers_ignored_from_untrusted_peer(self, trusted_proxy):
        request = _request(
            "203.0.113.5", {"X-Real-IP": "1.1.1.1", "X-Forwarded-For": "2.2.2.2"}
        )
        assert get_client_ip(request) == "203.0.113.5"

    def test_real_ip_from_trusted_proxy(self, trusted_proxy):
        request = _request("10.0.0.2", {"X-Real-IP": " 198.51.100.7 "})
        assert get_client_ip(request) == "198.51.100.7"

    def test_first_forwarded_entry_from_trusted_proxy(self, trusted_proxy):
        request = _request("10.0.0.2", {"X-Forwarded-For": "198.51.100.7, 10.0.0.1"})
        assert get_client_ip(request) == "198.51.100.7"


def test_exceeded_handler_sets_retry_after():
    response = rate_limit_exceeded_handler(_request("203.0.113.5"), None)
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
