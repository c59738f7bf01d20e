"""Unit tests for request session helpers."""

from fastapi import Request, Response

from discuss.config import Settings
from discuss.domain.service import SessionService
from discuss.interface.api.session import (
    MAX_ADDRESS_LENGTH,
    SESSION_COOKIE,
    client_address,
    store_session_tokens,
)


def _request(headers: dict[str, str] | None = None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [
                (key.lower().encode(), value.encode())
                for key, value in (headers or {}).items()
            ],
            "client": ("192.0.2.10", 50000),
        }
    )


class TestClientAddress:
    def test_uses_socket_peer_by_default(self):
        assert client_address(_request()) == "192.0.2.10"

    def test_prefers_first_forwarded_hop(self):
        request = _request({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"})

        assert client_address(request) == "203.0.113.5"

    def test_oversized_forwarded_hop_falls_back_to_peer(self):
        request = _request({"X-Forwarded-For": "a" * 500})

        address = client_address(request)

        assert address == "192.0.2.10"
        assert len(address) <= MAX_ADDRESS_LENGTH

    def test_forwarded_ipv6_is_normalized(self):
        request = _request({"X-Forwarded-For": "2001:DB8:0:0:0:0:0:1"})

        assert client_address(request) == "2001:db8::1"


class TestStoreSessionTokens:
    def test_sets_signed_http_only_cookie(self):
        settings = Settings()
        session_service = SessionService(settings.auth)
        response = Response()

        store_session_tokens(response, {"c1": "t1"}, session_service, settings)

        header = response.headers["set-cookie"]
        assert header.startswith(f"{SESSION_COOKIE}=")
        assert "httponly" in header.lower()
        cookie_value = header.split(";", 1)[0].split("=", 1)[1]
        assert session_service.load_tokens(cookie_value) == {"c1": "t1"}
