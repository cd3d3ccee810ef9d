from starlette.requests import Request

from reunion.utils.http import client_identifier, origin_allowed


def _request(headers=None, client=("203.0.113.5", 5000)):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/photos",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


def test_client_identifier_prefers_first_forwarded_hop():
    req = _request({"X-Forwarded-For": "198.51.100.7, 10.0.0.1"})
    assert client_identifier(req) == "198.51.100.7"


def test_client_identifier_falls_back_to_peer_then_unknown():
    assert client_identifier(_request()) == "203.0.113.5"
    assert client_identifier(_request(client=None)) == "unknown"


def test_origin_allowed():
    assert origin_allowed("", ["localhost"])
    assert origin_allowed("https://evil.example", [])
    assert origin_allowed("http://localhost:3000", ["localhost"])
    assert origin_allowed("https://reunion.vercel.app", ["localhost", "reunion.vercel.app"])
    assert not origin_allowed("https://evil.example", ["localhost"])
