# reunion/utils/http.py
from typing import Iterable
from fastapi import Request


def client_identifier(request: Request) -> str:
    """
    Rate-limit key for a caller: first hop of X-Forwarded-For (the original
    client behind the proxy), else the socket peer, else 'unknown'.
    """
    fwd = request.headers.get("x-forwarded-for", "")
    first = fwd.split(",")[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def origin_allowed(origin: str, allowed: Iterable[str]) -> bool:
    """
    True when there is no Origin header, the allow-list is empty, or the
    origin contains one of the allowed substrings (e.g. 'localhost', 'myapp.vercel.app').
    """
    allowed = [a for a in allowed if a]
    if not origin or not allowed:
        return True
    return any(a in origin for a in allowed)
