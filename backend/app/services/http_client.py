# backend/app/services/http_client.py
"""
Shared construction of outbound httpx clients.

Clients carry only transport settings (timeout, user agent, redirects).
Credentials are passed per request by the caller so one client can be used
from several threads for different tokens.
"""

import httpx

DEFAULT_USER_AGENT = "ynab-investments-sync/1.0"


def build_http_client(
        timeout: float = 10.0,
        base_url: str = "",
        transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """
    Create a synchronous httpx client with a fixed per-request timeout.

    Args:
        timeout: Seconds allowed for connect, read and write of each request
        base_url: Optional base URL that relative request paths resolve against
        transport: Custom transport (tests pass httpx.MockTransport)
    """
    return httpx.Client(
        base_url=base_url,
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": DEFAULT_USER_AGENT},
        follow_redirects=True,
        transport=transport,
    )
