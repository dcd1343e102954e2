"""httpx client builder.

Scope:
- Standardizes timeouts, headers and base URL for every API call.
- Tests substitute a `transport` (e.g. `httpx.MockTransport`).
- Built-in services mutate the default headers of the client built here.
"""

from __future__ import annotations

import httpx

from apiconsole.core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    base_url: str | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the `httpx.AsyncClient` shared by every call target of a session.

    Default headers set here can later be changed by the built-in `Utility`
    and `Authentication` services.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )

