"""httpx wrapper.

Why a builder:
- Standardizes base URL, basic auth, timeouts and headers for every API call.
- Tests pass an `httpx.MockTransport` instead of hitting the network.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings, BackupConfig


def build_client(
    settings: AppSettings | None = None,
    *,
    config: BackupConfig | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create a synchronous `httpx.Client` bound to the Harvest account.

    Credentials and account come from `config` when given (a backup run),
    otherwise straight from `settings` (diagnostics). Requests are issued one
    at a time; no retries are configured.
    """

    settings = settings or AppSettings()
    if config is not None:
        user, password, account = config.user, config.password, config.account
    else:
        user, password, account = settings.user or "", settings.password or "", settings.account

    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=settings.api_base_url(account),
        auth=httpx.BasicAuth(user, password),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
