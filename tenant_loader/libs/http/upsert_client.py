"""HTTP client for PUT/POST upserts against the tenant's endpoints.

Only `X-`/`x-` prefixed request headers are forwarded, verbatim. Every
request carries a JSON body and accepts JSON or plain-text responses.
"""

from __future__ import annotations

from typing import Mapping

import httpx

from tenant_loader.core.errors import UpsertError

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/plain",
}


def forwarded_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Keep `X-`/`x-` headers and add the JSON content headers."""

    out: dict[str, str] = {}
    for key, value in (headers or {}).items():
        if key.startswith("X-") or key.startswith("x-"):
            out[key] = value
    out.update(JSON_HEADERS)
    return out


class UpsertClient:
    """Sends upsert requests over a shared `httpx.Client`.

    The underlying client is opened by `__enter__` and closed by `__exit__`;
    it is safe to share between worker threads while open.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self.headers = forwarded_headers(headers)
        self.timeout = float(timeout if timeout is not None else self.DEFAULT_TIMEOUT)
        self._http: httpx.Client | None = None
        self._client: httpx.Client | None = None

    def __enter__(self) -> "UpsertClient":
        self._http = httpx.Client(timeout=self.timeout)
        self._client = self._http.__enter__()
        return self

    def __exit__(self, *exc_info) -> None:
        http, self._http, self._client = self._http, None, None
        if http is not None:
            http.__exit__(*exc_info)

    def send(self, method: str, url: str, content: str) -> int:
        """Send one request and return its status code.

        Raises:
            UpsertError: the request could not be sent or no response arrived.
        """

        if self._client is None:
            raise RuntimeError("UpsertClient is not open; use it as a context manager")

        try:
            body = content.encode("utf-8")
        except UnicodeEncodeError as error:
            raise UpsertError(method, url, reason=f"Encoding of body failed: {error}") from error

        try:
            response = self._client.request(
                method,
                url,
                headers=self.headers,
                content=body,
            )
        except httpx.RequestError as error:
            raise UpsertError(method, url, reason=str(error)) from error

        return int(response.status_code)
