"""
core.api.envelope_client

Async HTTP helper for the PDF backend API. Every backend endpoint answers
with the same JSON envelope:

    {"success": true,  "data": {...}}
    {"success": false, "error": {"code": "...", "message": "..."}}

EnvelopeClient unwraps `data` on success and raises ApiEnvelopeError
otherwise. Transport-level failures (connection refused, timeouts) are left
as `httpx` exceptions so callers can tell them apart if they care to.

Used by:
  - core/extraction/ocr_backend.py
  - runtime/transport/http_transport.py
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from exceptions.exceptions import ApiEnvelopeError


class EnvelopeClient:
    """Thin wrapper around `httpx.AsyncClient` for envelope-style endpoints.

    Parameters
    ----------
    base_url:
        API root, e.g. ``http://localhost:8080/api/v1``.
    token:
        Optional bearer token sent as ``Authorization: Bearer <token>``.
    default_timeout:
        Timeout in seconds used when a call does not pass its own.
    transport:
        Optional ``httpx`` transport. Tests pass an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        default_timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.default_timeout = default_timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self, timeout: Optional[float]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=timeout if timeout is not None else self.default_timeout,
            transport=self._transport,
        )

    async def post_json(
        self,
        path: str,
        payload: Dict[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        """POST a JSON body and return the envelope's `data`."""
        async with self._client(timeout) as client:
            response = await client.post(path, json=payload)
        return unwrap_envelope(response)

    async def post_file(
        self,
        path: str,
        *,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf",
        field: str = "file",
        timeout: Optional[float] = None,
    ) -> Any:
        """POST a single file as multipart form data and return `data`."""
        files = {field: (filename, content, content_type)}
        async with self._client(timeout) as client:
            response = await client.post(path, files=files)
        return unwrap_envelope(response)


def unwrap_envelope(response: httpx.Response) -> Any:
    """Return `data` from a successful envelope or raise ApiEnvelopeError."""
    try:
        body = response.json()
    except ValueError:
        raise ApiEnvelopeError(
            "INVALID_RESPONSE",
            "Response body is not valid JSON.",
            status_code=response.status_code,
        )

    if not isinstance(body, dict):
        raise ApiEnvelopeError(
            "INVALID_RESPONSE",
            "Response body is not a JSON object.",
            status_code=response.status_code,
        )

    if response.is_success and body.get("success") is True:
        return body.get("data")

    error = body.get("error") or {}
    if not isinstance(error, dict):
        error = {"message": str(error)}
    raise ApiEnvelopeError(
        error.get("code") or f"HTTP_{response.status_code}",
        error.get("message") or "Request failed.",
        status_code=response.status_code,
    )
