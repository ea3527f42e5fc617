"""HTTP adapters for the registration backend.

Talks to the ``/api/form_return`` routes: the advisory phone-number check
and create/update of registrations.  Transport problems (timeouts, refused
connections, 5xx) raise :class:`TransportError`; answered rejections (4xx or
an ``error`` body) come back as an unsuccessful :class:`PersistenceResult`.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from pledge_form.core.logging import redact_phone
from pledge_form.lib.collaborators.base import PersistenceResult, TransportError
from pledge_form.schemas.submission import PartialSubmission

DEFAULT_TIMEOUT = 10.0

_FORM_RETURN_PATH = "/api/form_return"


class _BackendClient:
    """Shared ``httpx.AsyncClient`` handling and error translation."""

    service_name = "backend"

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, translating transport failures and 5xx into ``TransportError``."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("{} request timed out: {} {}", self.service_name, method, url)
            raise TransportError(self.service_name, "Request timed out") from e
        except httpx.TransportError as e:
            logger.warning("{} connection error: {} {}", self.service_name, method, url)
            raise TransportError(self.service_name, "Connection to backend failed") from e

        if response.status_code >= 500:
            logger.warning("{} HTTP error {}", self.service_name, response.status_code)
            raise TransportError(
                self.service_name,
                f"Backend returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(self.service_name, "Backend returned a non-JSON body", response.status_code) from e
        if not isinstance(data, dict):
            raise TransportError(self.service_name, "Backend returned an unexpected body", response.status_code)
        return data


class HttpPhoneChecker(_BackendClient):
    """``PhoneChecker`` backed by ``GET /api/form_return/check-phone``."""

    service_name = "phone-check"

    async def exists(self, phone: str, exclude_id: int | None = None) -> bool:
        """Ask the backend whether ``phone`` is already registered.

        Args:
            phone: Ten-digit phone number.
            exclude_id: Registration to ignore (the one being edited).

        Returns:
            True if another registration uses the number.

        Raises:
            TransportError: On transport, service or client errors.
        """
        params: dict[str, str | int] = {"phoneNumber": phone}
        if exclude_id is not None:
            params["excludeId"] = exclude_id

        response = await self._send("GET", f"{_FORM_RETURN_PATH}/check-phone", params=params)
        if response.status_code >= 400:
            raise TransportError(
                self.service_name,
                f"Backend returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        exists = bool(self._json(response).get("exists", False))
        logger.debug("Phone check for {}: exists={}", redact_phone(phone), exists)
        return exists


class HttpRegistrationStore(_BackendClient):
    """``RegistrationStore`` backed by ``POST``/``PUT /api/form_return``."""

    service_name = "registration-store"

    async def create(self, submission: PartialSubmission) -> PersistenceResult:
        """POST a new registration."""
        response = await self._send("POST", _FORM_RETURN_PATH, json=submission.to_payload())
        return self._to_result(response)

    async def update(self, registration_id: int, submission: PartialSubmission) -> PersistenceResult:
        """PUT over an existing registration."""
        response = await self._send("PUT", f"{_FORM_RETURN_PATH}/{registration_id}", json=submission.to_payload())
        return self._to_result(response)

    def _to_result(self, response: httpx.Response) -> PersistenceResult:
        """Map a backend response onto ``PersistenceResult``.

        The backend answers either with the stored record, with an action
        envelope ``{"success", "data", "error"}``, or with ``{"error"}``.  A
        4xx is always a rejection, whatever its body.
        """
        if response.status_code >= 400:
            return self._rejection(response.status_code, self._error_message(response))

        body = self._json(response)
        error = body.get("error")
        if error:
            message = error if isinstance(error, str) else None
            return self._rejection(response.status_code, message)

        if "success" in body:
            return PersistenceResult(success=bool(body["success"]), data=body.get("data"), error=body.get("error"))
        return PersistenceResult(success=True, data=body)

    def _rejection(self, status_code: int, message: str | None) -> PersistenceResult:
        logger.info("{} rejected submission: HTTP {}", self.service_name, status_code)
        return PersistenceResult(
            success=False,
            error=message or f"Backend rejected the request (HTTP {status_code})",
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        """Pull the reason out of a rejection body, JSON or plain text."""
        try:
            body = response.json()
        except ValueError:
            return response.text.strip() or None
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"] or None
        return None
