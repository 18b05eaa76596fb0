"""Remote inference gateway: one HTTP POST to one named model endpoint.

Uses a persistent requests.Session with connection pooling so concurrent requests
share sockets to the inference host. No retries here: fallback happens by trying
the next provider, never by re-calling the same one.
"""

import logging
from typing import Any

import requests

from alttext.ai.schema import Capability
from alttext.core.config import Settings
from alttext.core.errors import AltTextError

_log = logging.getLogger(__name__)


class GatewayError(AltTextError):
    """Network failure, timeout, or non-2xx status from a provider."""

    def __init__(
        self,
        message: str,
        *,
        provider_id: str,
        capability: Capability,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider_id = provider_id
        self.capability = capability
        self.status_code = status_code


class InferenceGateway:
    """Issues calls to {base_url}/{provider_id} with a bearer token."""

    def __init__(
        self,
        base_url: str,
        api_token: str | None,
        *,
        analysis_timeout: float = 30.0,
        generation_timeout: float = 120.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._analysis_timeout = analysis_timeout
        self._generation_timeout = generation_timeout
        if session is None:
            session = requests.Session()
            adapter = requests.adapters.HTTPAdapter(pool_connections=10, pool_maxsize=20)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self._session = session

    @classmethod
    def from_settings(cls, settings: Settings) -> "InferenceGateway":
        return cls(
            settings.inference_base_url,
            settings.api_token,
            analysis_timeout=settings.analysis_timeout_seconds,
            generation_timeout=settings.generation_timeout_seconds,
        )

    def timeout_for(self, capability: Capability) -> float:
        return self._analysis_timeout if capability.is_vision else self._generation_timeout

    def _headers(self, capability: Capability) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        if capability.is_vision:
            headers["Content-Type"] = "application/octet-stream"
        else:
            headers["Content-Type"] = "application/json"
            headers["Accept"] = "image/png"
        return headers

    def call(self, provider_id: str, payload: bytes | dict, capability: Capability) -> Any:
        """
        POST payload to the provider and return its raw response.

        Vision capabilities send raw bytes and get back parsed JSON, the decoded text for a
        text/plain body, or None for any other body (an HTML error page, say).
        Text-to-image sends JSON and gets back raw bytes.
        Raises GatewayError on network failure, timeout, or non-2xx status.
        """
        url = f"{self._base_url}/{provider_id.lstrip('/')}"
        timeout = self.timeout_for(capability)
        kwargs: dict[str, Any] = {"headers": self._headers(capability), "timeout": timeout}
        if capability.is_vision:
            kwargs["data"] = payload
        else:
            kwargs["json"] = payload

        try:
            resp = self._session.post(url, **kwargs)
            resp.raise_for_status()
        except requests.Timeout as e:
            raise GatewayError(
                f"{provider_id} timed out after {timeout:g}s",
                provider_id=provider_id,
                capability=capability,
            ) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text[:200] if e.response is not None else ""
            raise GatewayError(
                f"{provider_id} returned HTTP {status}: {body}",
                provider_id=provider_id,
                capability=capability,
                status_code=status,
            ) from e
        except requests.RequestException as e:
            raise GatewayError(
                f"{provider_id} unreachable: {e}",
                provider_id=provider_id,
                capability=capability,
            ) from e

        if not capability.is_vision:
            return resp.content
        try:
            return resp.json()
        except ValueError:
            pass
        content_type = resp.headers.get("Content-Type", "")
        if content_type.split(";")[0].strip().lower() == "text/plain":
            return resp.text
        _log.warning(
            "%s returned a non-JSON body (%s); ignoring it", provider_id, content_type or "no content type"
        )
        return None

    def check_status(self, status_url: str, timeout: float = 5.0) -> bool:
        """Return True when the inference host answers with a 2xx. Network errors propagate."""
        resp = self._session.get(status_url, timeout=timeout)
        return resp.ok
