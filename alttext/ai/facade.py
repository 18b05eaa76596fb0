"""Caller-facing service: wires gateway, providers, and orchestrator from Settings."""

import logging
from typing import Any

import requests

from alttext.ai.gateway import GatewayError, InferenceGateway
from alttext.ai.mock import get_mock_result
from alttext.ai.orchestrator import FallbackOrchestrator
from alttext.ai.providers import build_providers
from alttext.ai.schema import AnalysisResult, Capability
from alttext.core.config import Settings
from alttext.core.errors import AltTextError

_log = logging.getLogger(__name__)


class GenerationUnavailableError(AltTextError):
    """Image generation cannot be attempted (no credential or no text-to-image provider)."""


class AltTextService:
    """
    Single entry point for the HTTP layer and CLI.

    analyze() always returns some AnalysisResult (live or mock). generate() has no mock
    image: a provider failure propagates as GatewayError.
    """

    def __init__(
        self,
        settings: Settings,
        gateway: InferenceGateway | None = None,
        orchestrator: FallbackOrchestrator | None = None,
    ) -> None:
        self.settings = settings
        self.gateway = gateway or InferenceGateway.from_settings(settings)
        self.orchestrator = orchestrator or FallbackOrchestrator(
            build_providers(settings, self.gateway),
            enrich_only_after_caption=settings.enrich_only_after_caption,
        )

    def analyze(self, image_bytes: bytes) -> AnalysisResult:
        if not self.settings.has_credential:
            _log.warning(
                "No inference API token configured (HUGGINGFACE_API_TOKEN); returning mock result"
            )
            return get_mock_result()
        return self.orchestrator.analyze(image_bytes)

    def generate(self, prompt: str) -> bytes:
        """Return PNG bytes for the prompt from the first text-to-image provider (single attempt)."""
        if not self.settings.has_credential:
            raise GenerationUnavailableError("No inference API token configured")
        providers = self.settings.provider_lists.text_to_image
        if not providers:
            raise GenerationUnavailableError("No text-to-image provider configured")
        provider_id = providers[0]
        _log.info("Requesting image from %s", provider_id)
        image = self.gateway.call(provider_id, {"inputs": prompt}, Capability.text_to_image)
        if not image:
            raise GatewayError(
                f"{provider_id} returned an empty image",
                provider_id=provider_id,
                capability=Capability.text_to_image,
            )
        return image

    def check_status(self) -> dict[str, Any]:
        """Report whether the inference host is reachable: online, offline, or error."""
        try:
            online = self.gateway.check_status(self.settings.status_url)
        except requests.RequestException as e:
            return {"status": "error", "message": str(e)}
        return {"status": "online" if online else "offline"}
