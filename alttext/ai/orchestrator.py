"""Fallback orchestrator: try each capability's providers in order until one is usable."""

import logging
from typing import Mapping, Sequence

from alttext.ai.mock import get_mock_result
from alttext.ai.providers import BaseProvider
from alttext.ai.schema import AnalysisResult, Capability, CapabilityOutcome
from alttext.ai.text import format_alt_text, format_caption

_log = logging.getLogger(__name__)


class FallbackOrchestrator:
    """
    Runs the caption, analysis, and classification capabilities for one image.

    Provider attempts are strictly sequential; the first usable result in a list wins
    and later providers in that list are never called. With enrich_only_after_caption
    set, analysis and classification are skipped when no caption provider succeeded.
    """

    def __init__(
        self,
        providers: Mapping[Capability, Sequence[BaseProvider]],
        *,
        enrich_only_after_caption: bool = True,
    ) -> None:
        self._providers = {cap: tuple(items) for cap, items in providers.items()}
        self.enrich_only_after_caption = enrich_only_after_caption

    def providers_for(self, capability: Capability) -> tuple[BaseProvider, ...]:
        return self._providers.get(capability, ())

    def run_capability(self, capability: Capability, payload: bytes | dict) -> CapabilityOutcome:
        outcome = CapabilityOutcome(capability=capability)
        for provider in self.providers_for(capability):
            outcome.attempts += 1
            attempt = provider.attempt(payload)
            if attempt.error is not None:
                _log.warning(
                    "%s provider %s failed: %s", capability.value, provider.provider_id, attempt.error
                )
                continue
            if not attempt.usable:
                _log.warning(
                    "%s provider %s returned no usable field", capability.value, provider.provider_id
                )
                continue
            result = attempt.result
            outcome.succeeded = True
            outcome.provider_id = provider.provider_id
            outcome.text = result.text
            outcome.labels = list(result.labels)
            outcome.score = result.score
            _log.info("%s succeeded via %s", capability.value, provider.provider_id)
            return outcome
        _log.warning(
            "%s: all %d provider(s) failed", capability.value, len(self.providers_for(capability))
        )
        return outcome

    def analyze(self, image_bytes: bytes) -> AnalysisResult:
        """Return alt text and caption for the image, or the mock result if captioning fails."""
        caption = self.run_capability(Capability.caption, image_bytes)

        if caption.succeeded or not self.enrich_only_after_caption:
            analysis = self.run_capability(Capability.analysis, image_bytes)
            classification = self.run_capability(Capability.classification, image_bytes)
        else:
            _log.info("Caption unavailable; skipping analysis and classification")
            analysis = CapabilityOutcome(capability=Capability.analysis)
            classification = CapabilityOutcome(capability=Capability.classification)

        if not caption.succeeded:
            _log.warning("No caption provider succeeded; falling back to mock result")
            return get_mock_result()

        extra: dict[str, float] = {}
        if classification.score is not None:
            extra["confidence"] = classification.score

        alt_text = format_alt_text(caption.text)
        if not alt_text:
            # caption was only "."; nothing left to describe the image with
            return get_mock_result()
        return AnalysisResult(
            altText=alt_text,
            caption=format_caption(analysis.text, caption.text, classification.labels),
            **extra,
        )
