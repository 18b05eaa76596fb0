"""Provider strategies: one named endpoint per object, tried in order by the orchestrator."""

import logging
from abc import ABC, abstractmethod

from alttext.ai.gateway import GatewayError, InferenceGateway
from alttext.ai.normalizer import UNUSABLE, normalize
from alttext.ai.schema import Capability, ProviderAttempt
from alttext.core.config import Settings

_log = logging.getLogger(__name__)

VISION_CAPABILITIES = (Capability.caption, Capability.analysis, Capability.classification)


class BaseProvider(ABC):
    """A fallible supplier of one capability."""

    def __init__(self, provider_id: str, capability: Capability) -> None:
        self.provider_id = provider_id
        self.capability = capability

    @abstractmethod
    def attempt(self, payload: bytes | dict) -> ProviderAttempt:
        """Call the provider once; never raise for provider failures, record them on the attempt."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.provider_id!r}, {self.capability.value})"


class HostedModelProvider(BaseProvider):
    """Provider backed by a hosted model endpoint reached through the gateway."""

    def __init__(self, gateway: InferenceGateway, provider_id: str, capability: Capability) -> None:
        super().__init__(provider_id, capability)
        self._gateway = gateway

    def attempt(self, payload: bytes | dict) -> ProviderAttempt:
        attempt = ProviderAttempt(provider_id=self.provider_id, capability=self.capability)
        try:
            attempt.raw = self._gateway.call(self.provider_id, payload, self.capability)
        except GatewayError as e:
            attempt.error = e
            return attempt
        _log.debug("%s raw response: %.200r", self.provider_id, attempt.raw)
        normalized = normalize(attempt.raw, self.capability)
        if normalized is not UNUSABLE:
            attempt.result = normalized
            attempt.usable = True
        return attempt


def build_providers(
    settings: Settings, gateway: InferenceGateway
) -> dict[Capability, list[BaseProvider]]:
    """Return the ordered provider list for each vision capability, as configured."""
    return {
        capability: [
            HostedModelProvider(gateway, provider_id, capability)
            for provider_id in settings.provider_lists.for_capability(capability.value)
        ]
        for capability in VISION_CAPABILITIES
    }
