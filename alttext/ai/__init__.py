"""AI module: data contracts, provider fallback, and text post-processing."""

from alttext.ai.schema import AnalysisResult, Capability, CapabilityOutcome, ProviderAttempt
from alttext.ai.mock import get_mock_result
from alttext.ai.facade import AltTextService, GenerationUnavailableError

__all__ = [
    "AltTextService",
    "AnalysisResult",
    "Capability",
    "CapabilityOutcome",
    "GenerationUnavailableError",
    "ProviderAttempt",
    "get_mock_result",
]
