"""Pydantic data contracts for capabilities, provider attempts, and analysis results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Capability(str, Enum):
    """Category of inference task; each has its own ordered provider list."""

    caption = "caption"
    analysis = "analysis"
    classification = "classification"
    text_to_image = "text_to_image"

    @property
    def is_vision(self) -> bool:
        return self is not Capability.text_to_image


class AnalysisResult(BaseModel):
    """
    Externally visible result of analyzing an image.

    Providers may contribute extra string/number fields (e.g. confidence); consumers
    treat unknown keys as optional.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    alt_text: str = Field(alias="altText", min_length=1)
    caption: str = Field(min_length=1)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class CapabilityOutcome(BaseModel):
    """Result of running one capability's provider list to success or exhaustion."""

    capability: Capability
    succeeded: bool = False
    text: str = ""
    labels: list[str] = Field(default_factory=list)
    score: float | None = None
    provider_id: str | None = None
    attempts: int = 0


@dataclass
class ProviderAttempt:
    """One call to one provider. Not persisted; discarded after its capability loop."""

    provider_id: str
    capability: Capability
    raw: Any = None
    result: Any = None  # NormalizedText when usable
    error: Exception | None = None
    usable: bool = False
