"""Extract a capability's text or labels from provider-specific response shapes.

Each recognized shape has its own parser; anything else is UNRECOGNIZED and
normalizes to UNUSABLE. normalize() never raises and never mutates its input.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Final

from alttext.ai.schema import Capability

MAX_LABELS = 3


class ResponseShape(Enum):
    """Known raw response layouts."""

    GENERATED_TEXT_LIST = "generated_text_list"  # [{"generated_text": ...}, ...]
    GENERATED_TEXT_OBJECT = "generated_text_object"  # {"generated_text": ...}
    BARE_STRING = "bare_string"  # "..."
    LABEL_LIST = "label_list"  # [{"label": ..., "score": ...}, ...] or ["...", ...]
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class NormalizedText:
    """Usable payload extracted from a provider response."""

    text: str = ""
    labels: tuple[str, ...] = field(default_factory=tuple)
    score: float | None = None


class _Unusable:
    """Sentinel type: the response had no usable field."""

    _instance: "_Unusable | None" = None

    def __new__(cls) -> "_Unusable":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNUSABLE"

    def __bool__(self) -> bool:
        return False


UNUSABLE: Final = _Unusable()

Normalized = NormalizedText | _Unusable


def detect_text_shape(raw: Any) -> ResponseShape:
    """Classify a caption/analysis response."""
    if isinstance(raw, str):
        return ResponseShape.BARE_STRING
    if isinstance(raw, dict) and "generated_text" in raw:
        return ResponseShape.GENERATED_TEXT_OBJECT
    if (
        isinstance(raw, (list, tuple))
        and len(raw) > 0
        and isinstance(raw[0], dict)
        and "generated_text" in raw[0]
    ):
        return ResponseShape.GENERATED_TEXT_LIST
    return ResponseShape.UNRECOGNIZED


def detect_label_shape(raw: Any) -> ResponseShape:
    """Classify a classification response."""
    if isinstance(raw, (list, tuple)) and len(raw) > 0:
        return ResponseShape.LABEL_LIST
    return ResponseShape.UNRECOGNIZED


def _text_or_unusable(value: Any) -> Normalized:
    if not isinstance(value, str) or not value.strip():
        return UNUSABLE
    return NormalizedText(text=value.strip())


def _parse_generated_text_list(raw: Any) -> Normalized:
    return _text_or_unusable(raw[0].get("generated_text"))


def _parse_generated_text_object(raw: Any) -> Normalized:
    return _text_or_unusable(raw.get("generated_text"))


def _parse_bare_string(raw: Any) -> Normalized:
    return _text_or_unusable(raw)


def _entry_label(entry: Any) -> Any:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        if "label" in entry:
            return entry["label"]
        return entry.get("generated_text")
    return None


def _parse_label_list(raw: Any) -> Normalized:
    labels: list[str] = []
    score: float | None = None
    for entry in raw:
        label = _entry_label(entry)
        if not isinstance(label, str) or not label.strip():
            continue
        if not labels and isinstance(entry, dict):
            s = entry.get("score")
            if isinstance(s, (int, float)) and not isinstance(s, bool):
                score = float(s)
        labels.append(label.strip())
        if len(labels) == MAX_LABELS:
            break
    if not labels:
        return UNUSABLE
    return NormalizedText(labels=tuple(labels), score=score)


_PARSERS: dict[ResponseShape, Callable[[Any], Normalized]] = {
    ResponseShape.GENERATED_TEXT_LIST: _parse_generated_text_list,
    ResponseShape.GENERATED_TEXT_OBJECT: _parse_generated_text_object,
    ResponseShape.BARE_STRING: _parse_bare_string,
    ResponseShape.LABEL_LIST: _parse_label_list,
}


def normalize(raw: Any, capability: Capability) -> Normalized:
    """Return NormalizedText for a usable response, else UNUSABLE."""
    if capability is Capability.classification:
        shape = detect_label_shape(raw)
    elif capability in (Capability.caption, Capability.analysis):
        shape = detect_text_shape(raw)
    else:
        shape = ResponseShape.UNRECOGNIZED
    parser = _PARSERS.get(shape)
    if parser is None:
        return UNUSABLE
    return parser(raw)
