"""Placeholder result used when no live provider can answer."""

from alttext.ai.schema import AnalysisResult

MOCK_ALT_TEXT = "Example image showing content that would normally be analyzed by AI"
MOCK_CAPTION = (
    "This is a placeholder caption for demonstration purposes. In production, this would be "
    "replaced with AI-generated analysis describing the content, context, and details of the "
    "uploaded image."
)


def get_mock_result() -> AnalysisResult:
    """Return the constant mock result (a fresh copy each call, always equal)."""
    return AnalysisResult(altText=MOCK_ALT_TEXT, caption=MOCK_CAPTION)
