"""Deterministic post-processing of model text into alt text and captions."""

ALT_TEXT_MAX_LENGTH = 125
ELLIPSIS = "..."
BOILERPLATE_PREFIXES = ("Caption: ", "Description: ", "Image shows: ")


def format_alt_text(text: str) -> str:
    """Trim, drop one trailing period, capitalize, and cap at 125 characters."""
    alt = text.strip()
    if alt.endswith("."):
        alt = alt[:-1]
    alt = alt[:1].upper() + alt[1:]
    if len(alt) > ALT_TEXT_MAX_LENGTH:
        alt = alt[: ALT_TEXT_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return alt


def strip_boilerplate(text: str) -> str:
    """Remove one known model prefix such as 'Caption: ' from the start of text."""
    for prefix in BOILERPLATE_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def format_caption(detailed_text: str, basic_caption: str, labels: list[str] | tuple[str, ...]) -> str:
    """
    Prefer the detailed analysis when it is longer than the basic caption.

    Otherwise return the basic caption, with classification labels appended as
    ", The image contains: a, b." when there are any.
    """
    if detailed_text and len(detailed_text) > len(basic_caption):
        return strip_boilerplate(detailed_text)
    caption = basic_caption
    if labels:
        caption += f", The image contains: {', '.join(labels)}."
    return caption
