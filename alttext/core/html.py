"""Render the <figure> snippet users paste into their pages."""

from jinja2 import Environment, PackageLoader, select_autoescape

_env = Environment(
    loader=PackageLoader("alttext.core", "templates"),
    autoescape=select_autoescape(["html"]),
    keep_trailing_newline=False,
)


def generate_html_snippet(image_name: str, alt_text: str, caption: str) -> str:
    """Return a <figure> with the image, its alt text, and the caption as <figcaption>.

    Values are HTML-escaped, so quotes in alt text cannot break the attribute.
    """
    template = _env.get_template("figure.html")
    return template.render(image_name=image_name, alt_text=alt_text, caption=caption).strip()
