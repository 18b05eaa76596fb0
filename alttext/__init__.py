"""Alt Text Studio: AI alt text, captions, and text-to-image over hosted inference endpoints."""

__version__ = "0.1.0"
