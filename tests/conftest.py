"""Pytest fixtures: settings, in-memory images, scripted providers, and app cache reset."""

import io

import pytest
from PIL import Image

from alttext.ai.normalizer import UNUSABLE, NormalizedText
from alttext.ai.providers import BaseProvider
from alttext.ai.schema import Capability, ProviderAttempt
from alttext.core.config import Settings


def clear_app_caches() -> None:
    """
    Clear the app's config and service caches. Call this in any fixture that changes
    the environment or config file so the API builds a fresh service.
    """
    from alttext.api.main import _get_service
    from alttext.core import config as config_module

    config_module._config = None  # type: ignore[attr-defined]
    _get_service.cache_clear()


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


class ScriptedProvider(BaseProvider):
    """
    Provider that replays a fixed outcome and counts calls.

    outcome is an Exception (recorded as a failed call), None (unusable response),
    a str (usable text), or a list of str (usable labels).
    """

    def __init__(self, provider_id: str, capability: Capability, outcome=None, score=None) -> None:
        super().__init__(provider_id, capability)
        self.outcome = outcome
        self.score = score
        self.calls: list[bytes | dict] = []

    def attempt(self, payload):
        self.calls.append(payload)
        attempt = ProviderAttempt(provider_id=self.provider_id, capability=self.capability)
        if isinstance(self.outcome, Exception):
            attempt.error = self.outcome
            return attempt
        if self.outcome is None:
            attempt.raw = {"unexpected": True}
            attempt.result = UNUSABLE
            return attempt
        if isinstance(self.outcome, list):
            attempt.result = NormalizedText(labels=tuple(self.outcome), score=self.score)
        else:
            attempt.result = NormalizedText(text=self.outcome)
        attempt.raw = self.outcome
        attempt.usable = True
        return attempt


@pytest.fixture
def settings() -> Settings:
    return Settings(api_token="test-token")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def clean_app(monkeypatch, tmp_path):
    """Run with no token, no config file, and an empty frontend dir; reset caches around the test."""
    monkeypatch.delenv("HUGGINGFACE_API_TOKEN", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.setenv("ALTTEXT_CONFIG", str(tmp_path / "missing.yml"))
    clear_app_caches()
    yield
    clear_app_caches()
