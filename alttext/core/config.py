"""Application configuration (Pydantic v2). Load from alttext_config.yml with optional env override."""

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

from alttext.core.file_extensions import IMAGE_EXTENSIONS_LIST

DEFAULT_CONFIG_ENV_VAR = "ALTTEXT_CONFIG"
DEFAULT_CONFIG_FILENAME = "alttext_config.yml"
TOKEN_ENV_VAR = "HUGGINGFACE_API_TOKEN"
PORT_ENV_VAR = "PORT"

DEFAULT_INFERENCE_BASE_URL = "https://api-inference.huggingface.co/models"
DEFAULT_STATUS_URL = "https://api-inference.huggingface.co"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ProviderLists(BaseModel):
    """
    Ordered provider identifiers per capability.

    Order encodes preference: the first entry is tried first. Identifiers are
    model ids appended to inference_base_url.
    """

    model_config = {"extra": "ignore", "frozen": True}

    caption: tuple[str, ...] = (
        "Salesforce/blip-image-captioning-base",
        "Salesforce/blip-image-captioning-large",
        "nlpconnect/vit-gpt2-image-captioning",
    )
    analysis: tuple[str, ...] = (
        "microsoft/git-large-coco",
        "Salesforce/blip-image-captioning-large",
    )
    classification: tuple[str, ...] = (
        "google/vit-base-patch16-224",
        "microsoft/resnet-50",
    )
    text_to_image: tuple[str, ...] = ("stabilityai/stable-diffusion-xl-base-1.0",)

    def for_capability(self, capability: str) -> tuple[str, ...]:
        return getattr(self, capability)


class Settings(BaseModel):
    """
    Service config loaded from YAML.

    api_token may be overridden by HUGGINGFACE_API_TOKEN (and port by PORT) when loading
    the default config. Settings are frozen: read once at process start, never reloaded.
    """

    model_config = {"extra": "ignore", "frozen": True}

    api_token: str | None = None
    inference_base_url: str = DEFAULT_INFERENCE_BASE_URL
    status_url: str = DEFAULT_STATUS_URL
    provider_lists: ProviderLists = Field(default_factory=ProviderLists)
    analysis_timeout_seconds: float = 30.0
    generation_timeout_seconds: float = 120.0
    enrich_only_after_caption: bool = True
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    allowed_extensions: tuple[str, ...] = tuple(IMAGE_EXTENSIONS_LIST)
    frontend_dir: str = "dist"
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: tuple[str, ...] = ("http://localhost:5173", "http://127.0.0.1:5173")
    log_level: str = "INFO"

    @field_validator("api_token", mode="before")
    @classmethod
    def blank_token_is_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return tuple(e.lower() if e.startswith(".") else f".{e.lower()}" for e in v)
        return v

    @property
    def has_credential(self) -> bool:
        return self.api_token is not None


_config: Settings | None = None


class ConfigLoader:
    """
    Helper responsible for loading Settings from YAML and environment.

    - load_from_yaml(path, apply_env_override): read a YAML file and optionally apply env overrides.
    - load_default(): resolve the default config path from ALTTEXT_CONFIG / alttext_config.yml and
      apply HUGGINGFACE_API_TOKEN and PORT overrides when present.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        if self._env.get(TOKEN_ENV_VAR):
            overrides["api_token"] = self._env[TOKEN_ENV_VAR]
        if self._env.get(PORT_ENV_VAR):
            overrides["port"] = self._env[PORT_ENV_VAR]
        return overrides

    def load_from_yaml(self, path: Path, apply_env_override: bool) -> Settings:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f)
        if not data:
            data = {}
        if apply_env_override:
            data.update(self._env_overrides())
        return Settings.model_validate(data)

    def load_default(self) -> Settings:
        """
        Load the default Settings, using ALTTEXT_CONFIG or alttext_config.yml.

        The token is normally supplied through the environment so it never has to be
        written to the YAML file.
        """
        path_str = self._env.get(DEFAULT_CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILENAME
        path = Path(path_str)
        if path.exists():
            return self.load_from_yaml(path, apply_env_override=True)
        return Settings.model_validate(self._env_overrides())


_loader = ConfigLoader()


def get_config(config_path: str | Path | None = None, *, apply_env_override: bool = False) -> Settings:
    """
    Return singleton config.

    - If config_path is given, load from it (env overrides only when apply_env_override) and update the cache.
    - Otherwise, return the cached config if available, or load via ConfigLoader.load_default().
    """
    global _config
    if config_path is not None:
        _config = _loader.load_from_yaml(Path(config_path), apply_env_override=apply_env_override)
        return _config
    if _config is not None:
        return _config
    _config = _loader.load_default()
    return _config


def reset_config() -> None:
    """Clear cached config (for tests)."""
    global _config
    _config = None
