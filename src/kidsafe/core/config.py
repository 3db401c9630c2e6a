"""Configuration system for Kid-Safe Media.

Layered config loading (lowest to highest priority):
1. config/default.toml (shipped with package)
2. ~/.config/kidsafe/config.toml (user-level)
3. ./kidsafe.toml (project-level)
4. Environment variables (KIDSAFE_WHISPER__LOCAL_MODEL, etc.)
5. CLI flags
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_DEFAULT_CONFIG = _PACKAGE_ROOT / "config" / "default.toml"
_USER_CONFIG = Path.home() / ".config" / "kidsafe" / "config.toml"
_PROJECT_CONFIG = Path("kidsafe.toml")


class WhisperConfig(BaseModel):
    backend: str = "local"  # "local" or "api"
    local_model: str = "small.en"
    api_model: str = "groq/whisper-large-v3-turbo"
    api_base: str | None = None  # Custom API endpoint (e.g. self-hosted Whisper)
    language: str = "en"
    device: str = "auto"

    @property
    def model(self) -> str:
        """Return the model for the active backend."""
        return self.api_model if self.backend == "api" else self.local_model


class MediaConfig(BaseModel):
    speech_sample_rate: int = 16000  # transcription track only
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    reencode_cuts: bool = False  # frame-accurate cuts at the cost of a video re-encode
    sync_tolerance: float = 0.1  # seconds


class KidSafeConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KIDSAFE_",
        env_nested_delimiter="__",
    )

    whisper: WhisperConfig = WhisperConfig()
    media: MediaConfig = MediaConfig()
    profiles_dir: Path | None = None
    cache_dir: Path = Path.home() / ".cache" / "kidsafe"
    use_cache: bool = True

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # CLI overrides > env vars > TOML layers > field defaults
        return init_settings, env_settings, _TomlLayers(settings_cls)


class _TomlLayers(PydanticBaseSettingsSource):
    """The merged TOML files as a settings source ranked below env vars."""

    def get_field_value(self, field, field_name):
        return None, field_name, False

    def __call__(self) -> dict:
        return _load_layers()


def _load_toml(path: Path) -> dict:
    """Load a TOML file if it exists, return empty dict otherwise."""
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_layers() -> dict:
    config_data: dict = {}
    for path in (_DEFAULT_CONFIG, _USER_CONFIG, _PROJECT_CONFIG):
        layer = _load_toml(path)
        config_data = _deep_merge(config_data, layer)

    # Flatten 'general' section into top-level
    if "general" in config_data:
        general = config_data.pop("general")
        config_data = _deep_merge(config_data, general)
    return config_data


def load_config(**cli_overrides: object) -> KidSafeConfig:
    """Load configuration from all layers and merge.

    Args:
        **cli_overrides: Direct overrides from CLI flags. Keys can be
            dot-separated (e.g. whisper.local_model="medium.en").
    """
    overrides: dict = {}
    for key, value in cli_overrides.items():
        if value is None:
            continue
        parts = key.split(".")
        target = overrides
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = value

    # TOML layers and env vars are read by the settings sources
    return KidSafeConfig(**overrides)
