"""CaptionOptions settings model for yt-captions."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
from pydantic_settings import YamlConfigSettingsSource


class CaptionOptions(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="YT_CAPTIONS_",
        yaml_file="yt_captions.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    cache_dir: Path = Path("~/.cache/yt-captions").expanduser()
    scratch_dir: Path | None = None
    ytdlp_command: str = "yt-dlp"
    use_browser_cookies: bool = True
    cookies_browser: str = "chrome"
    timeout: float = 300.0
    verbose: bool = False
