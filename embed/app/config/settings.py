"""Settings for the embed service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    manga_endpoint: str = Field("https://api.mangadex.org/manga/{}", validation_alias="MANGA_ENDPOINT")
    author_endpoint: str = Field("https://api.mangadex.org/author/{}", validation_alias="AUTHOR_ENDPOINT")
    cover_endpoint: str = Field("https://api.mangadex.org/cover/{}", validation_alias="COVER_ENDPOINT")

    # Formatted with (manga_id, file_name) and (manga_id,) respectively.
    cover_url_template: str = Field(
        "https://uploads.mangadex.org/covers/{}/{}",
        validation_alias="COVER_URL_TEMPLATE",
    )
    site_url_template: str = Field("https://mangadex.org/title/{}", validation_alias="SITE_URL_TEMPLATE")

    rate_limit_interval_seconds: float = Field(2.0, validation_alias="RATE_LIMIT_INTERVAL_SECONDS")
    rate_limit_burst: int = Field(5, validation_alias="RATE_LIMIT_BURST")

    fetch_connect_timeout_seconds: float = Field(5.0, validation_alias="FETCH_CONNECT_TIMEOUT_SECONDS")
    fetch_read_timeout_seconds: float = Field(15.0, validation_alias="FETCH_READ_TIMEOUT_SECONDS")
    fetch_user_agent: str = Field("mangadex-embed/0.1.0", validation_alias="FETCH_USER_AGENT")

    # Ordered language codes tried before falling back to the first delivered title.
    preferred_languages: list[str] = Field(default_factory=list, validation_alias="PREFERRED_LANGUAGES")

    log_file: str = Field("embed.log", validation_alias="LOG_FILE")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")
