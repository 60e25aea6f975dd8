import os
import tempfile
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/123.0.0.0 Safari/537.36"
)


class EnvSection(BaseSettings):
    """
    Config section populated from its own environment variables.
    Aliased fields read the alias verbatim, the rest read YTMP4_<FIELD>.
    """
    model_config = SettingsConfigDict(
        env_prefix="YTMP4_",
        populate_by_name=True,
        env_ignore_empty=True,
        extra="ignore",
    )


class ServerConfig(EnvSection):
    host: str = Field(default="0.0.0.0", validation_alias="HOST", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, validation_alias="PORT", description="Listening port")


class DownloadConfig(EnvSection):
    timeout_ms: int = Field(default=10 * 60 * 1000, ge=1, validation_alias="DOWNLOAD_TIMEOUT_MS", description="Per-request yt-dlp timeout in milliseconds")
    temp_root: Optional[str] = Field(default=None, validation_alias="DOWNLOAD_TEMP_ROOT", description="Parent directory for per-request work dirs")
    temp_prefix: str = Field(default="ytmp4-", description="Work dir name prefix")
    chunk_size: int = Field(default=256 * 1024, ge=1, validation_alias="DOWNLOAD_CHUNK_SIZE", description="Response chunk size in bytes")
    stderr_limit: int = Field(default=4000, ge=0, validation_alias="DOWNLOAD_STDERR_LIMIT", description="Max bytes of yt-dlp stderr kept for diagnostics")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class YtDlpConfig(EnvSection):
    binary: str = Field(default="yt-dlp", validation_alias="YTDLP_BIN", description="yt-dlp executable")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, validation_alias="YTDLP_UA", description="User-Agent passed to yt-dlp")
    referer: str = Field(default="https://www.youtube.com/", validation_alias="YTDLP_REFERER", description="Referer passed to yt-dlp")
    cookies_base64: Optional[str] = Field(default=None, validation_alias="YTDLP_COOKIES_BASE64", description="Base64 encoded cookies.txt contents")
    cookies_path: Optional[str] = Field(default=None, validation_alias="YTDLP_COOKIES_PATH", description="Path to an existing cookies.txt")
    cookies_target: str = Field(
        default=os.path.join(tempfile.gettempdir(), "cookies.txt"),
        validation_alias="YTDLP_COOKIES_TARGET",
        description="Where decoded base64 cookies are written",
    )
    cookies_fallback: str = Field(default="cookies.txt", description="Cookie file picked up when present and nothing else is configured")
    audio_quality: str = Field(default="0", description="yt-dlp --audio-quality for mp3 extraction")
    postprocessor_args: str = Field(
        default="ffmpeg:-c:v copy -c:a aac -b:a 192k -movflags +faststart",
        description="ffmpeg arguments for the mp4 pipeline",
    )


class SecurityConfig(EnvSection):
    enable_ssrf_protection: bool = Field(default=True, validation_alias="SSRF_PROTECTION", description="Reject local URLs")


class LoggingConfig(EnvSection):
    level: str = Field(default="INFO", validation_alias="LOG_LEVEL", description="Log level")
    format: str = Field(default="[%(request_id)s] %(message)s", description="Log format")
    enable_rich: bool = Field(default=True, validation_alias="LOG_RICH", description="Enable rich console logging")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class I18nConfig(EnvSection):
    default_locale: str = Field(default="en", validation_alias="DEFAULT_LOCALE", description="Default locale")
    supported_locales: List[str] = Field(default=["en", "ja"], description="Supported locales")


class ApiConfig(EnvSection):
    title: str = Field(default="ytmp4", description="API title")
    version: str = Field(default="1.0.0", description="API version")
    cors_origins: List[str] = Field(default=["*"], validation_alias="CORS_ORIGINS", description="CORS allowed origins")
    debug: bool = Field(default=False, validation_alias="API_DEBUG", description="Enable debug mode")
    static_dir: str = Field(default="public", validation_alias="STATIC_DIR", description="Front-end directory")


class Config(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    ytdlp: YtDlpConfig = Field(default_factory=YtDlpConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


config = Config()
