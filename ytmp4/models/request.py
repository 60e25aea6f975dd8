from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ytmp4.models.internal import DownloadIntent, MediaFormat

ALLOWED_HEIGHTS = ("144", "240", "360", "480", "720", "1080", "1440", "2160")


class DownloadRequest(BaseModel):
    url: str = Field("", description="Video page URL")
    quality: str = Field("best", description="Max video height, or 'best'")
    format: str = Field("mp4", description="Output container: mp4 or mp3")

    @field_validator("url", "quality", "format", mode="before")
    @classmethod
    def strip_value(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @property
    def height(self) -> Optional[int]:
        """Requested ceiling, or None for anything outside the allow-list"""
        if self.quality in ALLOWED_HEIGHTS:
            return int(self.quality)
        return None

    @property
    def media_format(self) -> Optional[MediaFormat]:
        try:
            return MediaFormat((self.format or MediaFormat.MP4.value).lower())
        except ValueError:
            return None

    def to_intent(self) -> DownloadIntent:
        """Convert to download intent; media_format must already be known to be valid"""
        return DownloadIntent(
            url=self.url,
            quality=self.height,
            media_format=self.media_format or MediaFormat.MP4,
        )
