from enum import Enum
from typing import Optional

from pydantic import BaseModel


class MediaFormat(str, Enum):
    """Container delivered to the client"""
    MP4 = "mp4"
    MP3 = "mp3"


class DownloadIntent(BaseModel):
    """Internal download intent (separated from HTTP concerns)"""
    url: str
    quality: Optional[int] = None
    media_format: MediaFormat = MediaFormat.MP4

    @property
    def audio_only(self) -> bool:
        return self.media_format == MediaFormat.MP3


class MediaMetadata(BaseModel):
    """Media metadata"""
    format_str: str
    ext: str
    media_type: str
    fallback_name: str
