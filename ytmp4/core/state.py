from dataclasses import dataclass
from typing import Optional


@dataclass
class RuntimeState:
    """Values resolved once at startup and shared read-only by every request"""
    cookies_file: Optional[str] = None
    ytdlp_path: Optional[str] = None
    ffmpeg_path: Optional[str] = None


state = RuntimeState()
