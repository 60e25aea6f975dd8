from .internal import DownloadIntent, MediaFormat, MediaMetadata
from .request import DownloadRequest

__all__ = ["DownloadIntent", "DownloadRequest", "MediaFormat", "MediaMetadata"]
