from ytmp4.models.internal import DownloadIntent, MediaMetadata

AUDIO_FORMAT = "bestaudio/best"


class FormatDecision:
    """Make format decisions"""

    @staticmethod
    def decide(intent: DownloadIntent) -> str:
        """Decide format string based on intent"""
        if intent.audio_only:
            # yt-dlp converts to mp3 because -x --audio-format mp3 is passed
            return AUDIO_FORMAT

        if intent.quality:
            ceiling = f"[height<={intent.quality}]"
            return (
                f"bv*[ext=mp4]{ceiling}+ba[ext=m4a]/"
                f"bv*{ceiling}+ba/"
                f"b{ceiling}/"
                "b"
            )

        # Same preference chain without the height ceiling
        return "bv*[ext=mp4]+ba[ext=m4a]/bv*+ba/b"

    @staticmethod
    def get_metadata(intent: DownloadIntent) -> MediaMetadata:
        """Get media metadata based on intent"""
        format_str = FormatDecision.decide(intent)

        if intent.audio_only:
            return MediaMetadata(
                format_str=format_str,
                ext="mp3",
                media_type="audio/mpeg",
                fallback_name="audio",
            )

        return MediaMetadata(
            format_str=format_str,
            ext="mp4",
            media_type="video/mp4",
            fallback_name="video",
        )
