import pytest

from ytmp4.models.internal import MediaFormat
from ytmp4.models.request import ALLOWED_HEIGHTS, DownloadRequest


@pytest.mark.parametrize("quality", ALLOWED_HEIGHTS)
def test_allowed_heights(quality):
    assert DownloadRequest(url="https://a.b/c", quality=quality).height == int(quality)


@pytest.mark.parametrize("quality", ["best", "", "0", "100", "4320", "720p", "0720", "-1"])
def test_other_quality_means_best(quality):
    assert DownloadRequest(url="https://a.b/c", quality=quality).height is None


def test_values_are_stripped():
    request = DownloadRequest(url="  https://a.b/c \n", quality=" 360 ", format=" mp3 ")
    assert request.url == "https://a.b/c"
    assert request.height == 360
    assert request.media_format == MediaFormat.MP3


@pytest.mark.parametrize("value, expected", [
    ("mp4", MediaFormat.MP4),
    ("MP3", MediaFormat.MP3),
    ("", MediaFormat.MP4),
    ("webm", None),
])
def test_media_format(value, expected):
    assert DownloadRequest(url="https://a.b/c", format=value).media_format == expected


def test_to_intent():
    intent = DownloadRequest(url="https://a.b/c", quality="1080", format="mp3").to_intent()
    assert intent.url == "https://a.b/c"
    assert intent.quality == 1080
    assert intent.audio_only
