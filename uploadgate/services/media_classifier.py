"""Maps file names to a media type.

The tables are checked in priority order: image, audio, video. A name that
matches none of them is an attachment. ``.ogv`` only matches the video table,
but ``.ogg`` and ``.oga`` are audio even for a video stream in an Ogg
container.
"""

import re

from uploadgate.models.upload_models import MediaType

IMAGE_PATTERN = re.compile(r"\.(png|webp|jpe?g|gif|svg|ico)$", re.IGNORECASE)
AUDIO_PATTERN = re.compile(r"\.(mp3|og[ga]|opus|wav|m4[abpr]|aac|flac)$", re.IGNORECASE)
VIDEO_PATTERN = re.compile(r"\.(mov|mp4|webm|m4v|3gp|ogv|avi|mpeg)$", re.IGNORECASE)

# Order matters: the first matching table wins.
_CLASSIFICATION_ORDER: tuple[tuple[MediaType, re.Pattern[str]], ...] = (
    (MediaType.IMAGE, IMAGE_PATTERN),
    (MediaType.AUDIO, AUDIO_PATTERN),
    (MediaType.VIDEO, VIDEO_PATTERN),
)


def is_image(name: str) -> bool:
    return IMAGE_PATTERN.search(name) is not None


def is_audio(name: str) -> bool:
    return AUDIO_PATTERN.search(name) is not None


def is_video(name: str) -> bool:
    return VIDEO_PATTERN.search(name) is not None


def classify(name: str) -> MediaType:
    """Returns the media type of *name*, defaulting to ``ATTACHMENT``."""
    for media_type, pattern in _CLASSIFICATION_ORDER:
        if pattern.search(name):
            return media_type
    return MediaType.ATTACHMENT
