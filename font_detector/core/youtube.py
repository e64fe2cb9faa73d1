import re

from font_detector.core.errors import InvalidInputError

YOUTUBE_URL_PATTERN = re.compile(
    r'(?:https?://)?(?:www\.)?(?:youtube\.com/(?:watch\?v=|embed/)|youtu\.be/)([\w-]{11})'
)
DEFAULT_THUMBNAIL_TEMPLATE = 'https://img.youtube.com/vi/{video_id}/maxresdefault.jpg'
INVALID_URL_MESSAGE = 'Invalid YouTube URL. Please provide a valid video link.'


def extract_video_id(url: str) -> str | None:
    match = YOUTUBE_URL_PATTERN.search((url or '').strip())
    return match.group(1) if match else None


def thumbnail_url(video_id: str, template: str = DEFAULT_THUMBNAIL_TEMPLATE) -> str:
    return template.format(video_id=video_id)


def resolve_thumbnail_url(url: str, template: str = DEFAULT_THUMBNAIL_TEMPLATE) -> tuple[str, str]:
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidInputError('INVALID_YOUTUBE_URL', INVALID_URL_MESSAGE)
    return video_id, thumbnail_url(video_id, template)
