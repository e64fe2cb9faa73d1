import base64
import logging

import httpx

from font_detector.core.errors import FetchError, InvalidInputError
from font_detector.core.types import ImagePayload
from font_detector.utils.image_io import check_image_bytes, inspect_image

logger = logging.getLogger('font_detector.acquisition')

DEFAULT_MAX_IMAGE_BYTES = 8 * 1024 * 1024
INVALID_FILE_TYPE_MESSAGE = 'Invalid file type. Please upload an image.'


def _encode(image_bytes: bytes) -> str:
    return base64.b64encode(image_bytes).decode('ascii')


def _declared_media_type(content_type: str | None) -> str:
    return (content_type or '').split(';', 1)[0].strip().lower()


def from_remote_url(
    url: str,
    timeout_ms: int = 10000,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> ImagePayload:
    timeout = max(int(timeout_ms), 1000) / 1000.0
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            response = client.get(url)
    except httpx.TimeoutException as exc:
        raise FetchError(
            f'Timed out fetching image after {timeout:.1f}s.',
            code='THUMBNAIL_TIMEOUT',
            status_code=504,
        ) from exc
    except httpx.HTTPError as exc:
        raise FetchError(f'Failed to fetch image: {exc}') from exc

    if not response.is_success:
        raise FetchError(
            f'Failed to fetch image. Status: {response.status_code}',
            upstream_status=response.status_code,
        )

    body = response.content
    if not body:
        raise FetchError('Failed to fetch image. Empty response body.', upstream_status=response.status_code)
    check_image_bytes(body, max_bytes)
    image_size, detected_type = inspect_image(body)

    media_type = _declared_media_type(response.headers.get('content-type'))
    if not media_type.startswith('image/'):
        if detected_type is None:
            raise FetchError('Fetched content is not a readable image.', upstream_status=response.status_code)
        logger.warning('Remote image declared content_type=%r, using detected=%s url=%s', media_type, detected_type, url)
        media_type = detected_type

    logger.debug('Fetched image url=%s bytes=%s media_type=%s size=%s', url, len(body), media_type, image_size)
    return ImagePayload(
        data=_encode(body),
        media_type=media_type,
        size_bytes=len(body),
        source=url,
        image_size=image_size,
    )


def from_local_file(
    content: bytes,
    media_type: str | None,
    filename: str | None = None,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> ImagePayload:
    media_type = _declared_media_type(media_type)
    if not media_type.startswith('image/'):
        raise InvalidInputError('INVALID_FILE_TYPE', INVALID_FILE_TYPE_MESSAGE, details={'media_type': media_type})
    check_image_bytes(content, max_bytes)
    image_size, _ = inspect_image(content)

    logger.debug('Read local image filename=%s bytes=%s media_type=%s', filename, len(content), media_type)
    encoded = _encode(content)
    return ImagePayload(
        data=encoded,
        media_type=media_type,
        size_bytes=len(content),
        source=f'data:{media_type};base64,{encoded}',
        image_size=image_size,
    )
