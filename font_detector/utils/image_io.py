import logging
from io import BytesIO

from PIL import Image

from font_detector.core.errors import InvalidInputError

logger = logging.getLogger('font_detector.image_io')


def check_image_bytes(image_bytes: bytes, max_bytes: int) -> None:
    if not image_bytes:
        raise InvalidInputError('MISSING_IMAGE', 'Missing image upload (field name: image).')
    if len(image_bytes) > max_bytes:
        raise InvalidInputError('IMAGE_TOO_LARGE', f'Image too large. Max {max_bytes} bytes.', status_code=413)


def inspect_image(image_bytes: bytes) -> tuple[tuple[int, int] | None, str | None]:
    # Formats Pillow cannot open (HEIC, AVIF, ...) are still sent to the model.
    try:
        image = Image.open(BytesIO(image_bytes))
        image.verify()
    except Exception as exc:
        logger.debug('Could not inspect image bytes=%s error=%s', len(image_bytes), exc)
        return None, None
    return image.size, Image.MIME.get(image.format or '')
