import os
from io import BytesIO

import httpx
import pytest
from PIL import Image

# Settings are read once at import time by the API module.
os.environ.setdefault('API_KEY', 'test-api-key')
os.environ['PROVIDER'] = 'dummy'

LIVE_FONT = {
    'detectedText': 'LIVE',
    'fontName': 'Impact',
    'description': 'Bold sans-serif',
    'fontFamilySuggestion': 'Anton',
    'confidence': 0.92,
    'reasoning': 'thick strokes',
}


def make_image_bytes(fmt: str = 'JPEG', size: tuple[int, int] = (160, 90)) -> bytes:
    image = Image.new('RGB', size, color='white')
    buf = BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def mock_http(monkeypatch):
    """Route every ``httpx.Client`` created by the code under test through ``handler``."""

    def install(handler):
        transport = httpx.MockTransport(handler)

        class MockClient(httpx.Client):
            def __init__(self, *args, **kwargs):
                kwargs['transport'] = transport
                super().__init__(*args, **kwargs)

        monkeypatch.setattr(httpx, 'Client', MockClient)

    return install


@pytest.fixture
def thumbnail_server(mock_http):
    """Serve a 200 JPEG for any URL and record the requested URLs."""
    requested: list[str] = []
    body = make_image_bytes()

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=body, headers={'content-type': 'image/jpeg'})

    mock_http(handler)
    return requested
