import json

import httpx

from fastapi.testclient import TestClient

from conftest import LIVE_FONT, make_image_bytes
from font_detector.core.errors import CredentialError
from font_detector.core.inference import FontInferenceClient, parse_detected_fonts
from font_detector.core.pipeline import FontAnalyzer
from font_detector.main import app


class CannedClient(FontInferenceClient):
    def __init__(self, text: str = '', error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls = 0

    @property
    def model_id(self) -> str:
        return 'canned'

    def detect_fonts(self, payload):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return parse_detected_fonts(self.text)


def test_health_ok():
    with TestClient(app) as client:
        response = client.get('/health')
    assert response.status_code == 200
    body = response.json()
    assert body['ok'] is True
    assert body['provider'] == 'dummy'
    assert body['model'] == 'dummy-v1'


def test_analyze_url_returns_fonts(thumbnail_server):
    with TestClient(app) as client:
        app.state.analyzer = FontAnalyzer(CannedClient(text=json.dumps([LIVE_FONT])))
        response = client.post('/analyze/url', json={'url': 'https://youtu.be/dQw4w9WgXcQ'})
    assert response.status_code == 200
    body = response.json()
    assert body['ok'] is True
    assert body['model'] == 'canned'
    assert body['video_id'] == 'dQw4w9WgXcQ'
    assert body['image_url'] == 'https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg'
    assert body['media_type'] == 'image/jpeg'
    assert body['fonts'] == [LIVE_FONT]


def test_analyze_url_empty_model_text_is_empty_list(thumbnail_server):
    with TestClient(app) as client:
        app.state.analyzer = FontAnalyzer(CannedClient(text='   '))
        response = client.post('/analyze/url', json={'url': 'https://www.youtube.com/embed/dQw4w9WgXcQ'})
    assert response.status_code == 200
    assert response.json()['fonts'] == []


def test_analyze_url_rejects_invalid_url_without_fetching(mock_http):
    def handler(request):
        raise AssertionError('no fetch expected')

    mock_http(handler)
    canned = CannedClient()
    with TestClient(app) as client:
        app.state.analyzer = FontAnalyzer(canned)
        response = client.post(
            '/analyze/url',
            json={'url': 'https://example.com/video'},
            headers={'x-request-id': 'req-1'},
        )
    assert response.status_code == 400
    body = response.json()
    assert body == {
        'ok': False,
        'error': 'INVALID_YOUTUBE_URL',
        'message': 'Invalid YouTube URL. Please provide a valid video link.',
        'request_id': 'req-1',
        'details': None,
    }
    assert canned.calls == 0


def test_analyze_url_thumbnail_404(mock_http):
    mock_http(lambda request: httpx.Response(404))
    with TestClient(app) as client:
        response = client.post('/analyze/url', json={'url': 'https://youtu.be/dQw4w9WgXcQ'})
    assert response.status_code == 502
    body = response.json()
    assert body['error'] == 'THUMBNAIL_FETCH_FAILED'
    assert body['details'] == {'upstream_status': 404}


def test_analyze_url_credential_failure(thumbnail_server):
    with TestClient(app) as client:
        app.state.analyzer = FontAnalyzer(CannedClient(error=CredentialError()))
        response = client.post('/analyze/url', json={'url': 'https://youtu.be/dQw4w9WgXcQ'})
    assert response.status_code == 401
    body = response.json()
    assert body['error'] == 'INVALID_API_KEY'
    assert 'API_KEY' in body['message']


def test_analyze_upload_returns_fonts():
    image_bytes = make_image_bytes('PNG', size=(120, 80))
    with TestClient(app) as client:
        response = client.post('/analyze/upload', files={'image': ('thumb.png', image_bytes, 'image/png')})
    assert response.status_code == 200
    body = response.json()
    assert body['model'] == 'dummy-v1'
    assert body['video_id'] is None
    assert body['media_type'] == 'image/png'
    assert body['image_size'] == [120, 80]
    assert body['image_url'].startswith('data:image/png;base64,')
    assert [font['fontName'] for font in body['fonts']] == ['Impact', 'Georgia']


def test_analyze_upload_rejects_non_image():
    canned = CannedClient()
    with TestClient(app) as client:
        app.state.analyzer = FontAnalyzer(canned)
        response = client.post('/analyze/upload', files={'image': ('notes.txt', b'hello', 'text/plain')})
    assert response.status_code == 400
    body = response.json()
    assert body['error'] == 'INVALID_FILE_TYPE'
    assert body['message'] == 'Invalid file type. Please upload an image.'
    assert canned.calls == 0


def test_analyze_upload_malformed_model_response():
    with TestClient(app) as client:
        app.state.analyzer = FontAnalyzer(CannedClient(text='{"fontName": "Impact"}'))
        response = client.post('/analyze/upload', files={'image': ('t.jpg', make_image_bytes(), 'image/jpeg')})
    assert response.status_code == 502
    assert response.json()['error'] == 'INVALID_MODEL_RESPONSE'
