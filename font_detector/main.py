import logging
import time
import uuid

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from font_detector.config import get_settings
from font_detector.core.acquisition import INVALID_FILE_TYPE_MESSAGE
from font_detector.core.errors import FontDetectorError, InvalidInputError
from font_detector.core.inference import create_inference_client
from font_detector.core.pipeline import FontAnalyzer
from font_detector.core.types import AnalysisOutcome, LocalFile
from font_detector.logging_setup import setup_logging
from font_detector.schemas import AnalyzeResponse, AnalyzeUrlRequest, ErrorResponse, HealthResponse

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger('font_detector')

app = FastAPI(title='Font Detector', version=settings.version)
started_at = time.time()


def _request_id(request: Request) -> str:
    return request.headers.get('x-request-id') or str(uuid.uuid4())


def _to_response(outcome: AnalysisOutcome) -> AnalyzeResponse:
    payload = outcome.payload
    return AnalyzeResponse(
        ok=True,
        model=outcome.model_id,
        latency_ms=outcome.latency_ms,
        video_id=outcome.video_id,
        image_url=payload.source,
        media_type=payload.media_type,
        image_size=list(payload.image_size) if payload.image_size else None,
        fonts=outcome.fonts,
    )


@app.on_event('startup')
def startup_event() -> None:
    inference_client = create_inference_client(settings)
    app.state.analyzer = FontAnalyzer.from_settings(settings, inference_client)
    logger.info(
        'Font analyzer initialized provider=%s model=%s thumbnail_timeout_ms=%s inference_timeout_ms=%s',
        settings.provider,
        inference_client.model_id,
        settings.thumbnail_timeout_ms,
        settings.inference_timeout_ms,
    )


@app.exception_handler(FontDetectorError)
async def font_detector_error_handler(request: Request, exc: FontDetectorError):
    request_id = _request_id(request)
    logger.warning('Request failed request_id=%s error=%s message=%s', request_id, exc.code, exc.message)
    payload = ErrorResponse(
        error=exc.code,
        message=exc.message,
        request_id=request_id,
        details=exc.details or None,
    )
    return JSONResponse(status_code=exc.status_code, content=payload.model_dump())


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.exception('Unhandled exception request_id=%s', request_id)
    payload = ErrorResponse(
        error='UNEXPECTED_SERVER_ERROR',
        message='An unknown error occurred during analysis.',
        request_id=request_id,
    )
    return JSONResponse(status_code=500, content=payload.model_dump())


@app.get('/health', response_model=HealthResponse)
def health():
    analyzer = getattr(app.state, 'analyzer', None)
    return HealthResponse(
        ok=analyzer is not None,
        version=settings.version,
        provider=settings.provider,
        model=analyzer.model_id if analyzer else None,
        uptime_s=round(time.time() - started_at, 3),
    )


@app.post('/analyze/url', response_model=AnalyzeResponse)
def analyze_url(request: Request, body: AnalyzeUrlRequest):
    analyzer: FontAnalyzer = app.state.analyzer
    source = analyzer.youtube_source(body.url)
    outcome = analyzer.analyze(source)
    logger.info(
        'analyze_url request_id=%s video_id=%s fonts=%s latency_ms=%s',
        _request_id(request),
        outcome.video_id,
        len(outcome.fonts),
        outcome.latency_ms,
    )
    return _to_response(outcome)


@app.post('/analyze/upload', response_model=AnalyzeResponse)
async def analyze_upload(request: Request, image: UploadFile = File(...)):
    media_type = (image.content_type or '').lower()
    if not media_type.startswith('image/'):
        raise InvalidInputError('INVALID_FILE_TYPE', INVALID_FILE_TYPE_MESSAGE, details={'media_type': media_type})

    image_bytes = await image.read()
    analyzer: FontAnalyzer = app.state.analyzer
    source = LocalFile(content=image_bytes, media_type=media_type, filename=image.filename)
    outcome = await run_in_threadpool(analyzer.analyze, source)
    logger.info(
        'analyze_upload request_id=%s filename=%s bytes=%s fonts=%s latency_ms=%s',
        _request_id(request),
        image.filename,
        len(image_bytes),
        len(outcome.fonts),
        outcome.latency_ms,
    )
    return _to_response(outcome)
