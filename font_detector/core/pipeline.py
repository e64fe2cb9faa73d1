import logging

from font_detector.config import Settings
from font_detector.core import acquisition
from font_detector.core.inference import FontInferenceClient
from font_detector.core.types import AnalysisOutcome, LocalFile, RemoteUrl
from font_detector.core.youtube import DEFAULT_THUMBNAIL_TEMPLATE, resolve_thumbnail_url
from font_detector.utils.timings import measure_ms

logger = logging.getLogger('font_detector.pipeline')


class FontAnalyzer:
    def __init__(
        self,
        inference_client: FontInferenceClient,
        thumbnail_timeout_ms: int = 10000,
        max_image_bytes: int = acquisition.DEFAULT_MAX_IMAGE_BYTES,
        thumbnail_url_template: str = DEFAULT_THUMBNAIL_TEMPLATE,
    ) -> None:
        self.inference_client = inference_client
        self.thumbnail_timeout_ms = thumbnail_timeout_ms
        self.max_image_bytes = max_image_bytes
        self.thumbnail_url_template = thumbnail_url_template

    @classmethod
    def from_settings(cls, settings: Settings, inference_client: FontInferenceClient) -> 'FontAnalyzer':
        return cls(
            inference_client,
            thumbnail_timeout_ms=settings.thumbnail_timeout_ms,
            max_image_bytes=settings.max_image_bytes,
            thumbnail_url_template=settings.thumbnail_url_template,
        )

    @property
    def model_id(self) -> str:
        return self.inference_client.model_id

    def youtube_source(self, youtube_url: str) -> RemoteUrl:
        video_id, url = resolve_thumbnail_url(youtube_url, self.thumbnail_url_template)
        return RemoteUrl(url=url, video_id=video_id)

    def analyze(self, source: RemoteUrl | LocalFile) -> AnalysisOutcome:
        with measure_ms() as elapsed_ms:
            if isinstance(source, RemoteUrl):
                payload = acquisition.from_remote_url(
                    source.url,
                    timeout_ms=self.thumbnail_timeout_ms,
                    max_bytes=self.max_image_bytes,
                )
                video_id = source.video_id
            elif isinstance(source, LocalFile):
                payload = acquisition.from_local_file(
                    source.content,
                    source.media_type,
                    filename=source.filename,
                    max_bytes=self.max_image_bytes,
                )
                video_id = None
            else:
                raise TypeError(f'Unsupported analysis source: {type(source).__name__}')

            fonts = self.inference_client.detect_fonts(payload)
            latency_ms = elapsed_ms()

        logger.info(
            'analyze model=%s media_type=%s bytes=%s fonts=%s latency_ms=%s',
            self.model_id,
            payload.media_type,
            payload.size_bytes,
            len(fonts),
            latency_ms,
        )
        return AnalysisOutcome(
            fonts=fonts,
            payload=payload,
            model_id=self.model_id,
            latency_ms=latency_ms,
            video_id=video_id,
        )

    def analyze_youtube_url(self, youtube_url: str) -> AnalysisOutcome:
        return self.analyze(self.youtube_source(youtube_url))
