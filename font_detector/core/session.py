import logging
import threading
from dataclasses import replace

from font_detector.core.errors import FontDetectorError
from font_detector.core.pipeline import FontAnalyzer
from font_detector.core.types import AnalysisState, LocalFile, RemoteUrl, SessionSnapshot

logger = logging.getLogger('font_detector.session')

UNKNOWN_ERROR_MESSAGE = 'An unknown error occurred during analysis.'


class AnalysisSession:
    def __init__(self, analyzer: FontAnalyzer) -> None:
        self._analyzer = analyzer
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot = SessionSnapshot()

    @property
    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return replace(self._snapshot, fonts=list(self._snapshot.fonts))

    def fail(self, message: str) -> SessionSnapshot:
        with self._lock:
            self._generation += 1
            self._snapshot = SessionSnapshot(state=AnalysisState.FAILED, error=message)
            return self._snapshot

    def submit_url(self, youtube_url: str) -> SessionSnapshot:
        try:
            source = self._analyzer.youtube_source(youtube_url)
        except FontDetectorError as exc:
            return self.fail(exc.message)
        return self.run(source)

    def submit_file(self, content: bytes, media_type: str | None, filename: str | None = None) -> SessionSnapshot:
        if not (media_type or '').lower().startswith('image/'):
            return self.fail('Invalid file type. Please upload an image.')
        return self.run(LocalFile(content=content, media_type=media_type, filename=filename))

    def run(self, source: RemoteUrl | LocalFile) -> SessionSnapshot:
        with self._lock:
            self._generation += 1
            generation = self._generation
            image_url = source.url if isinstance(source, RemoteUrl) else None
            self._snapshot = SessionSnapshot(state=AnalysisState.RUNNING, image_url=image_url)

        try:
            outcome = self._analyzer.analyze(source)
        except FontDetectorError as exc:
            next_snapshot = SessionSnapshot(state=AnalysisState.FAILED, error=exc.message)
        except Exception as exc:
            logger.exception('Unexpected analysis failure generation=%s', generation)
            next_snapshot = SessionSnapshot(state=AnalysisState.FAILED, error=str(exc) or UNKNOWN_ERROR_MESSAGE)
        else:
            next_snapshot = SessionSnapshot(
                state=AnalysisState.SUCCEEDED,
                fonts=outcome.fonts,
                image_url=outcome.payload.source,
            )

        with self._lock:
            if generation != self._generation:
                logger.info('Discarding stale analysis result generation=%s current=%s', generation, self._generation)
                return replace(self._snapshot, fonts=list(self._snapshot.fonts))
            self._snapshot = next_snapshot
            return next_snapshot
