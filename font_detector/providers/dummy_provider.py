from font_detector.core.inference import FontInferenceClient
from font_detector.core.types import ImagePayload
from font_detector.schemas import DetectedFont


class DummyProvider(FontInferenceClient):
    def __init__(self, model_id: str = 'dummy-v1', fonts: list[DetectedFont] | None = None) -> None:
        self._model_id = model_id
        self._fonts = fonts

    @property
    def model_id(self) -> str:
        return self._model_id

    def detect_fonts(self, payload: ImagePayload) -> list[DetectedFont]:
        if self._fonts is not None:
            return list(self._fonts)
        return [
            DetectedFont(
                detectedText='LIVE',
                fontName='Impact',
                description='Bold condensed sans-serif',
                fontFamilySuggestion='Anton',
                confidence=0.92,
                reasoning='Heavy vertical strokes and a tight condensed width.',
            ),
            DetectedFont(
                detectedText='Episode 12',
                fontName='Georgia',
                description='Classic serif',
                fontFamilySuggestion='Merriweather',
                confidence=0.64,
                reasoning='Bracketed serifs with moderate stroke contrast.',
            ),
        ]
