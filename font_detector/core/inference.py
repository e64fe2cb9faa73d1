from abc import ABC, abstractmethod

from pydantic import ValidationError

from font_detector.config import Settings
from font_detector.core.errors import AnalysisError
from font_detector.core.types import ImagePayload
from font_detector.schemas import ANALYSIS_RESULT, DetectedFont

INVALID_RESPONSE_MESSAGE = 'AI analysis failed. The model response could not be interpreted.'


class FontInferenceClient(ABC):
    @abstractmethod
    def detect_fonts(self, payload: ImagePayload) -> list[DetectedFont]:
        raise NotImplementedError

    @property
    @abstractmethod
    def model_id(self) -> str:
        raise NotImplementedError


def parse_detected_fonts(raw_text: str) -> list[DetectedFont]:
    text = raw_text.strip()
    if not text:
        return []
    try:
        return ANALYSIS_RESULT.validate_json(text)
    except ValidationError as exc:
        raise AnalysisError(INVALID_RESPONSE_MESSAGE, code='INVALID_MODEL_RESPONSE') from exc


def create_inference_client(settings: Settings) -> FontInferenceClient:
    provider = settings.provider.strip().lower()
    if provider == 'dummy':
        from font_detector.providers.dummy_provider import DummyProvider

        return DummyProvider(model_id='dummy-v1')
    if provider == 'gemini':
        from font_detector.providers.gemini_provider import GeminiProvider

        return GeminiProvider(
            api_key=settings.api_key,
            model=settings.gemini_model,
            timeout_ms=settings.inference_timeout_ms,
        )
    raise ValueError(f'Unsupported PROVIDER={settings.provider!r}')
