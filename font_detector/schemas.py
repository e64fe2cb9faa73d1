import math
from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

PLACEHOLDER_TEXT = 'Aa Bb Cc'


class DetectedFont(BaseModel):
    model_config = ConfigDict(strict=True, extra='forbid', frozen=True)

    detected_text: str = Field(alias='detectedText')
    font_name: str = Field(alias='fontName')
    description: str
    font_family_suggestion: str = Field(alias='fontFamilySuggestion')
    confidence: float
    reasoning: str

    @property
    def display_text(self) -> str:
        return self.detected_text or PLACEHOLDER_TEXT

    @property
    def confidence_percent(self) -> int:
        scaled = self.confidence * 100
        if math.isnan(scaled):
            return 0
        if math.isinf(scaled):
            return 100 if scaled > 0 else 0
        return round(scaled)

    @property
    def confidence_band(self) -> str:
        percent = self.confidence_percent
        if percent >= 85:
            return 'high'
        if percent >= 60:
            return 'medium'
        return 'low'

    @property
    def style_class(self) -> str:
        lowered = self.description.lower()
        if 'mono' in lowered:
            return 'mono'
        if 'sans' in lowered:
            return 'sans'
        if 'serif' in lowered:
            return 'serif'
        return 'sans'

    @property
    def google_fonts_url(self) -> str:
        return f'https://fonts.google.com/?query={quote_plus(self.font_family_suggestion)}'


ANALYSIS_RESULT = TypeAdapter(list[DetectedFont])


class AnalyzeUrlRequest(BaseModel):
    url: str


class AnalyzeResponse(BaseModel):
    ok: bool = True
    model: str
    latency_ms: int
    video_id: str | None = None
    image_url: str | None = None
    media_type: str
    image_size: list[int] | None = None
    fonts: list[DetectedFont]


class HealthResponse(BaseModel):
    ok: bool
    version: str
    provider: str
    model: str | None = None
    uptime_s: float


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    message: str
    request_id: str | None = None
    details: dict | None = None
