import base64
import logging

import httpx
from google.genai import Client, errors, types

from font_detector.core.errors import AnalysisError, CredentialError
from font_detector.core.inference import FontInferenceClient, parse_detected_fonts
from font_detector.core.types import ImagePayload
from font_detector.schemas import DetectedFont

logger = logging.getLogger('font_detector.gemini')

FONT_DETECTION_PROMPT = """
You are a font detection expert. Analyze the provided image, which is likely a YouTube thumbnail.
Identify all distinct fonts visible in the image.
For each font you identify, you MUST also extract the exact text snippet from the image that uses this font.
Provide the font's likely name, a style description, a similar free font suggestion, a confidence score, your reasoning, and the detected text itself.
Respond only with the JSON defined in the schema. If no text or fonts are found, return an empty array.
""".strip()

FONT_DETECTION_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            'detectedText': types.Schema(
                type=types.Type.STRING,
                description='The actual text snippet from the image that is identified as using this font.',
            ),
            'fontName': types.Schema(
                type=types.Type.STRING,
                description='The most likely name of the detected font.',
            ),
            'description': types.Schema(
                type=types.Type.STRING,
                description="A brief description of the font's style (e.g., 'Bold sans-serif', 'Playful script').",
            ),
            'fontFamilySuggestion': types.Schema(
                type=types.Type.STRING,
                description=(
                    'A suggestion for a similar, freely available font family (e.g., from Google Fonts) '
                    "like 'Roboto', 'Lato', 'Montserrat', etc."
                ),
            ),
            'confidence': types.Schema(
                type=types.Type.NUMBER,
                description='A confidence score from 0.0 to 1.0 indicating the likelihood of the match.',
            ),
            'reasoning': types.Schema(
                type=types.Type.STRING,
                description='A brief explanation for why this font was chosen, based on visual characteristics.',
            ),
        },
        required=['detectedText', 'fontName', 'description', 'fontFamilySuggestion', 'confidence', 'reasoning'],
        property_ordering=['detectedText', 'fontName', 'description', 'fontFamilySuggestion', 'confidence', 'reasoning'],
    ),
)

CREDENTIAL_STATUS_CODES = {401, 403}
CREDENTIAL_MARKERS = ('api key not valid', 'api_key_invalid', 'invalid api key', 'permission_denied')


def _is_credential_failure(exc: errors.APIError) -> bool:
    if exc.code in CREDENTIAL_STATUS_CODES:
        return True
    text = f'{exc.status or ""} {exc.message or ""} {exc}'.lower()
    return any(marker in text for marker in CREDENTIAL_MARKERS)


class GeminiProvider(FontInferenceClient):
    def __init__(
        self,
        api_key: str,
        model: str = 'gemini-2.5-flash',
        timeout_ms: int = 60000,
        client: Client | None = None,
    ) -> None:
        if not api_key and client is None:
            raise ValueError('GeminiProvider requires an API key.')
        self._model = model
        self._client = client or Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=max(int(timeout_ms), 1000)),
        )
        self._config = types.GenerateContentConfig(
            response_mime_type='application/json',
            response_schema=FONT_DETECTION_SCHEMA,
        )

    @property
    def model_id(self) -> str:
        return self._model

    def detect_fonts(self, payload: ImagePayload) -> list[DetectedFont]:
        image_part = types.Part.from_bytes(data=base64.b64decode(payload.data), mime_type=payload.media_type)
        contents = [image_part, types.Part.from_text(text=FONT_DETECTION_PROMPT)]

        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=self._config,
            )
        except errors.APIError as exc:
            logger.warning('Gemini request failed model=%s code=%s status=%s', self._model, exc.code, exc.status)
            if _is_credential_failure(exc):
                raise CredentialError() from exc
            raise AnalysisError() from exc
        except httpx.TimeoutException as exc:
            logger.warning('Gemini request timed out model=%s', self._model)
            raise AnalysisError(
                'AI analysis timed out. The model did not respond in time.',
                code='INFERENCE_TIMEOUT',
                status_code=504,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning('Gemini transport error model=%s error=%s', self._model, exc)
            raise AnalysisError() from exc
        except (errors.UnknownApiResponseError, ValueError) as exc:
            logger.warning('Gemini returned an unusable response model=%s error=%s', self._model, exc)
            raise AnalysisError() from exc

        # None means no candidate carried text, e.g. a blocked prompt.
        if response.text is None:
            logger.warning('Gemini response had no text model=%s', self._model)
            raise AnalysisError()
        fonts = parse_detected_fonts(response.text)
        logger.debug('Gemini detected fonts model=%s count=%s', self._model, len(fonts))
        return fonts
