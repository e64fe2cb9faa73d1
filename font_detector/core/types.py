from dataclasses import dataclass, field
from enum import Enum

from font_detector.schemas import DetectedFont


@dataclass(frozen=True)
class ImagePayload:
    data: str
    media_type: str
    size_bytes: int
    source: str | None = None
    image_size: tuple[int, int] | None = None


@dataclass(frozen=True)
class RemoteUrl:
    url: str
    video_id: str | None = None


@dataclass(frozen=True)
class LocalFile:
    content: bytes
    media_type: str
    filename: str | None = None


@dataclass
class AnalysisOutcome:
    fonts: list[DetectedFont]
    payload: ImagePayload
    model_id: str
    latency_ms: int
    video_id: str | None = None


class AnalysisState(str, Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@dataclass
class SessionSnapshot:
    state: AnalysisState = AnalysisState.IDLE
    fonts: list[DetectedFont] = field(default_factory=list)
    error: str | None = None
    image_url: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.state is AnalysisState.RUNNING
