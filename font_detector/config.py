from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    # Required: settings construction fails when API_KEY is unset or empty.
    api_key: str = Field(min_length=1)
    provider: str = 'gemini'
    gemini_model: str = 'gemini-2.5-flash'
    inference_timeout_ms: int = 60000
    thumbnail_url_template: str = 'https://img.youtube.com/vi/{video_id}/maxresdefault.jpg'
    thumbnail_timeout_ms: int = 10000
    max_image_bytes: int = 8 * 1024 * 1024
    host: str = '127.0.0.1'
    port: int = 8002
    log_level: str = 'INFO'
    version: str = '1.0.0'


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
