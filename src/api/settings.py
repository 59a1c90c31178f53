"""API settings resolved from the environment."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class APISettings(BaseModel):
    app_name: str = Field(default="Podcaster API")
    version: str = Field(default="1.0.0")
    podcast_store_path: str = Field(
        default=os.getenv("PODCAST_STORE_PATH", "data/podcasts.json")
    )
    audio_dir: str = Field(default=os.getenv("AUDIO_DIR", "data/audio"))
    public_audio_base_url: str = Field(
        default=os.getenv("PUBLIC_AUDIO_BASE_URL", "/audio")
    )
    merge_decode_workers: int = Field(
        default=int(os.getenv("MERGE_DECODE_WORKERS", "1"))
    )
    merge_resample: bool = Field(
        default=os.getenv("MERGE_RESAMPLE", "true").lower() in {"1", "true", "yes"}
    )


@lru_cache()
def get_settings() -> APISettings:
    return APISettings()
