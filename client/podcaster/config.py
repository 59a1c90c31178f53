"""Static configuration for the podcaster client library."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True, slots=True)
class MergeConfig:
    decode_workers: int = int(os.getenv("PODCASTER_DECODE_WORKERS", "1"))
    resample: bool = _env_flag("PODCASTER_RESAMPLE", "true")
    resample_filter: str = os.getenv("PODCASTER_RESAMPLE_FILTER", "kaiser_best")


CONFIG = MergeConfig()
