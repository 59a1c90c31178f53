"""Pytest configuration helpers."""

from __future__ import annotations

import base64
import io
import math
import sys
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def _ensure_repo_on_path() -> None:
    """Allow tests to import from repo modules without setting PYTHONPATH."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

from client.podcaster.audio.types import AudioSegment, DecodedWaveform, DecodeError  # noqa: E402


def sine_wave(
    duration_s: float,
    sample_rate: int,
    *,
    frequency: float = 220.0,
    amplitude: float = 0.5,
    channels: int = 1,
) -> np.ndarray:
    """Float32 tone shaped ``(channels, frames)``."""
    length = int(duration_s * sample_rate)
    t = np.arange(length)
    tone = (amplitude * np.sin(2 * math.pi * frequency * t / sample_rate)).astype(np.float32)
    return np.tile(tone, (channels, 1))


def wav_base64(samples: np.ndarray, sample_rate: int, fmt: str = "WAV") -> str:
    buffer = io.BytesIO()
    # MP3 has no PCM subtype; libsndfile picks its MPEG layer III default.
    subtype = None if fmt == "MP3" else "PCM_16"
    sf.write(buffer, samples.T, sample_rate, format=fmt, subtype=subtype)
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def segment(index: int, audio: str | bytes | None, error: str | None = None) -> AudioSegment:
    return AudioSegment(
        speaker_label="Host" if index % 2 == 0 else "Guest",
        text=f"line {index}",
        sequence_index=index,
        encoded_audio=audio,
        synthesis_error=error,
    )


class FakeDecoder:
    """Maps known payloads to prepared waveforms; anything else fails."""

    def __init__(self) -> None:
        self.waveforms: dict[bytes, DecodedWaveform] = {}
        self.calls: list[bytes] = []

    def register(self, key: str, waveform: DecodedWaveform) -> str:
        data = key.encode("utf-8")
        self.waveforms[data] = waveform
        return base64.b64encode(data).decode("ascii")

    def decode(self, data: bytes) -> DecodedWaveform:
        self.calls.append(data)
        try:
            return self.waveforms[data]
        except KeyError:
            raise DecodeError(f"unknown payload {data[:8]!r}") from None


@pytest.fixture()
def fake_decoder() -> FakeDecoder:
    return FakeDecoder()
