"""Serialize float PCM into a 16-bit RIFF/WAVE container."""

from __future__ import annotations

import base64
import struct

import numpy as np

from .types import MergedAudioPayload, MergedWaveform

BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
HEADER_SIZE = 44
PCM_FORMAT_TAG = 1


def float_to_pcm16(samples: np.ndarray) -> np.ndarray:
    """Clamp to [-1, 1] and scale negatives by 32768, the rest by 32767.

    Products are truncated toward zero. NaN is written as silence.
    """
    data = np.nan_to_num(np.asarray(samples, dtype=np.float64), nan=0.0)
    data = np.clip(data, -1.0, 1.0)
    scaled = np.where(data < 0, data * 32768.0, data * 32767.0)
    return np.trunc(scaled).astype("<i2")


def wav_header(sample_rate: int, channel_count: int, frame_count: int) -> bytes:
    data_size = frame_count * channel_count * BYTES_PER_SAMPLE
    block_align = channel_count * BYTES_PER_SAMPLE
    byte_rate = sample_rate * block_align
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        channel_count,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def encode_wav(waveform: MergedWaveform) -> bytes:
    # (channels, frames) -> frame-major interleaving.
    interleaved = float_to_pcm16(waveform.samples).T
    body = np.ascontiguousarray(interleaved).tobytes()
    header = wav_header(waveform.sample_rate, waveform.channel_count, waveform.frame_count)
    return header + body


def encode_payload(waveform: MergedWaveform) -> MergedAudioPayload:
    container = encode_wav(waveform)
    return MergedAudioPayload(
        container_bytes=container,
        encoding_base64=base64.b64encode(container).decode("ascii"),
    )


__all__ = ["encode_payload", "encode_wav", "float_to_pcm16", "wav_header"]
