"""Turn base64-encoded speech clips into float PCM via libsndfile."""

from __future__ import annotations

import base64
import binascii
import io
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Protocol, Sequence

import numpy as np
import soundfile as sf

from .segment_filter import strip_data_url
from .types import AudioSegment, DecodedWaveform, DecodeError, MergeCancelled

LOGGER = logging.getLogger("podcaster.decoder")


class Decoder(Protocol):
    def decode(self, data: bytes) -> DecodedWaveform:
        """Decode a compressed clip or raise ``DecodeError``."""


class SoundfileDecoder:
    """Decode MP3/WAV/FLAC/OGG clips with the libsndfile bundled by soundfile."""

    def decode(self, data: bytes) -> DecodedWaveform:
        if not data:
            raise DecodeError("empty audio payload")
        try:
            audio, sample_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
        except Exception as exc:
            raise DecodeError(f"unsupported audio encoding: {exc}") from exc
        if audio.shape[0] == 0:
            raise DecodeError("audio payload contains no frames")
        return DecodedWaveform(
            sample_rate=int(sample_rate),
            samples=np.ascontiguousarray(audio.T),
        )


def decode_base64(encoded: str) -> bytes:
    body = "".join(strip_data_url(encoded).split())
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid base64 payload: {exc}") from exc


def decode_segment(segment: AudioSegment, decoder: Decoder) -> DecodedWaveform:
    if not segment.encoded_audio:
        raise DecodeError("segment has no audio")
    return decoder.decode(decode_base64(segment.encoded_audio))


def decode_segments(
    segments: Sequence[AudioSegment],
    decoder: Decoder,
    *,
    workers: int = 1,
    cancel: threading.Event | None = None,
) -> List[Optional[DecodedWaveform]]:
    """Decode every segment, returning None in the slot of each failure.

    The output is positionally aligned with ``segments`` whatever order the
    workers finish in.
    """

    def _decode(segment: AudioSegment) -> Optional[DecodedWaveform]:
        if cancel is not None and cancel.is_set():
            raise MergeCancelled("merge cancelled before decoding finished")
        try:
            return decode_segment(segment, decoder)
        except Exception as exc:  # best effort per segment
            LOGGER.warning("Failed to decode segment %s: %s", segment.sequence_index, exc)
            return None

    if workers <= 1 or len(segments) <= 1:
        return [_decode(segment) for segment in segments]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_decode, segments))


__all__ = ["Decoder", "SoundfileDecoder", "decode_base64", "decode_segment", "decode_segments"]
