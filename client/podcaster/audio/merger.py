"""Merge independently synthesized speech clips into one deliverable asset."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from ..config import CONFIG, MergeConfig
from .concatenator import concatenate
from .decoder import Decoder, SoundfileDecoder, decode_segments
from .fallback import concatenate_raw
from .segment_filter import filter_usable, order_by_sequence
from .types import AudioSegment, DecodeError, MergeResult, MergeStatus
from .wav_encoder import encode_payload

LOGGER = logging.getLogger("podcaster.merge")


class AudioMerger:
    """Filter, decode, concatenate and re-encode a podcast's segments.

    ``merge`` never raises. Depending on what survives it returns:

    * ``EMPTY``: no usable segment, ``audio_base64`` is None.
    * ``SINGLE``: exactly one usable segment, returned byte-for-byte.
    * ``MERGED``: a 16-bit PCM WAV of every decodable segment in
      ``sequence_index`` order.
    * ``FALLBACK``: decoding or encoding failed outright; the usable
      segments' base64 strings are concatenated. Not playable.
    """

    def __init__(self, decoder: Decoder | None = None, config: MergeConfig | None = None) -> None:
        self.decoder = decoder or SoundfileDecoder()
        self.config = config or CONFIG

    def merge(
        self,
        segments: Iterable[AudioSegment],
        *,
        cancel: threading.Event | None = None,
    ) -> MergeResult:
        segments = list(segments)
        usable = order_by_sequence(filter_usable(segments))
        result = MergeResult(
            status=MergeStatus.EMPTY,
            total_segments=len(segments),
            usable_segments=len(usable),
        )
        if not usable:
            LOGGER.info("No usable audio among %s segments", len(segments))
            return result
        if len(usable) == 1:
            result.status = MergeStatus.SINGLE
            result.audio_base64 = usable[0].encoded_audio
            return result

        try:
            decoded = decode_segments(
                usable,
                self.decoder,
                workers=self.config.decode_workers,
                cancel=cancel,
            )
            result.dropped_indices = [
                segment.sequence_index
                for segment, waveform in zip(usable, decoded)
                if waveform is None
            ]
            waveforms = [waveform for waveform in decoded if waveform is not None]
            result.decoded_segments = len(waveforms)
            if not waveforms:
                raise DecodeError(f"none of {len(usable)} usable segments could be decoded")
            merged = concatenate(
                waveforms,
                resample=self.config.resample,
                filter_name=self.config.resample_filter,
            )
            payload = encode_payload(merged)
        except Exception as exc:
            LOGGER.error("Audio merge failed, falling back to raw concatenation: %s", exc)
            joined, spans = concatenate_raw(usable)
            result.status = MergeStatus.FALLBACK
            result.audio_base64 = joined
            result.fallback_spans = spans
            result.payload = None
            result.error = f"{type(exc).__name__}: {exc}"
            return result

        if result.dropped_indices:
            LOGGER.warning(
                "Merged %s of %s usable segments; dropped %s",
                result.decoded_segments,
                result.usable_segments,
                result.dropped_indices,
            )
        result.status = MergeStatus.MERGED
        result.payload = payload
        result.audio_base64 = payload.encoding_base64
        return result


def merge_audio_segments(
    segments: Iterable[AudioSegment],
    decoder: Decoder | None = None,
) -> Optional[str]:
    """Return the merged base64 audio, or None when nothing was usable.

    Callers that must tell a degraded fallback apart from a playable file
    should use ``AudioMerger.merge`` and inspect ``MergeResult.status``.
    """
    return AudioMerger(decoder).merge(segments).audio_base64


__all__ = ["AudioMerger", "merge_audio_segments"]
