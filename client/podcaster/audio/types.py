"""Dataclasses shared across the merge pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np


@dataclass(slots=True)
class AudioSegment:
    """One synthesized dialogue line as handed over by the TTS step."""

    speaker_label: str
    text: str
    sequence_index: int
    encoded_audio: Optional[Union[str, bytes]] = None
    synthesis_error: Optional[str] = None
    estimated_duration_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        # latin-1 maps every byte to one character, so nothing is lost.
        if isinstance(self.encoded_audio, (bytes, bytearray)):
            self.encoded_audio = bytes(self.encoded_audio).decode("latin-1")


@dataclass(slots=True)
class DecodedWaveform:
    """Float PCM laid out as ``(channels, frames)``, values in [-1.0, 1.0]."""

    sample_rate: int
    samples: np.ndarray

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / float(self.sample_rate) if self.sample_rate else 0.0

    @property
    def samples_by_channel(self) -> List[np.ndarray]:
        return [self.samples[idx] for idx in range(self.channel_count)]


# A merged waveform has the same shape as a decoded one.
MergedWaveform = DecodedWaveform


@dataclass(slots=True)
class MergedAudioPayload:
    container_bytes: bytes
    encoding_base64: str


class MergeStatus(str, Enum):
    EMPTY = "empty"
    SINGLE = "single"
    MERGED = "merged"
    FALLBACK = "fallback"


class FormatCheck(str, Enum):
    COMPATIBLE = "compatible"
    NEEDS_RESAMPLE = "needs_resample"
    INCOMPATIBLE = "incompatible"


CONTENT_TYPES = {
    MergeStatus.SINGLE: "audio/mpeg",
    MergeStatus.MERGED: "audio/wav",
    MergeStatus.FALLBACK: "application/octet-stream",
}


@dataclass(slots=True)
class MergeResult:
    """Outcome of one merge call.

    ``audio_base64`` is None only for ``MergeStatus.EMPTY``. A ``FALLBACK``
    result is the raw concatenation of the usable segments' base64 strings
    and is not a playable file; ``fallback_spans`` gives the ``(start, end)``
    offset of each original string inside it.
    """

    status: MergeStatus
    audio_base64: Optional[str] = None
    payload: Optional[MergedAudioPayload] = None
    total_segments: int = 0
    usable_segments: int = 0
    decoded_segments: int = 0
    dropped_indices: List[int] = field(default_factory=list)
    fallback_spans: List[Tuple[int, int]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.status is MergeStatus.FALLBACK

    @property
    def content_type(self) -> Optional[str]:
        return CONTENT_TYPES.get(self.status)


class MergeError(Exception):
    """Base class for merge pipeline failures."""


class DecodeError(MergeError):
    """A segment's bytes could not be decoded into PCM."""


class FormatMismatchError(MergeError):
    """Waveforms cannot be reconciled to one sample rate / channel layout."""


class MergeCancelled(MergeError):
    """The caller asked to stop between segment decodes."""
