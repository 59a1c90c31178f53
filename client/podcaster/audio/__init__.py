"""Segment merge pipeline (filter, decode, concatenate, encode, fallback)."""

from .merger import AudioMerger, merge_audio_segments
from .types import AudioSegment, DecodedWaveform, MergeResult, MergeStatus

__all__ = [
    "AudioMerger",
    "AudioSegment",
    "DecodedWaveform",
    "MergeResult",
    "MergeStatus",
    "merge_audio_segments",
]
