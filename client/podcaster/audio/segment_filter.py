"""Select the segments that carry usable audio."""

from __future__ import annotations

from typing import Iterable, List

from .types import AudioSegment


def is_usable(segment: AudioSegment) -> bool:
    audio = segment.encoded_audio
    if not audio or not audio.strip():
        return False
    return not segment.synthesis_error


def filter_usable(segments: Iterable[AudioSegment]) -> List[AudioSegment]:
    """Drop failed segments, keeping the relative order of the rest."""
    return [segment for segment in segments if is_usable(segment)]


def order_by_sequence(segments: Iterable[AudioSegment]) -> List[AudioSegment]:
    # sorted() is stable: duplicate indices keep arrival order.
    return sorted(segments, key=lambda segment: segment.sequence_index)


def strip_data_url(encoded: str) -> str:
    """Return the base64 body of ``data:<mime>;base64,<body>`` strings."""
    if "," in encoded:
        return encoded.split(",", 1)[1]
    return encoded


__all__ = ["filter_usable", "is_usable", "order_by_sequence", "strip_data_url"]
