"""Last-resort byte preservation when the decode/encode path fails.

The output is the usable segments' base64 strings glued together as given.
It is NOT a playable file; it only guarantees no synthesized bytes are lost.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .types import AudioSegment


def concatenate_raw(segments: Sequence[AudioSegment]) -> Tuple[str, List[Tuple[int, int]]]:
    """Return the joined string and the ``(start, end)`` span of each piece."""
    pieces: List[str] = []
    spans: List[Tuple[int, int]] = []
    offset = 0
    for segment in segments:
        encoded = segment.encoded_audio or ""
        pieces.append(encoded)
        spans.append((offset, offset + len(encoded)))
        offset += len(encoded)
    return "".join(pieces), spans


def split_raw(joined: str, spans: Sequence[Tuple[int, int]]) -> List[str]:
    return [joined[start:end] for start, end in spans]


__all__ = ["concatenate_raw", "split_raw"]
