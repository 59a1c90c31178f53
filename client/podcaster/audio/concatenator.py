"""Join decoded waveforms end to end, channel by channel."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
import resampy

from .types import DecodedWaveform, FormatCheck, FormatMismatchError, MergedWaveform

LOGGER = logging.getLogger("podcaster.merge")


def check_format(reference: DecodedWaveform, other: DecodedWaveform) -> FormatCheck:
    if (
        other.sample_rate == reference.sample_rate
        and other.channel_count == reference.channel_count
    ):
        return FormatCheck.COMPATIBLE
    if other.sample_rate <= 0:
        return FormatCheck.INCOMPATIBLE
    if other.channel_count != reference.channel_count and 1 not in (
        other.channel_count,
        reference.channel_count,
    ):
        # Only mono <-> N layouts have an unambiguous mapping.
        return FormatCheck.INCOMPATIBLE
    return FormatCheck.NEEDS_RESAMPLE


def conform(
    waveform: DecodedWaveform,
    sample_rate: int,
    channel_count: int,
    *,
    filter_name: str = "kaiser_best",
) -> DecodedWaveform:
    """Resample and up/down-mix ``waveform`` to the requested layout."""
    samples = waveform.samples
    if waveform.channel_count != channel_count:
        if channel_count == 1:
            samples = samples.mean(axis=0, keepdims=True, dtype=np.float32)
        elif waveform.channel_count == 1:
            samples = np.repeat(samples, channel_count, axis=0)
        else:
            raise FormatMismatchError(
                f"cannot map {waveform.channel_count} channels onto {channel_count}"
            )
    if waveform.sample_rate != sample_rate and samples.shape[1] > 0:
        samples = resampy.resample(
            samples, waveform.sample_rate, sample_rate, axis=-1, filter=filter_name
        )
    return DecodedWaveform(
        sample_rate=sample_rate,
        samples=np.ascontiguousarray(samples, dtype=np.float32),
    )


def concatenate(
    waveforms: Sequence[DecodedWaveform],
    *,
    resample: bool = True,
    filter_name: str = "kaiser_best",
) -> Optional[MergedWaveform]:
    """Lay ``waveforms`` out back to back in the given order.

    Sample rate and channel count come from the first waveform. Returns None
    for an empty sequence and the sole element itself for a sequence of one.
    """
    if not waveforms:
        return None
    if len(waveforms) == 1:
        return waveforms[0]

    reference = waveforms[0]
    conformed = [reference]
    for position, waveform in enumerate(waveforms[1:], start=1):
        verdict = check_format(reference, waveform)
        if verdict is FormatCheck.COMPATIBLE:
            conformed.append(waveform)
            continue
        if verdict is FormatCheck.INCOMPATIBLE or not resample:
            raise FormatMismatchError(
                f"waveform {position} is {waveform.channel_count}ch/{waveform.sample_rate}Hz, "
                f"expected {reference.channel_count}ch/{reference.sample_rate}Hz"
            )
        LOGGER.info(
            "Resampling waveform %s from %sch/%sHz to %sch/%sHz",
            position,
            waveform.channel_count,
            waveform.sample_rate,
            reference.channel_count,
            reference.sample_rate,
        )
        conformed.append(
            conform(
                waveform,
                reference.sample_rate,
                reference.channel_count,
                filter_name=filter_name,
            )
        )

    total_frames = sum(waveform.frame_count for waveform in conformed)
    merged = np.empty((reference.channel_count, total_frames), dtype=np.float32)
    offset = 0
    for waveform in conformed:
        frames = waveform.frame_count
        merged[:, offset : offset + frames] = waveform.samples
        offset += frames
    return MergedWaveform(sample_rate=reference.sample_rate, samples=merged)


__all__ = ["check_format", "concatenate", "conform"]
