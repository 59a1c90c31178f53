import base64
import struct

import numpy as np

from client.podcaster.audio.types import DecodedWaveform
from client.podcaster.audio.wav_encoder import (
    HEADER_SIZE,
    encode_payload,
    encode_wav,
    float_to_pcm16,
)

from conftest import sine_wave


def _fields(container: bytes):
    return struct.unpack("<4sI4s4sIHHIIHH4sI", container[:HEADER_SIZE])


def test_header_matches_riff_layout_for_mono_sine():
    waveform = DecodedWaveform(sample_rate=8000, samples=sine_wave(1.0, 8000, frequency=440))
    container = encode_wav(waveform)
    (
        riff,
        chunk_size,
        wave,
        fmt,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits,
        data_id,
        data_size,
    ) = _fields(container)

    assert riff == b"RIFF"
    assert wave == b"WAVE"
    assert fmt == b"fmt "
    assert data_id == b"data"
    assert fmt_size == 16
    assert audio_format == 1
    assert channels == 1
    assert sample_rate == 8000
    assert byte_rate == 8000 * 1 * 2
    assert block_align == 2
    assert bits == 16
    assert data_size == 8000 * 1 * 2
    assert chunk_size == 36 + data_size
    assert len(container) == HEADER_SIZE + data_size


def test_stereo_samples_are_interleaved():
    samples = np.array([[0.5, -0.5, 0.25], [-1.0, 1.0, 0.0]], dtype=np.float32)
    container = encode_wav(DecodedWaveform(sample_rate=16000, samples=samples))
    fields = _fields(container)
    assert fields[6] == 2
    assert fields[8] == 16000 * 2 * 2
    assert fields[9] == 4
    assert fields[12] == 3 * 2 * 2

    body = np.frombuffer(container[HEADER_SIZE:], dtype="<i2")
    assert body.tolist() == [16383, -32768, -16384, 32767, 8191, 0]


def test_pcm_conversion_uses_asymmetric_scale_and_clamps():
    values = np.array([-2.0, -1.0, -0.5, 0.0, 0.5, 1.0, 3.0, np.nan])
    assert float_to_pcm16(values).tolist() == [-32768, -32768, -16384, 0, 16383, 32767, 32767, 0]


def test_conversion_truncates_toward_zero():
    values = np.array([0.1, -0.1])
    # 0.1 * 32767 = 3276.7 and -0.1 * 32768 = -3276.8
    assert float_to_pcm16(values).tolist() == [3276, -3276]


def test_payload_base64_has_no_data_url_prefix():
    waveform = DecodedWaveform(sample_rate=22050, samples=sine_wave(0.1, 22050))
    payload = encode_payload(waveform)
    assert not payload.encoding_base64.startswith("data:")
    assert base64.b64decode(payload.encoding_base64) == payload.container_bytes


def test_two_segments_of_two_and_three_seconds_report_expected_data_size():
    merged = DecodedWaveform(sample_rate=22050, samples=np.zeros((1, 5 * 22050), dtype=np.float32))
    fields = _fields(encode_wav(merged))
    assert fields[12] == 220500
    assert fields[1] == 36 + 220500
