import io
import wave

import pytest

from adonolam.notes import PITCH_COUNT
from adonolam.speech import (
    SYLLABLES,
    SpeechSynthesizer,
    SyllableParams,
    build_syllables,
    make_speech,
)

VOICE = "he"


def _fast() -> SpeechSynthesizer:
    return SpeechSynthesizer(sample_rate=8000, syllable_seconds=0.01)


def _read(data: bytes) -> tuple[wave._wave_params, bytes]:
    with wave.open(io.BytesIO(data), "rb") as wav:
        return wav.getparams(), wav.readframes(wav.getnframes())


def _samples(frames: bytes) -> list[int]:
    return [
        int.from_bytes(frames[i:i + 2], "little", signed=True)
        for i in range(0, len(frames), 2)
    ]


def test_text_has_one_syllable_per_pitch():
    syllables = build_syllables([100.0] * PITCH_COUNT)
    assert len(syllables) == len(SYLLABLES) == PITCH_COUNT


def test_build_syllables_pairs_in_order():
    result = build_syllables([261.63, 293.66])
    assert result == [
        SyllableParams("a", 261.63, VOICE),
        SyllableParams("don", 293.66, VOICE),
    ]
    assert all(item.voice == "he" for item in result)


def test_build_syllables_rejects_too_many_pitches():
    with pytest.raises(ValueError):
        build_syllables([1.0] * (len(SYLLABLES) + 1))


def test_make_speech_writes_mono_16bit_wav():
    synth = _fast()
    params, _ = _read(make_speech([440.0, 220.0], synth))
    assert params.nchannels == 1
    assert params.sampwidth == 2
    assert params.framerate == synth.sample_rate


def test_frame_count_scales_with_syllables():
    synth = _fast()
    one, _ = _read(make_speech([440.0], synth))
    three, _ = _read(make_speech([440.0, 330.0, 220.0], synth))
    assert three.nframes == 3 * one.nframes
    assert one.nframes == synth.frames_per_syllable


def test_zero_pitch_is_silent():
    _, frames = _read(make_speech([0.0], _fast()))
    assert frames and set(frames) == {0}


def test_pitched_syllable_is_audible():
    synth = _fast()
    _, frames = _read(make_speech([440.0], synth))
    samples = _samples(frames)
    assert len(samples) == synth.frames_per_syllable
    assert max(abs(s) for s in samples) > 0


def test_synthesize_writes_to_stream():
    out = io.BytesIO()
    _fast().synthesize(build_syllables([330.0]), out)
    assert out.getvalue()[:4] == b"RIFF"
    assert out.getvalue()[8:12] == b"WAVE"


@pytest.mark.parametrize(
    "kwargs",
    [{"sample_rate": 0}, {"syllable_seconds": 0}, {"amplitude": 1.5}],
)
def test_invalid_synthesizer_settings(kwargs):
    with pytest.raises(ValueError):
        SpeechSynthesizer(**kwargs)