"""Turning a list of pitches into a sung phrase of the text's syllables."""

from __future__ import annotations

import io
import math
import sys
import wave
from array import array
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import BinaryIO

SYLLABLES: tuple[str, ...] = (
    "a", "don", "o", "l@m", "aS", "er", "ma", "laX", "b@", "ter",
    "em", "kol", "je", "tsir", "niv", "ra", "l@", "et", "na:", "sa",
    "veX", "ef", "tso", "kol", "az", "ai", "mel", "eX", "Se", "mo",
    "nik", "ra", "ve", "aX", "a", "rei", "kix", "lot", "ha", "kol",
    "l@", "va", "do", "jim", "loX", "no", "ra", "v@", "hu", "ha",
    "ja", "v@", "hu", "ho", "ve", "v@", "hu", "ji", "je", "bet",
    "if", "ar", "a", "v@", "hu", "eX", "ad", "v@", "ein", "Se",
    "ni", "l@", "ham", "Sil", "lo", "l@", "haX", "bi", "ra", "bli",
    "re", "Sit", "bli", "taX", "lit", "v@", "lo", "ha", "oz", "v@",
    "ham", "mis", "rah", "v@", "hu", "el", "i", "v@", "Xai", "go",
    "al", "i", "v@", "tsur", "Xev", "li", "b@", "et", "tsa", "ra",
    "v@", "hu", "nis", "si", "u", "ma", "nos", "li", "m@", "nat",
    "ko", "si", "b@", "jom", "ek", "ra", "b@", "ja", "do", "af",
    "kid", "ru", "Xi", "b@", "et", "iS", "an", "v@", "a", "ir",
    "a", "v@", "im", "ru", "Xi", "g@", "vi", "ja", "ti", "ad",
    "on", "ai", "li", "v@", "lo", "ir", "a",
)


@dataclass(frozen=True)
class SyllableParams:
    syllable: str
    pitch_shift: float
    voice: str = "he"


class SpeechSynthesizer:
    """Renders a phrase as mono 16-bit WAV, one sustained tone per syllable."""

    def __init__(
        self, sample_rate: int = 22050, syllable_seconds: float = 0.3, amplitude: float = 0.5
    ) -> None:
        if sample_rate <= 0 or syllable_seconds <= 0 or not 0.0 <= amplitude <= 1.0:
            raise ValueError("invalid synthesizer settings")
        self.sample_rate = sample_rate
        self.syllable_seconds = syllable_seconds
        self.amplitude = amplitude

    def synthesize(self, syllables: Iterable[SyllableParams], output: BinaryIO) -> None:
        """Write the WAV rendering of ``syllables`` to ``output``."""
        count = max(1, round(self.sample_rate * self.syllable_seconds))
        peak = self.amplitude * 32767
        samples = array("h")
        for params in syllables:
            step = 2 * math.pi * max(params.pitch_shift, 0.0) / self.sample_rate
            samples.extend(round(peak * math.sin(step * n)) for n in range(count))
        if sys.byteorder == "big":
            samples.byteswap()
        with wave.open(output, "wb") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(self.sample_rate)
            wav.writeframes(samples.tobytes())


def build_syllables(pitches: Sequence[float]) -> list[SyllableParams]:
    """Pair each pitch with the syllable at the same position of the text."""
    if len(pitches) > len(SYLLABLES):
        raise ValueError(f"{len(pitches)} pitches but only {len(SYLLABLES)} syllables")
    return [SyllableParams(s, p) for s, p in zip(SYLLABLES, pitches)]


def make_speech(pitches: Sequence[float], synthesizer: SpeechSynthesizer | None = None) -> bytes:
    """Sing the text at ``pitches`` and return the WAV bytes."""
    buffer = io.BytesIO()
    (synthesizer or SpeechSynthesizer()).synthesize(build_syllables(pitches), buffer)
    return buffer.getvalue()