"""Reading note-on events from MIDI files and turning them into pitches."""

from __future__ import annotations

import io
import logging
import re
from itertools import cycle, islice

import mido

logger = logging.getLogger(__name__)

PITCH_COUNT = 157
"""Number of syllables in the sung text, and so of pitches needed."""

_FIRST_KEY = 12  # C in octave 1, with the key of C(octave) being 12 * octave
_FREQUENCIES = (
    32.70, 34.65, 36.71, 38.89, 41.20, 43.65, 46.25, 49.00, 51.91, 55.00, 58.27, 61.74,
    65.41, 69.30, 73.42, 77.78, 82.41, 87.31, 92.50, 98.00, 103.83, 110.00, 116.54, 123.47,
    130.81, 138.59, 146.83, 155.56, 164.81, 174.61, 185.00, 196.00, 207.65, 220.00, 233.08, 246.94,
    261.63, 277.18, 293.66, 311.13, 329.63, 349.23, 369.99, 392.00, 415.30, 440.00, 466.16, 493.88,
    523.25, 554.37, 587.33, 622.25, 659.26, 698.46, 739.99, 783.99, 830.61, 880.00, 932.33, 987.77,
    1046.50, 1108.73, 1174.66, 1244.51, 1318.51, 1396.91, 1479.98, 1567.98, 1661.22, 1760.00,
    1864.66, 1975.53,
    2093.00, 2217.46, 2349.32, 2489.02, 2637.02, 2793.83, 2959.96, 3135.96, 3322.44, 3520.00,
    3729.31, 3951.07,
)

HERTZ_TABLE: dict[int, float] = dict(enumerate(_FREQUENCIES, start=_FIRST_KEY))

_REJECT_PATTERN = re.compile(r"/(?i:^.*\.(mid|midi)$)/gm")

_MIDI_READ_ERRORS = (OSError, EOFError, ValueError, KeyError, IndexError)


def note_frequency(note: int) -> float:
    """Frequency in hertz for a MIDI key; 0.0 for keys outside the table."""
    return HERTZ_TABLE.get(note, 0.0)


def is_rejected_filename(filename: str) -> bool:
    """Whether an uploaded file name is refused as not being a MIDI file."""
    return _REJECT_PATTERN.search(filename) is not None


def read_note_on_keys(data: bytes, track_no: int) -> list[int]:
    """Return the keys of all note-on messages in track ``track_no`` of a MIDI file.

    Raises ValueError when ``data`` is not a readable standard MIDI file.
    """
    try:
        midi_file = mido.MidiFile(file=io.BytesIO(data))
    except _MIDI_READ_ERRORS as exc:
        raise ValueError(f"could not read MIDI data: {exc}") from exc

    keys: list[int] = []
    for index, track in enumerate(midi_file.tracks):
        ticks = 0
        for message in track:
            ticks += message.time
            if message.is_meta:
                logger.info("[%d] @%d ticks %s", index, ticks, message)
            elif index == track_no and message.type == "note_on":
                keys.append(message.note)
    return keys


def pitch_list(keys: list[int]) -> list[float]:
    """Map keys to exactly PITCH_COUNT frequencies, repeating the keys as needed."""
    if not keys:
        raise ValueError("no note-on events to take pitches from")
    return [note_frequency(key) for key in islice(cycle(keys), PITCH_COUNT)]