"""Render the Adon Olam syllables to the melody of an uploaded MIDI track."""

__version__ = "0.1.0"
__all__ = ["__version__"]