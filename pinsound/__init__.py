"""PinSound: mood, story and soundtrack for a Pinterest image."""

__version__ = "0.1.0"
