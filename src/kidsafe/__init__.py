"""Kid-Safe Media: mute profanity and cut scenes from videos using word timestamps."""

__version__ = "0.1.0"
