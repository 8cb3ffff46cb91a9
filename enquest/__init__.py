"""EnQuest: icebreaker and social bingo backend for corporate events."""

__version__ = "1.0.0"
