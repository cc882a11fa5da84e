"""Resume intake: turn uploaded resume documents into structured, validated data."""

__version__ = "1.0.0"
