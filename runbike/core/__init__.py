"""Core values shared by every layer: constants, models, framing and sessions."""
