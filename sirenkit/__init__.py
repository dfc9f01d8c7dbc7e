"""Configuration loading, message framing, socket channels and UDP monitoring for a microphone-array voice front end."""

__version__ = "0.1.0"