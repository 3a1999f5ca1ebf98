"""AI-assisted story continuation with bounded history and saved stories."""

__version__ = "0.1.0"
