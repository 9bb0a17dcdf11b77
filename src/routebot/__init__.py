"""Discord bot that routes guild channels to an AI chat proxy or an image proxy."""

__version__ = "0.1.0"
