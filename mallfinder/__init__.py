"""Mall Finder - nearby malls, stores and promotions over Telegram."""

__version__ = "0.1.0"
