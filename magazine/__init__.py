"""AI Writing About AI Magazine: content generation and static-site artifact pipeline."""

__version__ = "1.0.0"
