"""DocSpace: per-user Markdown documents in folders with AI transformations."""

__version__ = "0.1.0"
