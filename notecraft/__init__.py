"""NoteCraft: newsletter drafts, their sources and local persistence."""

__version__ = "0.1.0"
