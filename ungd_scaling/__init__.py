"""Per-year Wordscores scaling of UN General Debate speeches."""

__version__ = "0.1.0"
