"""tally - a personal expense tracker with weekly reports."""

__version__ = "0.1.0"
