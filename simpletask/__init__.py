"""SimpleTask: a single-user to-do list with local persistence."""

__version__ = "1.0.0"
