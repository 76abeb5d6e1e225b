"""Phone directory: subscribers, their phone numbers, and snapshot persistence."""

__version__ = "0.1.0"
