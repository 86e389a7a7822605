"""Chat-driven task tracker: create, claim, release and resolve tasks from chat commands."""

__version__ = "0.1.0"
